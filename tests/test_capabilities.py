"""
Tests for speech capability adapters and detection.
"""

import threading
import time

import pytest

from turnabout_access.errors import SpeechUnavailableError
from turnabout_access.speech.capabilities import (
    NullCapability,
    SpeechCapability,
    SpeechMode,
    detect_capability,
    platform_modes,
)
from turnabout_access.speech.capabilities import detection
from turnabout_access.speech.capabilities.nvda import NVDACapability
from turnabout_access.speech.capabilities.say import SayCapability
from turnabout_access.speech.capabilities.universal import UniversalSpeechCapability


class FakeProcess:
    """Stands in for a say child process that talks until finished."""

    started: list = []

    def __init__(self, args, **kwargs):
        self.args = args
        self.terminated = False
        self._done = threading.Event()
        FakeProcess.started.append(self)

    def poll(self):
        return 0 if self._done.is_set() else None

    def wait(self, timeout=None):
        self._done.wait(timeout)
        return 0

    def terminate(self):
        self.terminated = True
        self._done.set()

    def finish(self):
        self._done.set()


def wait_until(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not condition():
        assert time.monotonic() < deadline, "condition not reached"
        time.sleep(0.005)


@pytest.fixture
def fake_say(monkeypatch):
    monkeypatch.setattr("shutil.which", lambda command: "/usr/bin/say")
    monkeypatch.setattr("subprocess.Popen", FakeProcess)
    FakeProcess.started = []
    yield FakeProcess.started
    for process in FakeProcess.started:
        process.finish()


class Unavailable(SpeechCapability):
    name = "unavailable"
    is_available = False

    def say(self, text, interrupt=False):
        raise SpeechUnavailableError(self.name, "never")


class TestAdapters:
    """Tests for individual adapters."""

    def test_null_capability(self):
        null = NullCapability()
        assert null.is_available is False
        null.say("anything")
        null.stop()

    def test_universal_missing_library(self):
        speech = UniversalSpeechCapability(library="no-such-library-4417.so")
        assert speech.is_available is False
        with pytest.raises(SpeechUnavailableError):
            speech.say("Hello")

    def test_nvda_missing_client(self):
        speech = NVDACapability(library="no-such-client-4417.dll")
        assert speech.is_available is False
        speech.stop()
        with pytest.raises(SpeechUnavailableError) as info:
            speech.say("Hello")
        assert info.value.capability == "NVDA"

    def test_say_missing_command(self):
        speech = SayCapability(command="no-such-command-4417")
        assert speech.is_available is False
        with pytest.raises(SpeechUnavailableError) as info:
            speech.say("Hello")
        assert info.value.capability == "say"

    def test_say_queues_behind_running_utterance(self, fake_say):
        speech = SayCapability()
        speech.say("first")
        wait_until(lambda: len(fake_say) == 1)
        speech.say("second")
        assert len(fake_say) == 1
        assert speech.pending == ["second"]

        fake_say[0].finish()
        wait_until(lambda: len(fake_say) == 2)
        assert fake_say[1].args == ["/usr/bin/say", "second"]
        assert speech.pending == []

    def test_say_interrupt_terminates_previous(self, fake_say):
        speech = SayCapability()
        speech.say("first")
        wait_until(lambda: len(fake_say) == 1)
        speech.say("stale")
        speech.say("second", interrupt=True)
        wait_until(lambda: len(fake_say) == 2)
        assert fake_say[0].terminated is True
        assert fake_say[1].args == ["/usr/bin/say", "second"]

        fake_say[1].finish()
        wait_until(lambda: speech._worker is None)
        assert [p.args[1] for p in fake_say] == ["first", "second"]

    def test_say_stop_drops_queue(self, fake_say):
        speech = SayCapability()
        speech.say("first")
        wait_until(lambda: len(fake_say) == 1)
        speech.say("second")
        speech.stop()
        assert fake_say[0].terminated is True
        wait_until(lambda: speech._worker is None)
        assert len(fake_say) == 1


class TestDetection:
    """Tests for detect_capability."""

    def test_none_mode(self):
        assert isinstance(detect_capability("none"), NullCapability)
        assert isinstance(detect_capability(SpeechMode.NONE), NullCapability)

    def test_platform_modes_never_empty(self):
        assert platform_modes()

    def test_falls_back_to_null(self, monkeypatch):
        monkeypatch.setattr(detection, "_load", lambda mode: Unavailable)
        assert isinstance(detect_capability("auto"), NullCapability)

    def test_load_failure_falls_back(self, monkeypatch):
        def broken(mode):
            raise ImportError("no bindings")

        monkeypatch.setattr(detection, "_load", broken)
        assert isinstance(detect_capability(SpeechMode.ORCA), NullCapability)

    def test_first_available_wins(self, monkeypatch):
        class Working(Unavailable):
            name = "working"
            is_available = True

        monkeypatch.setattr(detection, "platform_modes", lambda: [SpeechMode.NVDA, SpeechMode.SAY])
        monkeypatch.setattr(
            detection, "_load",
            lambda mode: Working if mode == SpeechMode.SAY else Unavailable,
        )
        assert detect_capability().name == "working"
