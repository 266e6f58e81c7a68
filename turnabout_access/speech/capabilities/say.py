"""
Say Adapter - macOS system speech via the say command.

Each utterance is a child process. Only one runs at a time: text that
arrives while one is speaking waits in a queue drained by a background
worker, so say() still returns immediately. Interrupting drops the queue
and terminates the process still speaking.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import threading
from collections import deque
from typing import Optional

from turnabout_access.errors import SpeechUnavailableError
from turnabout_access.speech.capabilities.base import SpeechCapability

logger = logging.getLogger(__name__)


class SayCapability(SpeechCapability):
    """Adapter for the macOS say command."""

    def __init__(self, command: str = "say") -> None:
        self._command = shutil.which(command)
        self._process: Optional[subprocess.Popen] = None
        self._pending: deque[str] = deque()
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None

    @property
    def name(self) -> str:
        return "say"

    @property
    def is_available(self) -> bool:
        return self._command is not None

    @property
    def pending(self) -> list[str]:
        """Texts waiting for the current utterance to finish."""
        with self._lock:
            return list(self._pending)

    def say(self, text: str, interrupt: bool = False) -> None:
        if self._command is None:
            raise SpeechUnavailableError(self.name, "say command not found")

        with self._lock:
            if interrupt:
                self._cancel()
            self._pending.append(text)
            if self._worker is None:
                self._worker = threading.Thread(
                    target=self._worker_loop,
                    daemon=True,
                    name="say-speech-worker",
                )
                self._worker.start()

    def stop(self) -> None:
        with self._lock:
            self._cancel()

    def _cancel(self) -> None:
        # Caller holds the lock
        self._pending.clear()
        if self._process is not None and self._process.poll() is None:
            self._process.terminate()

    def _worker_loop(self) -> None:
        """Speak queued texts one after another, then exit."""
        while True:
            with self._lock:
                if not self._pending:
                    self._worker = None
                    self._process = None
                    return
                text = self._pending.popleft()
                try:
                    self._process = subprocess.Popen(
                        [self._command, text],
                        stdout=subprocess.DEVNULL,
                        stderr=subprocess.DEVNULL,
                    )
                except OSError as e:
                    logger.warning("Cannot start %s: %s", self._command, e)
                    self._process = None
                    continue
                process = self._process
            process.wait()
