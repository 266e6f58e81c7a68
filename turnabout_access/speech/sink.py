"""
Speech Sink - The single outbound channel for announcements.

The sink formats announcements, drops identical lines that arrive within
the duplicate window, remembers the last meaningful line for repeat, and
forwards text to a SpeechCapability.

Speech is best-effort. If the capability is missing or reports itself
unavailable, that is logged once and every later emission is a silent
no-op for speech. Other capability errors are logged once per run of
failures and delivery is retried on the next call. Formatting, dedup and
repeat memory keep working either way.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from turnabout_access.errors import SpeechUnavailableError
from turnabout_access.speech.capabilities.base import NullCapability, SpeechCapability
from turnabout_access.speech.cleaner import TextCleaner

logger = logging.getLogger(__name__)

DUPLICATE_WINDOW_SECONDS = 0.5


class Category(Enum):
    """Announcement category. Affects formatting, never content."""
    DIALOGUE = "dialogue"
    NARRATOR = "narrator"
    MENU = "menu"
    MENU_CHOICE = "menu_choice"
    INVESTIGATION = "investigation"
    EVIDENCE = "evidence"
    SYSTEM_MESSAGE = "system_message"
    TRIAL = "trial"
    PSYCHE_LOCK = "psyche_lock"


# Categories whose lines are kept for repeat
REPEATABLE = frozenset({Category.DIALOGUE, Category.NARRATOR})


def format_text(speaker: Optional[str], body: str, category: Category) -> str:
    """Format an announcement for speech.

    Only dialogue with a speaker is prefixed ("Phoenix: Objection!");
    every other category is the cleaned body verbatim.
    """
    text = TextCleaner.clean(body)
    if category == Category.DIALOGUE and speaker and speaker.strip():
        return f"{speaker.strip()}: {text}"
    return text


@dataclass(frozen=True)
class Announcement:
    """An emitted announcement.

    Attributes:
        body: Unformatted announcement text
        category: Announcement category
        speaker: Optional speaker name (dialogue only)
        timestamp: Clock reading at emission
    """
    body: str
    category: Category = Category.SYSTEM_MESSAGE
    speaker: Optional[str] = None
    timestamp: float = field(default_factory=time.monotonic)

    @property
    def text(self) -> str:
        return format_text(self.speaker, self.body, self.category)


class SpeechSink:
    """Formats, deduplicates and delivers announcements.

    Example:
        sink = SpeechSink(detect_capability("auto"))
        sink.output("Phoenix", "Hold it!", Category.DIALOGUE)
        sink.announce("Vase puzzle.", Category.INVESTIGATION)
        sink.repeat_last()   # "Phoenix: Hold it!"
    """

    def __init__(
        self,
        capability: Optional[SpeechCapability] = None,
        duplicate_window_s: float = DUPLICATE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        diagnostics: Optional[object] = None,
    ) -> None:
        self._capability = capability or NullCapability()
        self.duplicate_window_s = duplicate_window_s
        self._clock = clock
        self._diagnostics = diagnostics

        self.last_message: Optional[Announcement] = None
        self._last_key: str = ""
        self.last_emit_time: Optional[float] = None
        self._repeat: Optional[tuple[str, str, Category]] = None

        self._speech_checked = False
        self._speech_disabled = False
        self._speech_failing = False

    @property
    def capability(self) -> SpeechCapability:
        return self._capability

    @property
    def repeat_buffer(self) -> Optional[tuple[str, str, Category]]:
        """(speaker, body, category) of the last dialogue/narrator line."""
        return self._repeat

    def output(
        self,
        speaker: Optional[str],
        body: str,
        category: Category = Category.DIALOGUE,
    ) -> bool:
        """Emit an announcement.

        Args:
            speaker: Speaker name, used only for dialogue
            body: Announcement text
            category: Announcement category

        Returns:
            True if the announcement was emitted, False if empty or a duplicate
        """
        if not body or not body.strip():
            return False

        formatted = format_text(speaker, body, category)
        if not formatted:
            return False

        now = self._clock()
        if (
            formatted == self._last_key
            and self.last_emit_time is not None
            and (now - self.last_emit_time) < self.duplicate_window_s
        ):
            return False

        self._last_key = formatted
        self.last_emit_time = now
        self.last_message = Announcement(
            body=body,
            category=category,
            speaker=speaker or None,
            timestamp=now,
        )

        if category in REPEATABLE:
            self._repeat = (speaker or "", body, category)

        self.speak_raw(formatted)
        logger.info("[%s] %s", category.value, formatted)
        return True

    def announce(self, body: str, category: Category = Category.SYSTEM_MESSAGE) -> bool:
        """Announce text without a speaker name."""
        return self.output("", body, category)

    def repeat_last(self) -> bool:
        """Replay the last dialogue or narrator line, ignoring the dedup window."""
        if self._repeat is None:
            logger.info("Nothing to repeat")
            return False

        speaker, body, category = self._repeat
        formatted = format_text(speaker, body, category)
        self.speak_raw(formatted)
        logger.info("Repeating: '%s'", formatted)
        return True

    def speak_raw(self, text: str, interrupt: bool = False) -> bool:
        """Pass text straight to the speech capability.

        Args:
            text: Text to speak
            interrupt: Cut off in-flight speech first

        Returns:
            True if the capability accepted the text
        """
        if not text or not text.strip():
            return False
        if not self._speech_ready():
            return False

        try:
            self._capability.say(text, interrupt)
        except Exception as e:
            self._speech_failed(e)
            return False
        self._speech_failing = False
        return True

    def stop(self) -> None:
        """Stop in-flight speech (best-effort)."""
        if not self._speech_ready():
            return
        try:
            self._capability.stop()
        except Exception as e:
            self._speech_failed(e)

    def set_capability(self, capability: SpeechCapability) -> None:
        """Swap the speech capability and re-enable speech."""
        self._capability = capability
        self._speech_checked = False
        self._speech_disabled = False
        self._speech_failing = False

    def _speech_ready(self) -> bool:
        if self._speech_disabled:
            return False
        if not self._speech_checked:
            self._speech_checked = True
            available = False
            try:
                available = self._capability.is_available
            except Exception as e:
                self._disable_speech(e)
                return False
            if not available:
                self._speech_disabled = True
                logger.warning(
                    "Speech capability '%s' unavailable; announcements are silent",
                    self._capability.name,
                )
                return False
        return True

    def _speech_failed(self, error: Exception) -> None:
        """Handle a capability error.

        SpeechUnavailableError turns speech off until set_capability().
        Anything else is logged once per run of failures and the next
        call tries again.
        """
        if isinstance(error, SpeechUnavailableError):
            self._disable_speech(error)
            return
        if not self._speech_failing:
            self._speech_failing = True
            self._report(error)

    def _disable_speech(self, error: Exception) -> None:
        if not self._speech_disabled:
            self._report(error)
        self._speech_disabled = True

    def _report(self, error: Exception) -> None:
        logger.warning("Speech error from %s: %s", self._capability.name, error)
        if self._diagnostics is not None:
            self._diagnostics.record("speech", error, capability=self._capability.name)
