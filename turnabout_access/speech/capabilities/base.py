"""
Speech Capability Base - Abstract outbound speech adapter.

A capability is the single outbound channel to an external speech engine
or screen reader. Implementations must be fire-and-forget: say() returns
immediately and never waits for playback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class SpeechMode(Enum):
    """Speech capability selection mode."""
    AUTO = "auto"            # First available adapter for the platform
    UNIVERSAL = "universal"  # UniversalSpeech library (screen reader or SAPI)
    NVDA = "nvda"            # NVDA controller client
    ORCA = "orca"            # speech-dispatcher (Linux)
    SAY = "say"              # macOS say command
    NONE = "none"            # Silent


class SpeechCapability(ABC):
    """Abstract base class for speech adapters.

    Adapters handle:
    - Loading the underlying engine (and reporting availability)
    - Speaking text, optionally cutting off in-flight speech
    - Stopping speech
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the speech engine."""
        ...

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the engine is loaded and usable."""
        ...

    @abstractmethod
    def say(self, text: str, interrupt: bool = False) -> None:
        """Speak text.

        Args:
            text: Text to speak
            interrupt: If True, cut off in-flight speech first

        Raises:
            SpeechUnavailableError: If the engine cannot be reached
        """
        ...

    def stop(self) -> None:
        """Stop current speech."""
        pass  # Optional: not all engines support this

    def close(self) -> None:
        """Release engine resources."""
        pass


class NullCapability(SpeechCapability):
    """No-op capability when no speech engine is available."""

    @property
    def name(self) -> str:
        return "None"

    @property
    def is_available(self) -> bool:
        return False

    def say(self, text: str, interrupt: bool = False) -> None:
        pass
