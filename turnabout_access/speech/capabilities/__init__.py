"""
Speech Capabilities - Outbound speech adapters.

- universal.py - UniversalSpeech (screen readers with SAPI fallback, Windows)
- nvda.py      - NVDA controller client (Windows)
- speechd.py   - speech-dispatcher (Linux)
- say.py       - say command (macOS)

All follow the SpeechCapability protocol so the sink never depends on a
specific engine.
"""

from turnabout_access.speech.capabilities.base import (
    NullCapability,
    SpeechCapability,
    SpeechMode,
)
from turnabout_access.speech.capabilities.detection import (
    detect_capability,
    platform_modes,
)

__all__ = [
    "NullCapability",
    "SpeechCapability",
    "SpeechMode",
    "detect_capability",
    "platform_modes",
]
