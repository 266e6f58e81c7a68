"""
Speech output layer.

Modules:
    sink          - SpeechSink: formatting, dedup window, repeat memory
    cleaner       - TextCleaner for host text
    capabilities  - Outbound speech engine adapters
"""

from turnabout_access.speech.sink import (
    Announcement,
    Category,
    DUPLICATE_WINDOW_SECONDS,
    REPEATABLE,
    SpeechSink,
    format_text,
)
from turnabout_access.speech.cleaner import TextCleaner
from turnabout_access.speech.capabilities import (
    NullCapability,
    SpeechCapability,
    SpeechMode,
    detect_capability,
)

__all__ = [
    "Announcement",
    "Category",
    "DUPLICATE_WINDOW_SECONDS",
    "REPEATABLE",
    "SpeechSink",
    "format_text",
    "TextCleaner",
    "NullCapability",
    "SpeechCapability",
    "SpeechMode",
    "detect_capability",
]
