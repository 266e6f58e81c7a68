"""
Text cleanup applied before any announcement is formatted.

Host text carries rich-text markup (<color=#ff0000>, <size=24>, ...),
stray control characters and layout whitespace. None of it is useful
when spoken.
"""

from __future__ import annotations

import re

_MARKUP_RE = re.compile(
    r"</?(?:color|b|i|u|s|size|sup|sub|material|quad|sprite|link|mark|font|"
    r"voffset|cspace|align|alpha|indent|line-height|nobr|noparse|style)"
    r"(?:=[^<>]*)?\s*/?>",
    re.IGNORECASE,
)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_SPACE_RE = re.compile(r"[\s　]+")


class TextCleaner:
    """Normalizes host text for speech."""

    @staticmethod
    def clean(text: str) -> str:
        """Strip markup and control characters, collapse whitespace, trim."""
        if not text:
            return ""
        text = _MARKUP_RE.sub("", text)
        text = _CONTROL_RE.sub("", text)
        return _SPACE_RE.sub(" ", text).strip()
