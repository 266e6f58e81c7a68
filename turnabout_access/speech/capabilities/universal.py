"""
UniversalSpeech Adapter - Screen reader output with SAPI fallback.

UniversalSpeech routes text to whichever screen reader is running
(NVDA, JAWS, Window-Eyes, ...) and, once native speech is enabled,
falls back to SAPI when none is.
"""

from __future__ import annotations

import ctypes
from typing import Optional

from turnabout_access.errors import SpeechUnavailableError
from turnabout_access.speech.capabilities.base import SpeechCapability

# From UniversalSpeech.h
SP_ENABLE_NATIVE_SPEECH = 0xFFFF


class UniversalSpeechCapability(SpeechCapability):
    """Adapter for the UniversalSpeech native library.

    Example:
        speech = UniversalSpeechCapability()
        if speech.is_available:
            speech.say("Vase puzzle.")
    """

    def __init__(self, library: str = "UniversalSpeech.dll") -> None:
        self._library_name = library
        self._lib: Optional[ctypes.CDLL] = None
        self._load()

    def _load(self) -> None:
        try:
            lib = ctypes.cdll.LoadLibrary(self._library_name)
            lib.speechSay.argtypes = [ctypes.c_wchar_p, ctypes.c_int]
            lib.speechSay.restype = ctypes.c_int
            lib.speechStop.restype = ctypes.c_int
            lib.speechSetValue.argtypes = [ctypes.c_int, ctypes.c_int]
            lib.speechSetValue(SP_ENABLE_NATIVE_SPEECH, 1)
            self._lib = lib
        except (OSError, AttributeError):
            self._lib = None

    @property
    def name(self) -> str:
        return "UniversalSpeech"

    @property
    def is_available(self) -> bool:
        return self._lib is not None

    def say(self, text: str, interrupt: bool = False) -> None:
        if self._lib is None:
            raise SpeechUnavailableError(self.name, f"{self._library_name} not loaded")
        self._lib.speechSay(text, 1 if interrupt else 0)

    def stop(self) -> None:
        if self._lib is None:
            raise SpeechUnavailableError(self.name, f"{self._library_name} not loaded")
        self._lib.speechStop()

    def close(self) -> None:
        self._lib = None
