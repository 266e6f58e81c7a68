"""
NVDA speech through nvdaControllerClient.dll.

The controller client ships with NVDA and must sit next to the game
executable or on the DLL search path.
"""

from __future__ import annotations

import ctypes
from typing import Optional

from turnabout_access.errors import SpeechUnavailableError
from turnabout_access.speech.capabilities.base import SpeechCapability

CONTROLLER_DLL = "nvdaControllerClient.dll"


def _load(library: str = CONTROLLER_DLL) -> Optional[ctypes.CDLL]:
    try:
        return ctypes.windll.LoadLibrary(library)
    except (OSError, AttributeError):
        # not Windows, or NVDA not installed
        return None


class NVDACapability(SpeechCapability):
    """Speaks through a running NVDA.

    Example:
        speech = NVDACapability()
        if speech.is_available:
            speech.say("Dot 1 of 12, E top-left")
    """

    def __init__(self, library: str = CONTROLLER_DLL) -> None:
        self._client = _load(library)

    @property
    def name(self) -> str:
        return "NVDA"

    @property
    def is_available(self) -> bool:
        if self._client is None:
            return False
        try:
            # zero means NVDA answered
            return self._client.nvdaController_testIfRunning() == 0
        except Exception:
            return False

    def say(self, text: str, interrupt: bool = False) -> None:
        if self._client is None:
            raise SpeechUnavailableError(self.name, f"{CONTROLLER_DLL} not loaded")
        if interrupt:
            self._client.nvdaController_cancelSpeech()
        self._client.nvdaController_speakText(ctypes.c_wchar_p(text))

    def stop(self) -> None:
        if self._client is not None:
            self._client.nvdaController_cancelSpeech()

    def close(self) -> None:
        self._client = None
