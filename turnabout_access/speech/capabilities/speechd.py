"""
Speech Dispatcher Adapter - Linux speech output (the engine Orca uses).

Talks SSIP through the python3-speechd bindings, which are distributed
with speech-dispatcher itself rather than on the package index.
"""

from __future__ import annotations

from typing import Any, Optional

from turnabout_access.errors import SpeechUnavailableError
from turnabout_access.speech.capabilities.base import SpeechCapability


class SpeechDispatcherCapability(SpeechCapability):
    """Adapter for speech-dispatcher.

    Example:
        speech = SpeechDispatcherCapability()
        if speech.is_available:
            speech.say("Zoom 150%")
    """

    def __init__(self, client_name: str = "turnabout-access") -> None:
        self._client_name = client_name
        self._client: Optional[Any] = None
        self._connect()

    def _connect(self) -> None:
        try:
            import speechd
            self._client = speechd.SSIPClient(self._client_name)
        except Exception:
            self._client = None

    @property
    def name(self) -> str:
        return "speech-dispatcher"

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def say(self, text: str, interrupt: bool = False) -> None:
        if self._client is None:
            raise SpeechUnavailableError(self.name, "not connected")

        if interrupt:
            self._client.cancel()
        self._client.speak(text)

    def stop(self) -> None:
        if self._client is not None:
            self._client.cancel()

    def close(self) -> None:
        if self._client is not None:
            try:
                self._client.close()
            finally:
                self._client = None
