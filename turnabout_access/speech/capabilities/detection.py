"""
Speech Capability Detection - Pick a usable speech engine.

This module probes the platform for a speech engine and returns the
matching adapter, or a silent NullCapability when none is usable.
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import Type, Union

from turnabout_access.speech.capabilities.base import (
    NullCapability,
    SpeechCapability,
    SpeechMode,
)

logger = logging.getLogger(__name__)

_MODE_TO_MODULE = {
    SpeechMode.UNIVERSAL: ("universal", "UniversalSpeechCapability"),
    SpeechMode.NVDA: ("nvda", "NVDACapability"),
    SpeechMode.ORCA: ("speechd", "SpeechDispatcherCapability"),
    SpeechMode.SAY: ("say", "SayCapability"),
}


def _load(mode: SpeechMode) -> Type[SpeechCapability]:
    module_name, class_name = _MODE_TO_MODULE[mode]
    module = importlib.import_module(
        f"turnabout_access.speech.capabilities.{module_name}"
    )
    return getattr(module, class_name)


def platform_modes() -> list[SpeechMode]:
    """Adapters worth trying on this platform, in preference order."""
    if sys.platform == "win32":
        return [SpeechMode.UNIVERSAL, SpeechMode.NVDA]
    if sys.platform == "darwin":
        return [SpeechMode.SAY]
    return [SpeechMode.ORCA]


def detect_capability(mode: Union[SpeechMode, str] = SpeechMode.AUTO) -> SpeechCapability:
    """Get a speech adapter for a mode.

    Args:
        mode: Speech mode or its string value

    Returns:
        An available adapter, or NullCapability
    """
    if isinstance(mode, str):
        mode = SpeechMode(mode)

    if mode == SpeechMode.NONE:
        return NullCapability()

    modes = platform_modes() if mode == SpeechMode.AUTO else [mode]
    for candidate in modes:
        try:
            capability = _load(candidate)()
            if capability.is_available:
                logger.info("Using speech capability: %s", capability.name)
                return capability
        except Exception as e:
            logger.debug("Speech capability %s failed to load: %s", candidate.value, e)
            continue

    logger.warning("No speech capability available (mode=%s); speech is silent", mode.value)
    return NullCapability()
