"""
Engine Errors - Domain-specific error types.

Error hierarchy:
    AccessError (base)
    ├── ProbeError
    ├── ProjectionError
    ├── ConfigError
    └── SpeechUnavailableError

None of these cross the host boundary. Probe errors become NotAvailable,
projection and speech errors degrade the feature, and only ConfigError is
raised to callers (from explicit configuration loading).
"""

from __future__ import annotations

from typing import Any


class AccessError(Exception):
    """Base error for all engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProbeError(AccessError):
    """
    Raised inside a probe when a host path cannot be resolved.

    Always caught at StateProbe.read and converted to NotAvailable.
    """

    def __init__(self, path: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(f"{path}: {message}", details)
        self.path = path


class ProjectionError(AccessError):
    """
    Raised when a point cannot be projected through a camera.

    Examples:
    - Singular view-projection matrix
    - Point at or behind the camera plane
    - Non-finite screen coordinates
    """


class ConfigError(AccessError):
    """Raised for invalid configuration files or values."""


class SpeechUnavailableError(AccessError):
    """Raised when a speech capability cannot be loaded."""

    def __init__(self, capability: str, message: str):
        super().__init__(f"{capability}: {message}", {"capability": capability})
        self.capability = capability
