"""
Logging and diagnostics.

Components:
    StructuredLogger - event-based log lines (JSON or human-readable)
    DiagnosticLog    - bounded record of errors the engine absorbed
"""

from turnabout_access.monitoring.logging import (
    DiagnosticLog,
    DiagnosticRecord,
    LogLevel,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticLog",
    "DiagnosticRecord",
    "LogLevel",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]
