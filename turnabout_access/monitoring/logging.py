"""
Structured logging and diagnostics for the announcement engine.

The engine never lets an error reach the host. Errors it swallows are
logged through the standard logging module and recorded in a bounded
DiagnosticLog for later inspection. Mode transitions and absorbed errors
are also written as structured event lines, one per event.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO

PACKAGE_LOGGER = "turnabout_access"


class LogLevel(Enum):
    """Event line levels, named after the stdlib levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.name)


@dataclass
class EventLine:
    """One structured event.

    Context fields (bound with StructuredLogger.bind) and per-call fields
    are flattened into the top level when serialised.
    """

    level: LogLevel
    event: str
    message: str = ""
    fields: dict[str, Any] = field(default_factory=dict)
    at: float = field(default_factory=time.time)

    def as_json(self) -> str:
        payload = {
            "ts": round(self.at, 3),
            "level": self.level.value,
            "event": self.event,
        }
        if self.message:
            payload["message"] = self.message
        payload.update(self.fields)
        return json.dumps(payload, default=str)

    def as_text(self) -> str:
        stamp = time.strftime("%H:%M:%S", time.localtime(self.at))
        text = f"{stamp} [{self.level.name}] [{self.event}]"
        if self.message:
            text += f" {self.message}"
        if self.fields:
            pairs = ", ".join(f"{k}={v}" for k, v in self.fields.items())
            text += f" ({pairs})"
        return text


class StructuredLogger:
    """Writes engine events as JSON or readable lines.

    The output stream is resolved when a line is written, so a logger
    created at import time follows later redirection of sys.stderr.

    Example:
        events = StructuredLogger("turnabout_access").bind(component="dispatcher")
        events.tracker_transition("rotate_puzzle", True)
        events.swallowed("speech", OSError("nvda client missing"))
    """

    def __init__(
        self,
        name: str = PACKAGE_LOGGER,
        level: LogLevel = LogLevel.INFO,
        output: TextIO | None = None,
        json_format: bool = True,
        context: dict[str, Any] | None = None,
    ):
        self.name = name
        self.level = level
        self.json_format = json_format
        self._output = output
        self._context = dict(context or {})
        self._write_lock = threading.Lock()

    def bind(self, **context: Any) -> StructuredLogger:
        """Copy of this logger with extra fields on every line."""
        return StructuredLogger(
            self.name,
            self.level,
            self._output,
            self.json_format,
            {**self._context, **context},
        )

    def emit(self, level: LogLevel, event: str, message: str = "", **fields: Any) -> None:
        if level.numeric < self.level.numeric:
            return
        line = EventLine(level, event, message, {**self._context, **fields})
        text = line.as_json() if self.json_format else line.as_text()
        stream = self._output or sys.stderr
        with self._write_lock:
            stream.write(text + "\n")

    def debug(self, event: str, message: str = "", **fields: Any) -> None:
        self.emit(LogLevel.DEBUG, event, message, **fields)

    def info(self, event: str, message: str = "", **fields: Any) -> None:
        self.emit(LogLevel.INFO, event, message, **fields)

    def warning(self, event: str, message: str = "", **fields: Any) -> None:
        self.emit(LogLevel.WARNING, event, message, **fields)

    def error(self, event: str, message: str = "", **fields: Any) -> None:
        self.emit(LogLevel.ERROR, event, message, **fields)

    def tracker_transition(self, tracker: str, active: bool, **extra: Any) -> None:
        """Log a mode enter/exit."""
        verb = "entered" if active else "exited"
        self.info(
            "tracker_enter" if active else "tracker_exit",
            f"{tracker} {verb}",
            tracker=tracker,
            **extra,
        )

    def swallowed(self, source: str, error: BaseException, **extra: Any) -> None:
        """Log an error the engine absorbed."""
        self.warning(
            "swallowed_error",
            str(error),
            source=source,
            error_type=type(error).__name__,
            **extra,
        )


@dataclass
class DiagnosticRecord:
    """One swallowed error."""

    source: str
    message: str
    error_type: str
    timestamp: float = field(default_factory=time.time)
    data: dict[str, Any] = field(default_factory=dict)


class DiagnosticLog:
    """Bounded record of errors the engine absorbed.

    Example:
        diagnostics = DiagnosticLog(capacity=50)
        diagnostics.record("speech", OSError("dll missing"))
        diagnostics.records()[-1].error_type   # "OSError"
    """

    def __init__(self, capacity: int = 200, logger: StructuredLogger | None = None) -> None:
        self._records: deque[DiagnosticRecord] = deque(maxlen=capacity)
        self._logger = logger

    def record(self, source: str, error: BaseException, **data: Any) -> DiagnosticRecord:
        entry = DiagnosticRecord(
            source=source,
            message=str(error),
            error_type=type(error).__name__,
            data=data,
        )
        self._records.append(entry)
        if self._logger is not None:
            self._logger.swallowed(source, error, **data)
        return entry

    def records(self, source: str | None = None) -> list[DiagnosticRecord]:
        """Snapshot of recorded errors, optionally for one source."""
        if source is None:
            return list(self._records)
        return [r for r in self._records if r.source == source]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


_events: StructuredLogger | None = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> StructuredLogger:
    """Set the package log level and install the shared event logger.

    Args:
        level: Minimum level, as a LogLevel or its name.
        output: Stream for event lines. Defaults to stderr.
        json_format: Write JSON lines instead of readable text.

    Returns:
        The shared event logger.

    Raises:
        ValueError: If level names no known level.
    """
    global _events

    level = LogLevel(level.lower()) if isinstance(level, str) else level
    logging.getLogger(PACKAGE_LOGGER).setLevel(level.numeric)
    _events = StructuredLogger(PACKAGE_LOGGER, level, output, json_format)
    return _events


def get_logger() -> StructuredLogger:
    """The shared event logger, created with defaults on first use."""
    global _events

    if _events is None:
        _events = StructuredLogger()
    return _events
