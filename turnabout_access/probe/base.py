"""
State Probe - Read-only, failure-tolerant queries against host state.

Every tracker sees the host application only through this interface.
A query never raises: it returns Found(value) or NOT_AVAILABLE, and
narrowing a weakly typed value that has the wrong shape is also
NOT_AVAILABLE rather than an error.

Paths are dotted names ("science.cursor.position"). Each segment is
resolved as a mapping key, a sequence index (all-digit segment) or an
attribute, in that order.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from turnabout_access.errors import ProbeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    """A successfully read host value."""
    value: Any

    @property
    def available(self) -> bool:
        return True

    def get(self, default: Any = None) -> Any:
        return self.value

    def map(self, fn: Callable[[Any], Any]) -> "ProbeResult":
        """Apply a narrowing function; any failure becomes NOT_AVAILABLE."""
        try:
            return Found(fn(self.value))
        except Exception:
            return NOT_AVAILABLE

    def as_int(self) -> "ProbeResult":
        return self.map(_to_int)

    def as_float(self) -> "ProbeResult":
        return self.map(_to_float)

    def as_bool(self) -> "ProbeResult":
        return self.map(bool)

    def as_str(self) -> "ProbeResult":
        return self.map(_to_str)

    def as_list(self) -> "ProbeResult":
        return self.map(_to_list)

    def as_vector(self, size: int) -> "ProbeResult":
        return self.map(lambda v: _to_vector(v, size))


class NotAvailable:
    """The requested field does not exist or has an unexpected shape."""

    _instance: Optional["NotAvailable"] = None

    def __new__(cls) -> "NotAvailable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_AVAILABLE"

    def __bool__(self) -> bool:
        return False

    @property
    def available(self) -> bool:
        return False

    def get(self, default: Any = None) -> Any:
        return default

    def map(self, fn: Callable[[Any], Any]) -> "ProbeResult":
        return self

    def as_int(self) -> "ProbeResult":
        return self

    def as_float(self) -> "ProbeResult":
        return self

    def as_bool(self) -> "ProbeResult":
        return self

    def as_str(self) -> "ProbeResult":
        return self

    def as_list(self) -> "ProbeResult":
        return self

    def as_vector(self, size: int) -> "ProbeResult":
        return self


NOT_AVAILABLE = NotAvailable()

ProbeResult = Union[Found, NotAvailable]


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("non-finite")
        return int(value)
    if hasattr(value, "value") and not isinstance(value, (str, bytes)):
        # Enum members report their numeric value
        return int(value.value)
    return int(value)


def _to_float(value: Any) -> float:
    result = float(value)
    if not math.isfinite(result):
        raise ValueError("non-finite")
    return result


def _to_str(value: Any) -> str:
    if value is None:
        raise TypeError("None is not a string")
    if hasattr(value, "name") and not isinstance(value, str) and hasattr(value, "value"):
        return str(value.name)
    return str(value)


def _to_list(value: Any) -> list:
    if value is None or isinstance(value, (str, bytes, Mapping)):
        raise TypeError(f"not a sequence: {type(value).__name__}")
    return list(value)


def _to_vector(value: Any, size: int) -> tuple[float, ...]:
    if isinstance(value, Mapping):
        items = [value[k] for k in ("x", "y", "z", "w")[:size]]
    elif hasattr(value, "x") and hasattr(value, "y"):
        items = [getattr(value, k) for k in ("x", "y", "z", "w")[:size]]
    else:
        items = list(value)
    if len(items) < size:
        raise ValueError(f"expected {size} components, got {len(items)}")
    return tuple(_to_float(v) for v in items[:size])


def lookup(value: Any, path: str) -> Any:
    """Resolve a dotted path on a value.

    Args:
        value: Root object (mapping, sequence or plain object)
        path: Dotted path; empty path returns the value itself

    Returns:
        The resolved value

    Raises:
        ProbeError: If any segment cannot be resolved
    """
    current = value
    if not path:
        return current

    for segment in path.split("."):
        if current is None:
            raise ProbeError(path, f"None before '{segment}'")
        if isinstance(current, Mapping):
            if segment in current:
                current = current[segment]
                continue
            raise ProbeError(path, f"missing key '{segment}'")
        if segment.lstrip("-").isdigit() and (
            isinstance(current, Sequence) or hasattr(current, "__getitem__")
        ):
            try:
                current = current[int(segment)]
            except (IndexError, TypeError, KeyError):
                raise ProbeError(path, f"index {segment} out of range") from None
            continue
        try:
            current = getattr(current, segment)
        except AttributeError:
            raise ProbeError(path, f"missing member '{segment}'") from None
    return current


def read_field(record: Any, path: str) -> ProbeResult:
    """Read a field of a structured value previously returned by a probe."""
    try:
        return Found(lookup(record, path))
    except Exception:
        return NOT_AVAILABLE


class StateProbe(ABC):
    """Read-only capability over host-owned state.

    Subclasses implement _resolve(); read() is the failure boundary and
    converts every error into NOT_AVAILABLE.

    A probe may also support write() for the few host-visible side effects
    the trackers make (moving a pointer). Read-only probes return False.
    """

    def __init__(self, diagnostics: Optional[Any] = None) -> None:
        self._diagnostics = diagnostics

    @abstractmethod
    def _resolve(self, path: str) -> Any:
        """Resolve a path or raise."""
        ...

    def read(self, path: str) -> ProbeResult:
        """Read a host field.

        Args:
            path: Dotted host path

        Returns:
            Found(value) or NOT_AVAILABLE
        """
        try:
            return Found(self._resolve(path))
        except ProbeError as e:
            logger.debug("probe miss: %s", e)
        except Exception as e:
            logger.debug("probe error on %s: %s", path, e)
            if self._diagnostics is not None:
                self._diagnostics.record("probe", e, path=path)
        return NOT_AVAILABLE

    def write(self, path: str, value: Any) -> bool:
        """Set a host field. Returns True if the write happened."""
        return False
