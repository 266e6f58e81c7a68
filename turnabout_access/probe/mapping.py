"""
Mapping Probe - Host state as a plain dictionary.

Used for tests and recorded snapshots. Keys may be full dotted paths
("dying_message.proc_state") or nested mappings; an exact key wins,
otherwise the longest dotted prefix is resolved and the rest walked.
"""

from __future__ import annotations

from typing import Any, Optional

from turnabout_access.errors import ProbeError
from turnabout_access.probe.base import StateProbe, lookup


class MappingProbe(StateProbe):
    """Probe over a mutable mapping of host state.

    Example:
        probe = MappingProbe({"vase_puzzle.proc_id": 3})
        probe.read("vase_puzzle.proc_id")   # Found(3)
        probe.set("vase_puzzle.proc_id", 0)
    """

    def __init__(
        self,
        state: Optional[dict[str, Any]] = None,
        diagnostics: Optional[Any] = None,
    ) -> None:
        super().__init__(diagnostics)
        self.state: dict[str, Any] = dict(state or {})
        self.writes: list[tuple[str, Any]] = []

    def _resolve(self, path: str) -> Any:
        if path in self.state:
            return self.state[path]

        parts = path.split(".")
        for cut in range(len(parts) - 1, 0, -1):
            prefix = ".".join(parts[:cut])
            if prefix in self.state:
                return lookup(self.state[prefix], ".".join(parts[cut:]))

        raise ProbeError(path, "not in snapshot")

    def set(self, path: str, value: Any) -> None:
        """Change host state (test helper)."""
        self.state[path] = value

    def remove(self, path: str) -> None:
        """Make a path disappear (test helper)."""
        self.state.pop(path, None)

    def update(self, values: dict[str, Any]) -> None:
        self.state.update(values)

    def write(self, path: str, value: Any) -> bool:
        self.writes.append((path, value))
        self.state[path] = value
        return True
