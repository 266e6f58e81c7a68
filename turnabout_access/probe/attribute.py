"""
Attribute Probe - Path queries over a live Python object graph.

The host exposes a root object (or a mapping of named roots). Paths walk
attributes, mapping keys and sequence indices from there, so a host whose
internal layout changes only makes individual paths NOT_AVAILABLE.
"""

from __future__ import annotations

from collections.abc import MutableMapping, MutableSequence
from typing import Any, Optional

from turnabout_access.errors import ProbeError
from turnabout_access.probe.base import StateProbe, logger, lookup


class AttributeProbe(StateProbe):
    """Probe backed by an object graph.

    Example:
        probe = AttributeProbe({"science": science_ctrl, "global": global_work})
        probe.read("science.evidence_manager.scale_ratio").as_float()
    """

    def __init__(self, root: Any, diagnostics: Optional[Any] = None) -> None:
        super().__init__(diagnostics)
        self._root = root

    def _resolve(self, path: str) -> Any:
        return lookup(self._root, path)

    def write(self, path: str, value: Any) -> bool:
        parent_path, _, leaf = path.rpartition(".")
        try:
            parent = lookup(self._root, parent_path)
            if isinstance(parent, MutableMapping):
                parent[leaf] = value
            elif leaf.isdigit() and isinstance(parent, MutableSequence):
                parent[int(leaf)] = value
            else:
                if not hasattr(parent, leaf):
                    raise ProbeError(path, f"missing member '{leaf}'")
                setattr(parent, leaf, value)
            return True
        except Exception as e:
            logger.debug("probe write failed on %s: %s", path, e)
            if self._diagnostics is not None and not isinstance(e, ProbeError):
                self._diagnostics.record("probe", e, path=path)
            return False
