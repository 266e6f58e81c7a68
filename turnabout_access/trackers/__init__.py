"""
Mode trackers for the host's interactive sub-modes.

Each tracker polls the StateProbe once per tick, detects its own
enter/exit transitions and answers navigation, hint, state and list
commands while its mode is active.
"""

from turnabout_access.trackers.base import (
    Cursor,
    ModeTracker,
    PollingTracker,
)
from turnabout_access.trackers.dot_puzzle import (
    DOT_LABELS_12,
    REQUIRED_CONNECTIONS_12,
    DotPuzzleTracker,
)
from turnabout_access.trackers.hotspot_exam import (
    EVIDENCE_NAMES,
    Hotspot,
    HotspotExamTracker,
    scan_hotspots,
    zoom_percent,
)
from turnabout_access.trackers.rotate_puzzle import (
    SOLUTION,
    Piece,
    RotatePuzzleTracker,
    rotation_hint,
)

__all__ = [
    "Cursor",
    "PollingTracker",
    "ModeTracker",
    "DotPuzzleTracker",
    "DOT_LABELS_12",
    "REQUIRED_CONNECTIONS_12",
    "RotatePuzzleTracker",
    "SOLUTION",
    "Piece",
    "rotation_hint",
    "HotspotExamTracker",
    "Hotspot",
    "EVIDENCE_NAMES",
    "scan_hotspots",
    "zoom_percent",
]
