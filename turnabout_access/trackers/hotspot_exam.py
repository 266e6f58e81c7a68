"""
3D evidence examination - hotspot navigation and zoom narration.

Hotspots are the evidence model's collision meshes. Meshes whose name
marks them as cut-outs are skipped; the rest are ordered by the number
embedded in their name and renumbered 1..N for display.

Navigating to a hotspot moves the host's examination cursor: the
hotspot center is projected to the screen, then unprojected at the
cursor's own depth. When that fails the announcement is still made.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from turnabout_access.probe.base import read_field
from turnabout_access.speech.sink import Category
from turnabout_access.trackers import geometry
from turnabout_access.trackers.base import ModeTracker

logger = logging.getLogger(__name__)

PREFIX = "science"

EXCLUDED_NAME = re.compile(r"(nuki|nuke)", re.IGNORECASE)
ORDINAL = re.compile(r"(\d+)")

# Evidence names by model id, used when the host gives no display name
EVIDENCE_NAMES = {
    1: "Briefcase",
    2: "Wallet",
    3: "Letter",
    8: "Cell Phone",
    9: "Cell Phone (open)",
    12: "Syringe",
    27: "Photo Album",
    29: "Envelope",
}


@dataclass
class Hotspot:
    """A navigable point of interest on the examined model."""
    ordinal: int
    center: tuple[float, float, float]
    name: str = ""


def scan_hotspots(colliders: list) -> list[Hotspot]:
    """Build the display-ordered hotspot list from collider records.

    Records without a readable name or center are skipped.
    """
    hotspots = []
    for record in colliders:
        name = read_field(record, "name").as_str()
        center = read_field(record, "center").as_vector(3)
        if not (name.available and center.available):
            continue
        if EXCLUDED_NAME.search(name.get()):
            continue
        match = ORDINAL.search(name.get())
        ordinal = int(match.group(1)) - 1 if match else 0
        hotspots.append(Hotspot(ordinal, center.get()))

    hotspots.sort(key=lambda h: h.ordinal)
    for i, hotspot in enumerate(hotspots):
        hotspot.name = f"Hotspot {i + 1}"
    return hotspots


def zoom_percent(zoom: float) -> int:
    return int(round(zoom * 100))


class HotspotExamTracker(ModeTracker):
    """Hotspot navigation, zoom narration and state for 3D evidence."""

    name = "hotspot_exam"
    not_in_mode_key = "evidence_3d.not_in_mode"
    hint_error_key = "evidence_3d.state_error"
    state_error_key = "evidence_3d.state_error"
    category = Category.MENU

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.hotspots: list[Hotspot] = []
        self._last_zoom = 1.0

    # ------------------------------------------------------------------
    # Detection and lifecycle
    # ------------------------------------------------------------------

    def detect(self) -> bool:
        if not self.probe.read(f"{PREFIX}.active").as_bool().get(False):
            return False
        return self.probe.read(f"{PREFIX}.evidence_manager").get() is not None

    def on_enter(self) -> None:
        self._last_zoom = self.read_zoom()
        self.refresh()
        self.announce(
            "evidence_3d.enter", self.evidence_name(), len(self.hotspots),
            category=Category.INVESTIGATION,
        )

    def on_exit(self) -> None:
        self.hotspots = []
        self._last_zoom = 1.0

    def refresh(self) -> list[Hotspot]:
        """Rescan the examined model for hotspots."""
        colliders = self.probe.read(f"{PREFIX}.evidence_manager.colliders").as_list()
        self.hotspots = scan_hotspots(colliders.get([]))
        logger.info("Found %d hotspots", len(self.hotspots))
        return self.hotspots

    # ------------------------------------------------------------------
    # Host state
    # ------------------------------------------------------------------

    def read_zoom(self, default: Optional[float] = 1.0) -> Optional[float]:
        """Current scale ratio, or default while it cannot be read."""
        return self.probe.read(f"{PREFIX}.evidence_manager.scale_ratio").as_float().get(default)

    def is_over_hotspot(self) -> bool:
        index = self.probe.read(f"{PREFIX}.hit_point_index").as_int()
        return index.available and index.get() != -1

    def evidence_name(self) -> str:
        name = self.probe.read(f"{PREFIX}.current_evidence_name").as_str()
        if name.available and name.get().strip():
            return name.get().strip()

        obj_id = self.probe.read(f"{PREFIX}.poly_obj_id").as_int()
        if not obj_id.available:
            return self.text("evidence_3d.evidence")
        if obj_id.get() in EVIDENCE_NAMES:
            return EVIDENCE_NAMES[obj_id.get()]
        return self.text("evidence_3d.evidence_item", obj_id.get())

    # ------------------------------------------------------------------
    # Per-tick zoom narration
    # ------------------------------------------------------------------

    def on_tick(self) -> None:
        zoom = self.read_zoom(default=None)
        if zoom is None:
            # unreadable for a frame, keep the last announced value
            return
        if abs(round(zoom, 1) - round(self._last_zoom, 1)) >= self.config.zoom_threshold:
            self._last_zoom = zoom
            self.announce("evidence_3d.zoom", zoom_percent(zoom), category=Category.MENU)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def item_count(self) -> int:
        return len(self.hotspots)

    def prepare_navigation(self) -> int:
        if not self.hotspots:
            self.refresh()
            if not self.hotspots:
                self.announce("evidence_3d.no_hotspots")
        return len(self.hotspots)

    def on_navigate(self, index: int) -> None:
        hotspot = self.hotspots[index]
        try:
            self._move_cursor(hotspot)
        except Exception as e:
            # The cursor stays put; the announcement below still happens
            self._record(e, "move_cursor")
        self.say(self.text("evidence_3d.hotspot_of", hotspot.name, len(self.hotspots)))

    def _move_cursor(self, hotspot: Hotspot) -> bool:
        matrix = self.probe.read(f"{PREFIX}.camera.matrix")
        viewport = self.probe.read(f"{PREFIX}.camera.viewport").as_vector(2)
        cursor = self.probe.read(f"{PREFIX}.cursor.position").as_vector(3)
        if not (matrix.available and viewport.available and cursor.available):
            logger.debug("camera or cursor unavailable, cursor not moved")
            return False

        screen = geometry.world_to_screen(matrix.get(), viewport.get(), hotspot.center)
        depth = geometry.depth_of(matrix.get(), cursor.get())
        world = geometry.screen_to_world(
            matrix.get(), viewport.get(), (screen[0], screen[1], depth)
        )
        x, y, z = float(world[0]), float(world[1]), cursor.get()[2]
        return self.probe.write(f"{PREFIX}.cursor.position", (x, y, z))

    def state(self) -> None:
        over = self.is_over_hotspot()
        message = self.text(
            "evidence_3d.state",
            zoom_percent(self.read_zoom()),
            self.text("evidence_3d.on_hotspot" if over else "evidence_3d.no_hotspot"),
            len(self.hotspots),
        )
        message += self.text("evidence_3d.press_examine" if over else "evidence_3d.use_brackets")
        self.say(message)

    def hint(self) -> None:
        if self.is_over_hotspot():
            self.say(self.text("evidence_3d.hotspot_detected"))
        else:
            self.say(self.text("evidence_3d.no_hotspot_under_cursor"))

    def list_items(self) -> None:
        if not self.hotspots:
            self.refresh()
        if not self.hotspots:
            self.announce("evidence_3d.no_hotspots")
            return
        names = ", ".join(h.name for h in self.hotspots)
        self.say(self.text("evidence_3d.list", len(self.hotspots), names))
