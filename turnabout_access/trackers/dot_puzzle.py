"""
Dying message puzzle - connect the dots to spell a name.

The 12-dot layout (western languages) spells "EMA" and has curated dot
labels and banded hints. The 15-dot layout (Japanese, Chinese, Korean)
has neither, so its labels degrade to "position N" and its hint to the
raw number of lines drawn.
"""

from __future__ import annotations

from typing import Optional

from turnabout_access.language import FIFTEEN_DOT_LANGUAGES, Language
from turnabout_access.probe.base import read_field
from turnabout_access.trackers.base import ModeTracker

PREFIX = "dying_message"
LANGUAGE_PATH = "global.language"

# Dot labels for the 12-dot layout, by dot index
DOT_LABELS_12 = (
    "E top-left",
    "E top-right",
    "M top-right",
    "M middle-left",
    "A top",
    "E bottom-left",
    "E bottom-right",
    "A middle-left",
    "A middle-right",
    "M bottom",
    "A bottom-left",
    "A bottom-right",
)

# Lines that spell EMA on the 12-dot layout (unordered pairs)
REQUIRED_CONNECTIONS_12 = frozenset({
    frozenset({0, 1}),   # E top
    frozenset({0, 5}),   # E left side
    frozenset({5, 6}),   # E bottom
    frozenset({2, 3}),   # M left diagonal
    frozenset({2, 9}),   # M right diagonal
    frozenset({4, 10}),  # A left side
    frozenset({4, 11}),  # A right side
    frozenset({7, 8}),   # A crossbar
})

_BAND_KEYS = {
    "start": "dying_message.hint_start",
    "first_shape": "dying_message.hint_continue_e",
    "second_shape": "dying_message.hint_draw_a",
}

_DRAWING_STATE = "Line"


class DotPuzzleTracker(ModeTracker):
    """Navigation, hints and line narration for the dying message puzzle."""

    name = "dot_puzzle"
    not_in_mode_key = "dying_message.not_in_mode"
    hint_error_key = "dying_message.hint_fallback"
    state_error_key = "dying_message.hint_generic"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.language: Optional[Language] = None
        self.dot_count = 0
        self._line_count: Optional[int] = None
        self._drawing = False

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect(self) -> bool:
        if not self.probe.read(f"{PREFIX}.body_active").as_bool().get(False):
            return False
        # body_active alone lags behind the puzzle's own state machine
        proc_state = self.probe.read(f"{PREFIX}.proc_state").as_int()
        return proc_state.available and proc_state.get() != 0

    def on_enter(self) -> None:
        self.language = Language.from_probe(self.probe.read(LANGUAGE_PATH))
        self.dot_count = 15 if self.is_fifteen_dot else 12
        self._line_count = self.read_line_count()
        self._drawing = self.is_drawing()
        self.announce("dying_message.puzzle_start", self.dot_count, category=self.category)

    def on_exit(self) -> None:
        self.language = None
        self.dot_count = 0
        self._line_count = None
        self._drawing = False

    @property
    def is_fifteen_dot(self) -> bool:
        return self.language in FIFTEEN_DOT_LANGUAGES

    # ------------------------------------------------------------------
    # Host state
    # ------------------------------------------------------------------

    def read_line_count(self) -> Optional[int]:
        lines = self.probe.read(f"{PREFIX}.lines").as_list()
        return len(lines.get()) if lines.available else None

    def read_lines(self) -> Optional[list[tuple[int, int]]]:
        """Endpoints of every drawn line, or None if any is unreadable."""
        lines = self.probe.read(f"{PREFIX}.lines").as_list()
        if not lines.available:
            return None
        pairs = []
        for line in lines.get():
            start = read_field(line, "start").as_int()
            end = read_field(line, "end").as_int()
            if not (start.available and end.available):
                return None
            pairs.append((start.get(), end.get()))
        return pairs

    def is_drawing(self) -> bool:
        state = self.probe.read(f"{PREFIX}.draw_state").as_str()
        return state.get("") == _DRAWING_STATE

    def dot_label(self, index: int) -> str:
        if not self.is_fifteen_dot and 0 <= index < len(DOT_LABELS_12):
            return DOT_LABELS_12[index]
        return self.text("dying_message.position", index + 1)

    def _dot_text(self, index: int) -> str:
        return f"{index + 1}, {self.dot_label(index)}"

    # ------------------------------------------------------------------
    # Per-tick line narration
    # ------------------------------------------------------------------

    def on_tick(self) -> None:
        count = self.read_line_count()
        drawing = self.is_drawing()

        if count is not None and self._line_count is not None:
            if count > self._line_count:
                self._announce_new_line()
            elif count < self._line_count:
                self.announce("dying_message.line_removed", category=self.category)

        if drawing and not self._drawing:
            start = self.probe.read(f"{PREFIX}.line_start_index").as_int()
            if start.available:
                index = start.get()
                self.announce(
                    "dying_message.line_started", index + 1, self.dot_label(index),
                    category=self.category,
                )
        elif self._drawing and not drawing and count == self._line_count:
            self.announce("dying_message.line_cancelled", category=self.category)

        if count is not None:
            self._line_count = count
        self._drawing = drawing

    def _announce_new_line(self) -> None:
        lines = self.read_lines()
        if not lines:
            self.announce("dying_message.line_drawn", category=self.category)
            return
        start, end = lines[-1]
        self.announce(
            "dying_message.connected",
            start + 1, self.dot_label(start), end + 1, self.dot_label(end),
            category=self.category,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def item_count(self) -> int:
        return self.dot_count

    def on_navigate(self, index: int) -> None:
        self._move_pointer(index)
        self.say(self.text(
            "dying_message.dot_description", index + 1, self.dot_count, self.dot_label(index),
        ))

    def _move_pointer(self, index: int) -> bool:
        points = self.probe.read(f"{PREFIX}.draw_points").as_list()
        if not points.available or index >= len(points.get()):
            return False
        point = points.get()[index]
        lx = read_field(point, "lx").as_int()
        ly = read_field(point, "ly").as_int()
        if not (lx.available and ly.available):
            return False
        return self.probe.write(
            f"{PREFIX}.cursor.cursor_position", (float(lx.get()), float(ly.get()), 0.0)
        )

    def hint(self) -> None:
        count = self.read_line_count() or 0
        if self.is_fifteen_dot:
            self.say(self.text("dying_message.hint_lines_drawn", count))
            return

        band = self.config.hint_bands.band(count)
        if band == "done":
            self.say(self.text("dying_message.hint_done", count))
        else:
            self.say(self.text(_BAND_KEYS[band]))

    def state(self) -> None:
        if self.is_drawing():
            start = self.probe.read(f"{PREFIX}.line_start_index").as_int()
            if start.available:
                index = start.get()
                state = self.text("dying_message.state_drawing_from", index + 1, self.dot_label(index))
            else:
                state = self.text("dying_message.state_drawing")
        else:
            state = self.text("dying_message.state_ready")

        location = ""
        if self.cursor.index >= 0:
            location = self.text("dying_message.state_at_dot", self.cursor.index + 1, self.dot_count)

        count = self.read_line_count() or 0
        message = self.text("dying_message.state", location, count, state)

        if not self.is_fifteen_dot:
            lines = self.read_lines()
            if lines is not None:
                drawn = {frozenset(pair) for pair in lines}
                message += self.text(
                    "dying_message.state_required",
                    len(drawn & REQUIRED_CONNECTIONS_12),
                    len(REQUIRED_CONNECTIONS_12),
                )
        self.say(message)

    def list_items(self) -> None:
        labels = ", ".join(self._dot_text(i) for i in range(self.dot_count))
        self.say(self.text("dying_message.list", self.dot_count, labels))
