"""
Vase puzzle - select each fragment in order and rotate it upright.

Every step of the solution names one piece, which must be rotated to
angle 0 before it can be combined. R decrements the angle (3 -> 2 -> 1 -> 0),
Q increments it with wraparound (1 -> 2 -> 3 -> 0).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from turnabout_access.probe.base import read_field
from turnabout_access.trackers.base import ModeTracker

PREFIX = "vase_puzzle"

# Piece index expected at each step; every target ends at angle 0
SOLUTION = (4, 3, 5, 0, 7, 2, 1, 6)

ROTATION_STATES = 4


def rotation_hint(rotation: int) -> tuple[str, int]:
    """Shortest way to bring a piece back to angle 0.

    Args:
        rotation: Current angle state (0-3)

    Returns:
        ("combine", 0), ("decrement", presses) or ("increment", presses).
        Equal distances favour decrement.
    """
    rotation %= ROTATION_STATES
    if rotation == 0:
        return "combine", 0
    decrement = rotation
    increment = ROTATION_STATES - rotation
    if decrement <= increment:
        return "decrement", decrement
    return "increment", increment


@dataclass(frozen=True)
class Piece:
    """One vase fragment as reported by the host."""
    index: int
    angle: int
    used: bool

    @property
    def degrees(self) -> int:
        return self.angle * 90


class RotatePuzzleTracker(ModeTracker):
    """Hints and piece navigation for the vase puzzle."""

    name = "rotate_puzzle"
    not_in_mode_key = "vase_puzzle.not_in_mode"
    hint_error_key = "vase_puzzle.hint_error"
    state_error_key = "vase_puzzle.state_error"

    def detect(self) -> bool:
        proc_id = self.probe.read(f"{PREFIX}.proc_id").as_int()
        return proc_id.get(0) != 0

    def on_enter(self) -> None:
        self.announce("vase_puzzle.puzzle_start", category=self.category)

    # ------------------------------------------------------------------
    # Host state
    # ------------------------------------------------------------------

    def read_step(self) -> Optional[int]:
        return self.probe.read(f"{PREFIX}.puzzle_step").as_int().get()

    def read_selected(self) -> Optional[int]:
        return self.probe.read(f"{PREFIX}.icon_cursor").as_int().get()

    def read_pieces(self) -> Optional[list[Piece]]:
        raw = self.probe.read(f"{PREFIX}.pieces").as_list()
        if not raw.available:
            return None
        pieces = []
        for index, record in enumerate(raw.get()):
            angle = read_field(record, "angle_id").as_int()
            if not angle.available:
                return None
            used = read_field(record, "used").as_bool().get(False)
            pieces.append(Piece(index, angle.get() % ROTATION_STATES, used))
        return pieces

    def _times(self, count: int) -> str:
        return self.text("common.time" if count == 1 else "common.times")

    def _remaining(self, step: int) -> int:
        return max(len(SOLUTION) - step, 0)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def hint(self) -> None:
        step = self.read_step()
        selected = self.read_selected()
        pieces = self.read_pieces()
        if step is None or selected is None:
            self.announce("vase_puzzle.unable_state")
            return
        if pieces is None:
            self.announce("vase_puzzle.unable_pieces")
            return
        if step >= len(SOLUTION):
            self.say(self.text("vase_puzzle.complete"))
            return

        target = SOLUTION[step]
        hint = self.text("vase_puzzle.remaining", self._remaining(step))

        if selected == target:
            if not 0 <= selected < len(pieces):
                self.announce("vase_puzzle.unable_pieces")
                return
            hint += self.text("vase_puzzle.correct_piece")
            action, presses = rotation_hint(pieces[selected].angle)
            if action == "combine":
                hint += self.text("vase_puzzle.press_combine")
            elif action == "decrement":
                hint += self.text("vase_puzzle.rotate_right", presses, self._times(presses))
            else:
                hint += self.text("vase_puzzle.rotate_left", presses, self._times(presses))
        else:
            hint += self.text("vase_puzzle.select_piece", target + 1)
            if target > selected:
                hint += self.text("vase_puzzle.navigate_right")
            else:
                hint += self.text("vase_puzzle.navigate_left")

        self.say(hint)

    def state(self) -> None:
        step = self.read_step()
        selected = self.read_selected()
        pieces = self.read_pieces()
        if step is None or selected is None:
            self.announce("vase_puzzle.unable_state")
            return
        if pieces is None or not 0 <= selected < len(pieces):
            self.announce("vase_puzzle.unable_pieces")
            return

        piece = pieces[selected]
        message = self.text("vase_puzzle.piece", piece.index + 1) + self._status(piece)
        message += self.text("vase_puzzle.state_remaining", self._remaining(step))
        self.say(message)

    def _status(self, piece: Piece) -> str:
        if piece.used:
            return self.text("vase_puzzle.placed")
        return self.text("vase_puzzle.rotated", piece.degrees)

    def item_count(self) -> int:
        pieces = self.read_pieces()
        return len(pieces) if pieces else 0

    def on_navigate(self, index: int) -> None:
        pieces = self.read_pieces()
        if pieces is None or index >= len(pieces):
            self.announce("vase_puzzle.unable_pieces")
            return

        piece = pieces[index]
        message = self.text("vase_puzzle.piece_of", index + 1, len(pieces)) + self._status(piece)
        step = self.read_step()
        if step is not None and step < len(SOLUTION) and SOLUTION[step] == index:
            message += self.text("vase_puzzle.correct_for_step")
        self.say(message)

    def list_items(self) -> None:
        pieces = self.read_pieces()
        if pieces is None:
            self.announce("vase_puzzle.unable_pieces")
            return
        entries = ", ".join(
            self.text("vase_puzzle.piece", piece.index + 1) + self._status(piece)
            for piece in pieces
        )
        self.say(self.text("vase_puzzle.list", len(pieces), entries))
