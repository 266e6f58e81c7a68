"""
Message catalog - resolves user-facing message templates.

Templates are keyed by string id and use positional placeholders
({0}, {1}, ...). Lookup falls back from the selected language to the
built-in English table, and finally to the key itself, so a missing
translation never interrupts the announcement flow.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

logger = logging.getLogger(__name__)


BASE_LANGUAGE = "en"

BASE_MESSAGES: dict[str, str] = {
    # System
    "system.no_mode": "No puzzle or examination active",
    "system.nothing_to_navigate": "Nothing to navigate here",
    "common.time": "time",
    "common.times": "times",

    # Dying message (connect the dots)
    "dying_message.puzzle_start": (
        "Dying message puzzle. {0} dots. Use [ and ] to move between dots, "
        "H for a hint, I for the current state."
    ),
    "dying_message.not_in_mode": "Not in dying message puzzle",
    "dying_message.dot_description": "Dot {0} of {1}, {2}",
    "dying_message.position": "position {0}",
    "dying_message.hint_start": (
        "The message spells EMA. Start with the E: connect E top-left "
        "to E top-right, then E top-left down to E bottom-left."
    ),
    "dying_message.hint_continue_e": (
        "Keep drawing the E. Finish with a line from E bottom-left to E bottom-right."
    ),
    "dying_message.hint_draw_a": (
        "Now the M and the A. Connect M top-right to M middle-left and to M bottom, "
        "then A top to A bottom-left and A bottom-right, and A middle-left to A middle-right."
    ),
    "dying_message.hint_done": "{0} lines drawn. The message should be complete.",
    "dying_message.hint_lines_drawn": "{0} lines drawn.",
    "dying_message.hint_fallback": "Unable to get hint",
    "dying_message.hint_generic": "Connect the dots to spell the message.",
    "dying_message.state": "{0}{1} lines drawn. {2}",
    "dying_message.state_at_dot": "At dot {0} of {1}. ",
    "dying_message.state_ready": "Ready.",
    "dying_message.state_drawing": "Drawing.",
    "dying_message.state_drawing_from": "Drawing from dot {0}, {1}.",
    "dying_message.state_required": " {0} of {1} required lines drawn.",
    "dying_message.connected": "Connected dot {0}, {1} to dot {2}, {3}",
    "dying_message.line_drawn": "Line drawn",
    "dying_message.line_removed": "Line removed",
    "dying_message.line_started": "Drawing from dot {0}, {1}",
    "dying_message.line_cancelled": "Line cancelled",
    "dying_message.list": "{0} dots: {1}",

    # Vase puzzle (select and rotate)
    "vase_puzzle.puzzle_start": (
        "Vase puzzle. Use Left/Right to select pieces, Q/R to rotate. "
        "Press H for hint, E to combine."
    ),
    "vase_puzzle.not_in_mode": "Not in vase puzzle",
    "vase_puzzle.unable_state": "Unable to read puzzle state",
    "vase_puzzle.unable_pieces": "Unable to read pieces",
    "vase_puzzle.complete": "Puzzle complete!",
    "vase_puzzle.remaining": "{0} pieces remaining. ",
    "vase_puzzle.correct_piece": "Correct piece selected. ",
    "vase_puzzle.press_combine": "Rotation correct. Press E to combine.",
    "vase_puzzle.rotate_right": "Press R {0} {1} to rotate.",
    "vase_puzzle.rotate_left": "Press Q {0} {1} to rotate.",
    "vase_puzzle.select_piece": "Select piece {0}. ",
    "vase_puzzle.navigate_right": "Press Right to navigate.",
    "vase_puzzle.navigate_left": "Press Left to navigate.",
    "vase_puzzle.hint_error": "Unable to get hint",
    "vase_puzzle.state_error": "Unable to read state",
    "vase_puzzle.piece": "Piece {0}",
    "vase_puzzle.piece_of": "Piece {0} of {1}",
    "vase_puzzle.placed": " (already placed)",
    "vase_puzzle.rotated": ", rotated {0} degrees",
    "vase_puzzle.correct_for_step": ", correct piece for this step",
    "vase_puzzle.state_remaining": ". {0} pieces remaining.",
    "vase_puzzle.list": "{0} pieces: {1}",

    # 3D evidence examination
    "evidence_3d.enter": "Examining {0}. {1} hotspots. Use [ and ] to navigate hotspots.",
    "evidence_3d.not_in_mode": "Not examining evidence",
    "evidence_3d.zoom": "Zoom {0}%",
    "evidence_3d.hotspot_name": "Hotspot {0}",
    "evidence_3d.hotspot_of": "{0} of {1}",
    "evidence_3d.no_hotspots": "No hotspots found",
    "evidence_3d.state": "Zoom: {0}%. {1}. {2} hotspots total.",
    "evidence_3d.on_hotspot": "On hotspot",
    "evidence_3d.no_hotspot": "No hotspot",
    "evidence_3d.press_examine": " Press A to examine.",
    "evidence_3d.use_brackets": " Use [ and ] to navigate hotspots.",
    "evidence_3d.state_error": "Unable to read 3D examination state",
    "evidence_3d.hotspot_detected": "Hotspot detected, press A to examine",
    "evidence_3d.no_hotspot_under_cursor": "No hotspot under cursor",
    "evidence_3d.list": "{0} hotspots: {1}",
    "evidence_3d.evidence": "Evidence",
    "evidence_3d.evidence_item": "Evidence (item {0})",
}


class MessageCatalog:
    """Resolves message ids to formatted text.

    Example:
        catalog = MessageCatalog("fr", overrides={"fr": {"vase_puzzle.complete": "Puzzle terminé !"}})
        catalog.get("vase_puzzle.remaining", 3)   # "3 pieces remaining. " (English fallback)
    """

    def __init__(
        self,
        language: str = BASE_LANGUAGE,
        overrides: Optional[Mapping[str, Mapping[str, str]]] = None,
        base: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.language = language
        self._overrides = {lang: dict(table) for lang, table in (overrides or {}).items()}
        self._base = dict(base if base is not None else BASE_MESSAGES)
        self._missing: set[str] = set()

    def template(self, key: str) -> str:
        """Get the raw template for a key, with language fallback."""
        table = self._overrides.get(self.language)
        if table and key in table:
            return table[key]
        if self.language != BASE_LANGUAGE:
            base_table = self._overrides.get(BASE_LANGUAGE)
            if base_table and key in base_table:
                return base_table[key]
        if key in self._base:
            return self._base[key]

        if key not in self._missing:
            self._missing.add(key)
            logger.warning("Missing message key: %s", key)
        return key

    def get(self, key: str, *args: Any) -> str:
        """Resolve and format a message.

        Args:
            key: Message id
            *args: Positional placeholder values

        Returns:
            Formatted text; the unformatted template if formatting fails
        """
        template = self.template(key)
        if not args:
            return template
        try:
            return template.format(*args)
        except (IndexError, KeyError, ValueError) as e:
            logger.warning("Bad format for %s: %s", key, e)
            return template

    def has(self, key: str) -> bool:
        return key in self._base or any(key in t for t in self._overrides.values())

    def set_language(self, language: str) -> None:
        self.language = language
