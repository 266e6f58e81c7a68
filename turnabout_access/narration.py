"""
Narration Tracker - Speaks opening narration as the host advances it.

Opening narration is stored as packed text with no line breaks. The
stream is decoded and split into display lines once per narration type;
each tick the host's line counter is compared with the last line spoken
and every newly reached line is output in order. When the host moves on
to another narration type (new segment set or codes) or restarts its
line counter, the lines are rebuilt and output begins again at line 0.
"""

from __future__ import annotations

import logging
from typing import Optional

from turnabout_access.language import Language
from turnabout_access.speech.sink import Category
from turnabout_access.text.segmenter import segment
from turnabout_access.trackers.base import PollingTracker

logger = logging.getLogger(__name__)

PREFIX = "narration"
LANGUAGE_PATH = "global.language"

# (segment set, language, packed codes or None)
Source = tuple[int, Optional[Language], Optional[tuple[int, ...]]]


class NarrationTracker(PollingTracker):
    """Narrator-category output for segmented opening narration."""

    name = "narration"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.lines: list[str] = []
        self.last_line = -1
        self._source: Optional[Source] = None

    def detect(self) -> bool:
        return self.probe.read(f"{PREFIX}.active").as_bool().get(False)

    def on_enter(self) -> None:
        self._load(self._read_source())

    def on_exit(self) -> None:
        self.lines = []
        self.last_line = -1
        self._source = None

    def on_tick(self) -> None:
        source = self._read_source()
        line = self.probe.read(f"{PREFIX}.line").as_int()
        restarted = line.available and 0 <= line.get() < self.last_line
        if source != self._source or restarted:
            self._load(source)
        if line.available:
            self._advance_to(line.get())

    def _read_source(self) -> Source:
        segment_set = self.probe.read(f"{PREFIX}.type").as_int().get(0)
        language = Language.from_probe(self.probe.read(LANGUAGE_PATH))
        codes = self.probe.read(f"{PREFIX}.codes").as_list()
        return segment_set, language, tuple(codes.get()) if codes.available else None

    def _load(self, source: Source) -> None:
        segment_set, language, codes = source
        self._source = source
        self.lines = segment(codes, language, segment_set) if codes is not None else []
        self.last_line = -1
        logger.debug("narration set %s: %d lines", segment_set, len(self.lines))
        self._advance_to(0)

    def _advance_to(self, line: int) -> None:
        target = min(line, len(self.lines) - 1)
        while self.last_line < target:
            self.last_line += 1
            self.sink.output(None, self.lines[self.last_line], Category.NARRATOR)
