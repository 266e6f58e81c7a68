"""
Text Segmenter - Rebuilds narration lines from a packed code stream.

The host stores opening narration as a flat array of 16-bit codes:
    0 and 0xFFFF  - empty / end sentinels, skipped
    1..128        - control codes, skipped
    > 128         - displayable character, offset by 128

Decoded text has no line breaks. The host lays it out with per-language
character counts per line (glyph widths differ between languages), so the
lines are rebuilt by consuming those counts in order. Text left over once
a table is exhausted becomes one final line.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from typing import Any, Optional

import numpy as np

from turnabout_access.language import Language

CHARACTER_BIAS = 128
SENTINELS = (0, 0xFFFF)

# Characters per line, by segment set and language
LINE_LENGTHS: dict[int, dict[Language, tuple[int, ...]]] = {
    0: {
        Language.JAPAN: (9, 8, 6),
        Language.USA: (18, 26, 24, 22, 18, 18, 18),
        Language.FRANCE: (20, 34, 25, 18, 23, 20, 17),
        Language.GERMAN: (18, 25, 20, 20, 23, 21, 14),
        Language.KOREA: (11, 8, 6),
        Language.CHINA_S: (9, 8, 6),
        Language.CHINA_T: (9, 8, 6),
        Language.PT_BR: (18, 31, 24, 21, 22, 21, 16),
        Language.ES_419: (22, 28, 26, 22, 18, 24, 13),
    },
    1: {
        Language.JAPAN: (9, 11, 11, 11, 17),
        Language.USA: (28, 19, 12, 18, 26, 24, 22),
        Language.FRANCE: (20, 30, 13, 20, 34, 25, 18),
        Language.GERMAN: (26, 28, 14, 18, 25, 20, 20),
        Language.KOREA: (12, 15, 12, 14, 19),
        Language.CHINA_S: (9, 11, 13, 12, 11),
        Language.CHINA_T: (9, 13, 13, 12, 12),
        Language.PT_BR: (30, 28, 12, 18, 31, 24, 21),
        Language.ES_419: (27, 26, 26, 22, 28, 26, 22),
    },
}

# Used when the language is unknown
DEFAULT_LINE_LENGTHS: dict[int, tuple[int, ...]] = {
    0: (9, 8, 6),
    1: (9, 11, 11, 11, 17),
}

# Used when the segment set is unknown
FALLBACK_LINE_LENGTHS: tuple[int, ...] = (20, 20, 20, 20, 20)


def line_lengths(language: Optional[Language], segment_set: int) -> tuple[int, ...]:
    """Get the line-length table for a language and segment set."""
    tables = LINE_LENGTHS.get(segment_set)
    if tables is None:
        return FALLBACK_LINE_LENGTHS
    if language is None or language not in tables:
        return DEFAULT_LINE_LENGTHS[segment_set]
    return tables[language]


def decode_packed(codes: Iterable[int]) -> str:
    """Decode a packed code stream into one logical string.

    Args:
        codes: Packed 16-bit codes

    Returns:
        All displayable characters, concatenated
    """
    array = np.asarray(
        codes if isinstance(codes, np.ndarray) else list(codes), dtype=np.int64
    )
    if array.size == 0:
        return ""
    array = array.ravel()
    mask = (
        (array > CHARACTER_BIAS)
        & (array != SENTINELS[1])
        & (array - CHARACTER_BIAS <= sys.maxunicode)
    )
    chars = array[mask] - CHARACTER_BIAS
    return "".join(map(chr, chars.tolist()))


def segment_lines(text: str, lengths: Sequence[int]) -> list[str]:
    """Split decoded text into display lines.

    Lengths are consumed in order, each clamped to the text that remains.
    Any remainder after the table becomes a final line. Lines are trimmed.
    """
    lines: list[str] = []
    position = 0
    for length in lengths:
        if position >= len(text):
            break
        size = min(max(int(length), 0), len(text) - position)
        if size <= 0:
            continue
        lines.append(text[position:position + size].strip())
        position += size

    if position < len(text):
        lines.append(text[position:].strip())
    return lines


def segment(codes: Any, language: Any, segment_set: int) -> list[str]:
    """Decode and segment packed narration text.

    Args:
        codes: Packed code stream
        language: Host language (Language, int or name)
        segment_set: Segment set id (0 or 1)

    Returns:
        Display lines, in order. Same input always yields the same lines.
    """
    text = decode_packed(codes)
    if not text:
        return []
    return segment_lines(text, line_lengths(Language.coerce(language), segment_set))
