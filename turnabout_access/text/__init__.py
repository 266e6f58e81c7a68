"""Packed narration text decoding and line segmentation."""

from turnabout_access.text.segmenter import (
    CHARACTER_BIAS,
    DEFAULT_LINE_LENGTHS,
    FALLBACK_LINE_LENGTHS,
    LINE_LENGTHS,
    decode_packed,
    line_lengths,
    segment,
    segment_lines,
)

__all__ = [
    "CHARACTER_BIAS",
    "DEFAULT_LINE_LENGTHS",
    "FALLBACK_LINE_LENGTHS",
    "LINE_LENGTHS",
    "decode_packed",
    "line_lengths",
    "segment",
    "segment_lines",
]
