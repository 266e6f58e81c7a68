"""
Host display languages.

The host reports its language as an enum value. Member values follow the
host's own numbering; coerce() also accepts names so a probe returning the
host's enum object, its integer or its name all narrow to the same member.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional

from turnabout_access.probe.base import ProbeResult


class Language(IntEnum):
    JAPAN = 0
    USA = 1
    FRANCE = 2
    GERMAN = 3
    KOREA = 4
    CHINA_S = 5
    CHINA_T = 6
    PT_BR = 7
    ES_419 = 8

    @classmethod
    def coerce(cls, value: Any) -> Optional["Language"]:
        """Narrow a weakly typed host value to a Language, or None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        name = value if isinstance(value, str) else getattr(value, "name", None)
        if isinstance(name, str):
            key = name.strip().upper().replace("-", "_")
            return cls.__members__.get(key)
        return None

    @classmethod
    def from_probe(cls, result: ProbeResult) -> Optional["Language"]:
        return cls.coerce(result.get())


# Languages whose dying message uses the 15-dot layout
FIFTEEN_DOT_LANGUAGES = frozenset({
    Language.JAPAN,
    Language.CHINA_S,
    Language.CHINA_T,
    Language.KOREA,
})
