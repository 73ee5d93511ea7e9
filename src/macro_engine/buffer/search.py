"""Position-anchored search primitives over a plain string.

Every function here is pure: it takes the text and a start position and keeps
no cursor state between calls, so a script can resume a scan from any offset.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

PatternLike = Union[str, re.Pattern[str]]


@dataclass(frozen=True, slots=True)
class BufferMatch:
    """A regex match whose positions are relative to the whole buffer."""

    index: int
    end: int
    value: str
    groups: Tuple[Optional[str], ...] = ()
    named: Dict[str, Optional[str]] = field(default_factory=dict)

    def group(self, which: Union[int, str] = 0) -> Optional[str]:
        if which == 0:
            return self.value
        if isinstance(which, str):
            return self.named[which]
        return self.groups[which - 1]

    def span(self) -> Tuple[int, int]:
        return (self.index, self.end)


def compile_pattern(pattern: PatternLike) -> re.Pattern[str]:
    """Literal strings are matched verbatim; compiled patterns pass through."""

    if isinstance(pattern, str):
        return re.compile(re.escape(pattern))
    return pattern


def match_next(text: str, pattern: PatternLike, position: int = 0) -> Optional[BufferMatch]:
    position = max(position, 0)
    # searching the tail means ^ and lookbehinds treat ``position`` as start of input
    found = compile_pattern(pattern).search(text[position:])
    if found is None:
        return None
    return BufferMatch(
        index=found.start() + position,
        end=found.end() + position,
        value=found.group(0),
        groups=found.groups(),
        named=found.groupdict(),
    )


def index_after(text: str, literal: str, position: int = 0) -> int:
    start = min(max(position, 0), len(text))
    found = text.find(literal, start)
    if found == -1:
        return -1
    return found + len(literal)


def _ends_at(text: str, literal: str, pos: int) -> bool:
    """True when ``literal`` occupies the window ending at ``pos`` inclusive."""

    first = pos + 1 - len(literal)
    if first < 0:
        return False
    return text[first : pos + 1] == literal


def last_index_after(text: str, literal: str, position: int = -1) -> int:
    if position < 0:
        position = len(text) + position
    position = min(position, len(text) - 1)

    if literal == "":
        return -1

    # candidate -1 is probed too; it can never hold a non-empty literal
    for pos in range(position, -2, -1):
        if _ends_at(text, literal, pos):
            return pos + 1

    return -1


__all__ = [
    "BufferMatch",
    "PatternLike",
    "compile_pattern",
    "index_after",
    "last_index_after",
    "match_next",
]
