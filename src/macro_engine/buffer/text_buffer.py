"""Mutable text buffer handed to macros through the buffer registry."""

from __future__ import annotations

from typing import List, Optional, Sequence

from macro_engine.runtime import telemetry

from . import search
from .checkpoints import CheckpointLog
from .ranges import (
    Range,
    RangeLike,
    as_range,
    check_bounds,
    check_overlaps,
    sort_edits,
)
from .search import BufferMatch, PatternLike


class TextBuffer:
    """One mutable string plus the checkpoints taken while a macro edits it.

    Edits go through :meth:`replace` (or its ``insert``/``remove`` sugar),
    which applies a whole batch of non-overlapping ranges against the text as
    it was when the call was made and returns where each replacement landed.
    """

    def __init__(self, text: str = "", *, name: str = "buffer", debug_mode: bool = False) -> None:
        self.name = name
        self.debug_mode = debug_mode
        self.checkpoints = CheckpointLog()
        self._text = text

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return (
            f"TextBuffer(name={self.name!r}, length={len(self._text)}, "
            f"checkpoints={len(self.checkpoints)})"
        )

    @property
    def text(self) -> str:
        return self._text

    def get_text(self) -> str:
        return self._text

    def set_text(self, new_text: str) -> None:
        if self.debug_mode:
            self.mark_undo_point()
        self._text = new_text

    def mark_undo_point(self) -> None:
        self.checkpoints.push(self._text)

    def get_range(self, rng: RangeLike) -> str:
        start, end = as_range(rng)
        return self._text[start:end]

    # search

    def match_next(self, pattern: PatternLike, position: int = 0) -> Optional[BufferMatch]:
        return search.match_next(self._text, pattern, position)

    def index_after(self, literal: str, position: int = 0) -> int:
        return search.index_after(self._text, literal, position)

    def last_index_after(self, literal: str, position: int = -1) -> int:
        return search.last_index_after(self._text, literal, position)

    # edits

    def replace(
        self, ranges: Sequence[RangeLike], replacements: Sequence[str]
    ) -> List[Range]:
        """Replace every range with its paired string in one pass.

        Ranges may arrive in any order; they are sorted by start with their
        replacements kept paired. The returned ranges are in sorted order and
        locate each replacement in the *new* text: every start is shifted by
        the length change of the edits before it, and every end sits
        ``len(replacement)`` past its start.
        """

        if len(ranges) != len(replacements):
            raise ValueError(
                f"Got {len(ranges)} ranges but {len(replacements)} replacements"
            )

        with telemetry.span(
            name="buffer::replace",
            component="buffer",
            metadata={"buffer": self.name, "ranges": len(ranges)},
        ):
            normalized = [as_range(rng) for rng in ranges]
            check_bounds(normalized, len(self._text))
            edits = sort_edits(normalized, replacements)
            check_overlaps(edits)

            pieces: List[str] = []
            moved: List[Range] = []
            cursor = 0
            delta = 0
            for _, rng, replacement in edits:
                pieces.append(self._text[cursor : rng.start])
                pieces.append(replacement)
                cursor = rng.end
                start = rng.start + delta
                moved.append(Range(start, start + len(replacement)))
                delta += len(replacement) - rng.length
            pieces.append(self._text[cursor:])

            self._text = "".join(pieces)
            return moved

    def insert(self, positions: Sequence[int], strings: Sequence[str]) -> List[Range]:
        return self.replace([(pos, pos) for pos in positions], strings)

    def remove(self, ranges: Sequence[RangeLike]) -> List[Range]:
        return self.replace(ranges, [""] * len(ranges))


__all__ = ["TextBuffer"]
