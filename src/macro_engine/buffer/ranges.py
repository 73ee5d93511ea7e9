"""Half-open character ranges and batch validation for ``TextBuffer.replace``."""

from __future__ import annotations

from typing import List, NamedTuple, Sequence, Tuple


class Range(NamedTuple):
    """Half-open ``[start, end)`` interval over character positions."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


RangeLike = Sequence[int]
Edit = Tuple[int, Range, str]  # (original index, range, replacement)


class RangeConflictError(ValueError):
    """Raised when two ranges of one batch overlap.

    ``first`` and ``second`` are the indices the offending ranges had in the
    caller's sequence. This is a bug in the calling script, not a transient
    condition.
    """

    def __init__(
        self, first: int, first_range: Range, second: int, second_range: Range
    ) -> None:
        super().__init__(
            f"Range {first} : {list(first_range)} overlaps with "
            f"{second} : {list(second_range)}"
        )
        self.first = first
        self.first_range = first_range
        self.second = second
        self.second_range = second_range


class RangeBoundsError(IndexError):
    """Raised when a range is reversed or falls outside the buffer."""

    def __init__(self, message: str, *, index: int, value: Range) -> None:
        super().__init__(message)
        self.index = index
        self.value = value


def as_range(value: RangeLike) -> Range:
    start, end = value
    return Range(int(start), int(end))


def check_bounds(ranges: Sequence[Range], length: int) -> None:
    for index, rng in enumerate(ranges):
        if rng.start > rng.end:
            raise RangeBoundsError(
                f"Range {index} : {list(rng)} ends before it starts",
                index=index,
                value=rng,
            )
        if rng.start < 0 or rng.end > length:
            raise RangeBoundsError(
                f"Range {index} : {list(rng)} is outside [0, {length}]",
                index=index,
                value=rng,
            )


def sort_edits(ranges: Sequence[Range], replacements: Sequence[str]) -> List[Edit]:
    """Pair each range with its replacement and sort the pairs by start.

    The sort is stable, so zero-width ranges at the same point keep the order
    in which they were submitted.
    """

    edits = [
        (index, rng, replacements[index]) for index, rng in enumerate(ranges)
    ]
    edits.sort(key=lambda edit: edit[1].start)
    return edits


def check_overlaps(edits: Sequence[Edit]) -> None:
    """Reject sorted edits whose ranges overlap; touching is allowed."""

    for previous, current in zip(edits, edits[1:]):
        if previous[1].end > current[1].start:
            raise RangeConflictError(previous[0], previous[1], current[0], current[1])


__all__ = [
    "Edit",
    "Range",
    "RangeLike",
    "RangeBoundsError",
    "RangeConflictError",
    "as_range",
    "check_bounds",
    "check_overlaps",
    "sort_edits",
]
