"""Append-only checkpoint log replayed after a macro run."""

from __future__ import annotations

from typing import Iterator, List, Sequence


class CheckpointLog:
    """Ordered full-text snapshots. Entries are only ever appended."""

    def __init__(self) -> None:
        self._entries: List[str] = []

    def push(self, text: str) -> None:
        self._entries.append(text)

    def snapshot(self) -> Sequence[str]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CheckpointLog):
            return self._entries == other._entries
        if isinstance(other, (list, tuple)):
            return self._entries == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"CheckpointLog({len(self._entries)} entries)"


__all__ = ["CheckpointLog"]
