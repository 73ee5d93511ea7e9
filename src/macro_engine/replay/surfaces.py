"""Boundary types for writing buffer text into host display surfaces."""

from __future__ import annotations

from typing import Awaitable, Callable, List, Protocol


class DisplaySurface(Protocol):
    """Host-owned editable view that replayed text is written into."""

    def length(self) -> int:
        """Return the length of the text the surface currently shows."""
        ...

    def replace_region(self, start: int, end: int, text: str) -> None:
        """Overwrite ``[start, end)`` of the surface with ``text``."""
        ...


SurfaceFactory = Callable[[int], Awaitable[DisplaySurface]]


class StringSurface:
    """In-memory surface; remembers every full state it was given."""

    def __init__(self, text: str = "", *, name: str = "surface") -> None:
        self.name = name
        self.text = text
        self.writes: List[str] = []

    def length(self) -> int:
        return len(self.text)

    def replace_region(self, start: int, end: int, text: str) -> None:
        self.text = self.text[:start] + text + self.text[end:]
        self.writes.append(self.text)

    def __repr__(self) -> str:
        return f"StringSurface(name={self.name!r}, writes={len(self.writes)})"


def overwrite(surface: DisplaySurface, text: str) -> None:
    surface.replace_region(0, surface.length(), text)


__all__ = ["DisplaySurface", "StringSurface", "SurfaceFactory", "overwrite"]
