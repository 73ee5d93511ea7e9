"""``DisplaySurface`` backed by a Textual ``TextArea``."""

from __future__ import annotations

from typing import Tuple

from textual.widgets import TextArea

Location = Tuple[int, int]  # (row, column)


def location_for_offset(text: str, offset: int) -> Location:
    offset = min(max(offset, 0), len(text))
    row = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return (row, offset - line_start)


class TextAreaSurface:
    """Writes replayed text into a ``TextArea`` through its edit API."""

    def __init__(self, text_area: TextArea) -> None:
        self.text_area = text_area

    def _flat_text(self) -> str:
        # offsets count one character per line break whatever the file uses
        return "\n".join(self.text_area.document.lines)

    def length(self) -> int:
        return len(self._flat_text())

    def replace_region(self, start: int, end: int, text: str) -> None:
        flat = self._flat_text()
        self.text_area.replace(
            text,
            location_for_offset(flat, start),
            location_for_offset(flat, end),
            maintain_selection_offset=False,
        )


__all__ = ["TextAreaSurface", "location_for_offset"]
