"""Ordered, append-only collection of buffers for one macro run."""

from __future__ import annotations

from typing import Iterator, List

from macro_engine.runtime import telemetry

from .text_buffer import TextBuffer


class BufferRegistry:
    """Owns every buffer a macro touches; handed to scripts as ``context``.

    Index 0 holds the host document. Further buffers are created empty the
    first time a script asks for them and are never removed or reordered.
    """

    def __init__(self, text: str = "", *, debug_mode: bool = False) -> None:
        self.debug_mode = debug_mode
        self._buffers: List[TextBuffer] = [self._create(0, text)]

    def _create(self, index: int, text: str = "") -> TextBuffer:
        return TextBuffer(text, name=f"buffer-{index}", debug_mode=self.debug_mode)

    def get_file(self, index: int = 0) -> TextBuffer:
        if index < 0:
            raise IndexError(f"Buffer index must be non-negative, got {index}")
        while len(self._buffers) <= index:
            created = len(self._buffers)
            self._buffers.append(self._create(created))
            telemetry.record_event(
                "registry.create", level="debug", data={"index": created}
            )
        return self._buffers[index]

    def file_count(self) -> int:
        return len(self._buffers)

    def __len__(self) -> int:
        return len(self._buffers)

    def __iter__(self) -> Iterator[TextBuffer]:
        return iter(tuple(self._buffers))


__all__ = ["BufferRegistry"]
