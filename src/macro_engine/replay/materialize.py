"""Replay checkpoints and final text of every buffer into display surfaces."""

from __future__ import annotations

from typing import List

from macro_engine.buffer import BufferRegistry, TextBuffer
from macro_engine.runtime import telemetry

from .surfaces import DisplaySurface, SurfaceFactory, overwrite


def replay_buffer(buffer: TextBuffer, surface: DisplaySurface) -> int:
    """Write each checkpoint, then the current text; return the write count."""

    writes = 0
    for state in buffer.checkpoints:
        overwrite(surface, state)
        writes += 1
    overwrite(surface, buffer.get_text())
    return writes + 1


async def materialize(
    registry: BufferRegistry,
    primary: DisplaySurface,
    open_surface: SurfaceFactory,
) -> List[DisplaySurface]:
    """Replay the registry in index order.

    Buffer 0 goes into ``primary``; every other buffer gets a surface from
    ``open_surface(index)``. Returns the surfaces in buffer order.
    """

    surfaces: List[DisplaySurface] = []
    with telemetry.span(
        name="replay::materialize",
        component="replay",
        metadata={"buffers": registry.file_count()},
    ):
        for index, buffer in enumerate(registry):
            surface = primary if index == 0 else await open_surface(index)
            writes = replay_buffer(buffer, surface)
            telemetry.record_event(
                "replay.buffer",
                level="debug",
                data={"index": index, "writes": writes},
            )
            surfaces.append(surface)
    return surfaces


__all__ = ["materialize", "replay_buffer"]
