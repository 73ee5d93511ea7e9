"""Materialization of buffer histories into host display surfaces."""

from .materialize import materialize, replay_buffer
from .surfaces import DisplaySurface, StringSurface, SurfaceFactory, overwrite

__all__ = [
    "DisplaySurface",
    "StringSurface",
    "SurfaceFactory",
    "materialize",
    "overwrite",
    "replay_buffer",
]
