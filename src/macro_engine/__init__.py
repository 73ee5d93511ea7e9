"""Scripted batch edits over in-memory text buffers."""

__all__ = [
    "adapters",
    "buffer",
    "host",
    "replay",
    "runtime",
    "script",
]

__version__ = "0.1.0"
