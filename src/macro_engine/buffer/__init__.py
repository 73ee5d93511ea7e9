"""Text buffers, batch range edits, search primitives and the registry."""

from .checkpoints import CheckpointLog
from .ranges import Range, RangeBoundsError, RangeConflictError
from .registry import BufferRegistry
from .search import BufferMatch
from .text_buffer import TextBuffer

__all__ = [
    "BufferMatch",
    "BufferRegistry",
    "CheckpointLog",
    "Range",
    "RangeBoundsError",
    "RangeConflictError",
    "TextBuffer",
]
