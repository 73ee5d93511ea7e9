"""Textual host: controller, TextArea surface and the app itself."""

from .controller import CommandResult, TextualMacroAdapter, TextualUIHooks
from .surface import TextAreaSurface, location_for_offset

__all__ = [
    "CommandResult",
    "TextAreaSurface",
    "TextualMacroAdapter",
    "TextualUIHooks",
    "location_for_offset",
]
