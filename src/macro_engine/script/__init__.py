"""Execution contract for user macros: compile, inject, run."""

from .contract import FIXED_PARAMETERS, MacroScript, ScriptExecutionError
from .debug import DebugChannel, DebugRecord
from .template import DEFAULT_MACRO, new_macro
from .util import build_util
from .validation import MacroValidationError, ValidationReport, validate_source

__all__ = [
    "DEFAULT_MACRO",
    "DebugChannel",
    "DebugRecord",
    "FIXED_PARAMETERS",
    "MacroScript",
    "MacroValidationError",
    "ScriptExecutionError",
    "ValidationReport",
    "build_util",
    "new_macro",
    "validate_source",
]
