"""Host-facing services: the macro runner and the macro store."""

from .runner import ExecutionReport, MacroRunner
from .storage import MacroStorageError, MacroStore

__all__ = ["ExecutionReport", "MacroRunner", "MacroStorageError", "MacroStore"]
