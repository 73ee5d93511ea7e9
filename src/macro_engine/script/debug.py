"""The ``debug`` object injected into macros."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from macro_engine.runtime import telemetry

DebugSink = Callable[["DebugRecord"], None]


@dataclass(frozen=True, slots=True)
class DebugRecord:
    level: str
    message: str

    def __str__(self) -> str:
        if self.level == "info":
            return self.message
        return f"[{self.level}] {self.message}"


class DebugChannel:
    """Side channel a macro writes to; the host decides where lines go.

    Every line is kept in :attr:`records`, written to the engine logger and
    handed to ``sink`` when the host supplied one.
    """

    def __init__(self, sink: Optional[DebugSink] = None) -> None:
        self.records: List[DebugRecord] = []
        self._sink = sink
        self._logger = telemetry.get_logger("macro_engine.script")

    def log(self, *values: object, sep: str = " ") -> None:
        self._emit("info", sep.join(str(value) for value in values))

    info = log

    def warn(self, *values: object, sep: str = " ") -> None:
        self._emit("warning", sep.join(str(value) for value in values))

    def error(self, *values: object, sep: str = " ") -> None:
        self._emit("error", sep.join(str(value) for value in values))

    def print(self, *values: object, sep: str = " ", end: str = "\n", **_ignored: object) -> None:
        """Drop-in for the ``print`` builtin inside macros."""

        message = sep.join(str(value) for value in values)
        if end and end != "\n":
            message += end
        self._emit("info", message)

    def lines(self) -> List[str]:
        return [str(record) for record in self.records]

    def _emit(self, level: str, message: str) -> None:
        record = DebugRecord(level=level, message=message)
        self.records.append(record)
        getattr(self._logger, level)(f"macro::{message}")
        if self._sink is not None:
            self._sink(record)


__all__ = ["DebugChannel", "DebugRecord", "DebugSink"]
