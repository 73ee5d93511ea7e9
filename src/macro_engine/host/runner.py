"""Host-side orchestration: validate, execute, then materialize a macro."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from macro_engine.buffer import BufferRegistry
from macro_engine.replay import DisplaySurface, SurfaceFactory, materialize
from macro_engine.runtime import Settings, telemetry
from macro_engine.script import (
    DebugChannel,
    MacroScript,
    build_util,
    validate_source,
)
from macro_engine.script.debug import DebugSink


@dataclass(slots=True)
class ExecutionReport:
    """Outcome of one successful run."""

    registry: BufferRegistry
    debug: DebugChannel
    warnings: List[str] = field(default_factory=list)
    surfaces: List[DisplaySurface] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @property
    def texts(self) -> List[str]:
        return [buffer.get_text() for buffer in self.registry]


class MacroRunner:
    """Runs one macro at a time against a host document.

    Nothing reaches a display surface unless the macro finishes; a failing
    macro leaves the host's documents exactly as they were.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        extras: Optional[Mapping[str, Callable[..., Any]]] = None,
        debug_sink: Optional[DebugSink] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.extras = dict(extras or {})
        self.debug_sink = debug_sink
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def execute(
        self, source: str, text: str, *, filename: str = "<macro>"
    ) -> ExecutionReport:
        """Validate and run ``source`` against ``text`` without touching surfaces."""

        if self._running:
            raise RuntimeError("A macro is already running on this runner")
        self._running = True
        started = time.perf_counter()
        try:
            report = validate_source(
                source, filename=filename, strict_loops=self.settings.strict_loops
            )
            debug = DebugChannel(self.debug_sink)
            for warning in report.warnings:
                telemetry.record_event(
                    "macro.loop_warning", level="warning", data={"detail": warning}
                )
                debug.warn(warning)

            script = MacroScript(
                source,
                extra_names=tuple(self.extras),
                filename=filename,
                tree=report.tree,
            )
            registry = BufferRegistry(
                text, debug_mode=self.settings.debug_checkpoints
            )
            telemetry.record_event(
                "macro.start", data={"script": filename, "length": len(text)}
            )
            await script.run(registry, debug, build_util(), self.extras)
        finally:
            self._running = False

        elapsed = (time.perf_counter() - started) * 1000
        telemetry.record_event(
            "macro.finish",
            data={"script": filename, "buffers": registry.file_count(), "ms": f"{elapsed:.1f}"},
        )
        return ExecutionReport(
            registry=registry,
            debug=debug,
            warnings=report.warnings,
            elapsed_ms=elapsed,
        )

    async def run(
        self,
        source: str,
        text: str,
        target: DisplaySurface,
        open_surface: SurfaceFactory,
        *,
        filename: str = "<macro>",
    ) -> ExecutionReport:
        """Execute the macro, then replay every buffer into display surfaces."""

        outcome = await self.execute(source, text, filename=filename)
        outcome.surfaces = await materialize(outcome.registry, target, open_surface)
        return outcome


__all__ = ["ExecutionReport", "MacroRunner"]
