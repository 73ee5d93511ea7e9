"""Host-agnostic controller behind the Textual app's command line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from macro_engine.host import ExecutionReport, MacroRunner, MacroStorageError, MacroStore
from macro_engine.replay import DisplaySurface, SurfaceFactory
from macro_engine.script import MacroValidationError, ScriptExecutionError, new_macro


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the controller uses to reach the host widgets."""

    read_macro: Callable[[], str]
    read_target: Callable[[], str]
    target_surface: Callable[[], DisplaySurface]
    open_surface: SurfaceFactory
    show_macro: Callable[[str, int], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop
    # called after replay with the buffer count; hosts drop surplus output panes
    trim_outputs: Callable[[int], None] = _noop


@dataclass(slots=True)
class CommandResult:
    status: str
    message: str = ""
    report: Optional[ExecutionReport] = None


CommandHandler = Callable[["TextualMacroAdapter", List[str]], Awaitable[CommandResult]]

# failures a user can fix; anything else is a bug and propagates
_REPORTABLE = (MacroValidationError, ScriptExecutionError, MacroStorageError)


class TextualMacroAdapter:
    """Turns command lines (``run``, ``save NAME`` ...) into runner/store calls."""

    def __init__(self, runner: MacroRunner, store: MacroStore, hooks: TextualUIHooks) -> None:
        self.runner = runner
        self.store = store
        self.hooks = hooks
        # file name awaiting a second `delete`
        self.pending_delete: Optional[str] = None

    async def handle_command(self, line: str) -> CommandResult:
        parts = line.strip().split()
        if not parts:
            return self._finish(CommandResult(status="command_empty"))
        command, args = parts[0].lower(), parts[1:]
        handler = _COMMAND_HANDLERS.get(command)
        if handler is None:
            return self._finish(
                CommandResult(status="command_error", message=f"Unknown command: {command}")
            )
        if handler is not _handle_delete:
            self.pending_delete = None
        try:
            result = await handler(self, args)
        except _REPORTABLE as exc:
            result = CommandResult(status="error", message=str(exc))
        return self._finish(result)

    async def run_macro(self, source: str, *, filename: str = "<macro>") -> CommandResult:
        report = await self.runner.run(
            source,
            self.hooks.read_target(),
            self.hooks.target_surface(),
            self.hooks.open_surface,
            filename=filename,
        )
        count = report.registry.file_count()
        self.hooks.trim_outputs(count)
        noun = "buffer" if count == 1 else "buffers"
        return CommandResult(
            status="run",
            message=f"Macro finished: {count} {noun} in {report.elapsed_ms:.0f} ms",
            report=report,
        )

    def _finish(self, result: CommandResult) -> CommandResult:
        if result.message:
            self.hooks.update_status(result.message)
        self.hooks.log(f"{result.status}: {result.message}" if result.message else result.status)
        return result


async def _handle_run(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    if args:
        name = args[0]
        source = adapter.store.load(name)
        return await adapter.run_macro(source, filename=adapter.store.path_for(name).name)
    return await adapter.run_macro(adapter.hooks.read_macro())


async def _handle_new(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    del args
    text, cursor = new_macro()
    adapter.hooks.show_macro(text, cursor)
    return CommandResult(status="new", message="New macro")


async def _handle_save(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    if not args:
        return CommandResult(status="command_error", message="usage: save NAME")
    path = adapter.store.save(args[0], adapter.hooks.read_macro())
    return CommandResult(status="save", message=f"Saved {path.name}")


async def _handle_load(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    if not args:
        return CommandResult(status="command_error", message="usage: load NAME")
    source = adapter.store.load(args[0])
    adapter.hooks.show_macro(source, max(len(source) - 1, 0))
    return CommandResult(status="load", message=f"Loaded {adapter.store.path_for(args[0]).name}")


async def _handle_delete(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    if not args:
        return CommandResult(status="command_error", message="usage: delete NAME")
    path = adapter.store.path_for(args[0])
    if not path.is_file():
        raise MacroStorageError(f"No saved macro named {path.name}", path=path)
    if adapter.pending_delete != path.name:
        adapter.pending_delete = path.name
        return CommandResult(
            status="confirm",
            message=f"Repeat 'delete {args[0]}' to delete {path.name}",
        )
    return await _handle_force_delete(adapter, args)


async def _handle_force_delete(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    if not args:
        return CommandResult(status="command_error", message="usage: delete! NAME")
    adapter.pending_delete = None
    path = adapter.store.delete(args[0])
    return CommandResult(status="delete", message=f"Deleted {path.name}")


async def _handle_list(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    del args
    names = adapter.store.list()
    if not names:
        return CommandResult(
            status="list", message="You haven't saved any macros with the save command yet"
        )
    return CommandResult(status="list", message=", ".join(names))


async def _handle_dir(adapter: TextualMacroAdapter, args: List[str]) -> CommandResult:
    del args
    return CommandResult(status="dir", message=str(adapter.store.ensure_dir()))


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "run": _handle_run,
    "r": _handle_run,
    "new": _handle_new,
    "save": _handle_save,
    "w": _handle_save,
    "load": _handle_load,
    "e": _handle_load,
    "delete": _handle_delete,
    "rm": _handle_delete,
    "delete!": _handle_force_delete,
    "rm!": _handle_force_delete,
    "list": _handle_list,
    "ls": _handle_list,
    "dir": _handle_dir,
}

__all__ = ["CommandResult", "TextualMacroAdapter", "TextualUIHooks"]
