"""Compile a macro body into an async function with a fixed parameter list.

The macro source is a block of statements. It becomes the body of::

    async def __macro__(context, debug, util, <extra names...>):
        <macro statements>

and runs with a globals dict holding nothing but a curated builtins table, so
the only ways out are the injected arguments. This is a capability boundary,
not a security sandbox.
"""

from __future__ import annotations

import ast
import asyncio
import builtins
import inspect
import keyword
from types import CodeType, TracebackType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple, cast

from RestrictedPython import safe_builtins

from macro_engine.buffer import BufferRegistry
from macro_engine.runtime import telemetry

from .debug import DebugChannel
from .validation import MacroValidationError, parse_source

ENTRY_POINT = "__macro__"
FIXED_PARAMETERS: Tuple[str, ...] = ("context", "debug", "util")

BLOCKED_BUILTINS = frozenset(
    {
        "BaseException",
        "GeneratorExit",
        "KeyboardInterrupt",
        "SystemExit",
        "__import__",
        "breakpoint",
        "compile",
        "eval",
        "exec",
        "globals",
        "input",
        "locals",
        "open",
        "vars",
    }
)

_EXTRA_BUILTINS = (
    "__build_class__",
    "all",
    "any",
    "dict",
    "enumerate",
    "filter",
    "format",
    "frozenset",
    "getattr",
    "hasattr",
    "iter",
    "list",
    "map",
    "max",
    "min",
    "next",
    "object",
    "reversed",
    "set",
    "sum",
    "type",
)


class ScriptExecutionError(RuntimeError):
    """A macro raised while running; the original error is ``__cause__``."""

    def __init__(self, message: str, *, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.line = line


def build_builtins(debug: DebugChannel) -> Dict[str, Any]:
    table: Dict[str, Any] = dict(safe_builtins)
    for name in _EXTRA_BUILTINS:
        table[name] = getattr(builtins, name)
    table["print"] = debug.print
    for name in BLOCKED_BUILTINS:
        table.pop(name, None)
    return table


def check_extra_names(names: Iterable[str]) -> Tuple[str, ...]:
    seen = set(FIXED_PARAMETERS)
    checked = []
    for name in names:
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ValueError(f"Injected name {name!r} is not a valid identifier")
        if name in seen:
            raise ValueError(f"Injected name {name!r} is already taken")
        seen.add(name)
        checked.append(name)
    return tuple(checked)


def _script_line(tb: Optional[TracebackType], filename: str) -> Optional[int]:
    line = None
    while tb is not None:
        if tb.tb_frame.f_code.co_filename == filename:
            line = tb.tb_lineno
        tb = tb.tb_next
    return line


class MacroScript:
    """A macro compiled once and runnable against fresh registries."""

    def __init__(
        self,
        source: str,
        *,
        extra_names: Sequence[str] = (),
        filename: str = "<macro>",
        tree: Optional[ast.Module] = None,
    ) -> None:
        self.source = source
        self.filename = filename
        self.extra_names = check_extra_names(extra_names)
        self.parameters = FIXED_PARAMETERS + self.extra_names
        self._code = self._compile(tree or parse_source(source, filename=filename))

    def _compile(self, tree: ast.Module) -> CodeType:
        module = ast.parse(f"async def {ENTRY_POINT}({', '.join(self.parameters)}):\n    pass\n")
        function = cast(ast.AsyncFunctionDef, module.body[0])
        function.body = list(tree.body) or [ast.Pass()]
        ast.fix_missing_locations(module)
        try:
            return compile(module, self.filename, "exec")
        except SyntaxError as exc:
            # e.g. ``from __future__`` or ``nonlocal`` in the macro body
            raise MacroValidationError(
                f"Macro cannot be compiled: {exc.msg} (line {exc.lineno})",
                reason="syntax",
                line=exc.lineno,
            ) from exc

    def bind(self, debug: DebugChannel) -> Callable[..., Any]:
        """Materialize the entry point inside an isolated globals dict."""

        namespace: Dict[str, Any] = {
            "__builtins__": build_builtins(debug),
            "__name__": ENTRY_POINT,
        }
        exec(self._code, namespace)
        function = namespace[ENTRY_POINT]
        if not inspect.iscoroutinefunction(function):
            raise MacroValidationError(
                "Macros may not use 'yield' at top level", reason="generator"
            )
        return function

    async def run(
        self,
        context: BufferRegistry,
        debug: DebugChannel,
        util: Any,
        extras: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> Any:
        """Await the macro body once; user errors become ``ScriptExecutionError``."""

        extras = dict(extras or {})
        missing = [name for name in self.extra_names if name not in extras]
        if missing:
            raise ValueError(f"No value supplied for injected names {missing}")

        function = self.bind(debug)
        arguments = [extras[name] for name in self.extra_names]
        with telemetry.span(
            name="script::run",
            component="script",
            metadata={"script": self.filename, "parameters": ",".join(self.parameters)},
        ) as handle:
            try:
                return await function(context, debug, util, *arguments)
            except (asyncio.CancelledError, KeyboardInterrupt):
                raise
            except BaseException as exc:
                # SystemExit from a macro must not take the host down
                line = _script_line(exc.__traceback__, self.filename)
                handle.add_metadata("line", line)
                where = f" (line {line})" if line is not None else ""
                raise ScriptExecutionError(
                    f"{type(exc).__name__}: {exc}{where}", line=line
                ) from exc


__all__ = [
    "BLOCKED_BUILTINS",
    "ENTRY_POINT",
    "FIXED_PARAMETERS",
    "MacroScript",
    "ScriptExecutionError",
    "build_builtins",
    "check_extra_names",
]
