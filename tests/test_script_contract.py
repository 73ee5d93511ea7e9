from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional, Tuple

import pytest

from macro_engine.buffer import BufferRegistry, RangeConflictError
from macro_engine.script import (
    DebugChannel,
    MacroScript,
    MacroValidationError,
    ScriptExecutionError,
    build_util,
)


def run_script(
    source: str,
    text: str = "hello",
    extras: Optional[Dict[str, Callable[..., Any]]] = None,
) -> Tuple[BufferRegistry, DebugChannel, Any]:
    registry = BufferRegistry(text)
    debug = DebugChannel()
    script = MacroScript(source, extra_names=tuple(extras or {}))
    result = asyncio.run(script.run(registry, debug, build_util(), extras))
    return registry, debug, result


def test_script_edits_buffer_through_context() -> None:
    registry, _, _ = run_script(
        "file = context.get_file()\n"
        "end = file.index_after('hello')\n"
        "file.insert([end], [' world'])\n"
    )

    assert registry.get_file().get_text() == "hello world"


def test_script_can_create_more_buffers() -> None:
    registry, _, _ = run_script(
        "source = context.get_file().get_text()\n"
        "context.get_file(2).set_text(source.upper())\n"
    )

    assert registry.file_count() == 3
    assert registry.get_file(2).get_text() == "HELLO"


def test_script_may_await() -> None:
    registry, _, _ = run_script(
        "await util.sleep(0)\ncontext.get_file().set_text('done')\n"
    )

    assert registry.get_file().get_text() == "done"


def test_script_return_value_is_passed_back() -> None:
    _, _, result = run_script("return context.file_count() + 41\n")

    assert result == 42


def test_print_goes_to_debug_channel() -> None:
    _, debug, _ = run_script("print('hi', 1)\ndebug.warn('careful')\n")

    assert debug.lines() == ["hi 1", "[warning] careful"]


def test_util_namespace_helpers() -> None:
    registry, _, _ = run_script(
        "file = context.get_file()\n"
        "spans = util.find_all(file.get_text(), util.re.compile('[aeiou]'))\n"
        "file.replace(spans, ['*'] * len(spans))\n",
        text="banana",
    )

    assert registry.get_file().get_text() == "b*n*n*"


def test_injected_functions_follow_fixed_parameters() -> None:
    registry, _, _ = run_script(
        "file = context.get_file()\nfile.set_text(shout(file.get_text()))\n",
        extras={"shout": lambda text: text.upper()},
    )

    assert registry.get_file().get_text() == "HELLO"


def test_classes_can_be_defined() -> None:
    _, debug, _ = run_script("class Marker:\n    pass\ndebug.log(Marker.__name__)\n")

    assert debug.lines() == ["Marker"]


@pytest.mark.parametrize(
    "source, cause",
    [
        ("import os\n", ImportError),
        ("open('somewhere.txt')\n", NameError),
        ("eval('1 + 1')\n", NameError),
        ("MacroScript\n", NameError),
    ],
)
def test_ambient_names_are_unreachable(source: str, cause: type) -> None:
    with pytest.raises(ScriptExecutionError) as info:
        run_script(source)

    assert isinstance(info.value.__cause__, cause)


def test_script_error_reports_line() -> None:
    with pytest.raises(ScriptExecutionError) as info:
        run_script("x = 1\ny = 2\nraise ValueError('boom')\n")

    assert info.value.line == 3
    assert "boom" in str(info.value)
    assert isinstance(info.value.__cause__, ValueError)


def test_range_conflict_surfaces_as_script_error() -> None:
    with pytest.raises(ScriptExecutionError) as info:
        run_script("context.get_file().replace([(0, 3), (2, 4)], ['a', 'b'])\n")

    assert isinstance(info.value.__cause__, RangeConflictError)


def test_top_level_yield_is_rejected() -> None:
    with pytest.raises(MacroValidationError) as info:
        run_script("yield 1\n")

    assert info.value.reason == "generator"


def test_empty_body_runs() -> None:
    registry, _, result = run_script("")

    assert result is None
    assert registry.get_file().get_text() == "hello"


@pytest.mark.parametrize("name", ["debug", "not valid", "class"])
def test_bad_injected_names_are_rejected(name: str) -> None:
    with pytest.raises(ValueError):
        MacroScript("pass\n", extra_names=(name,))


def test_missing_injected_value_is_rejected() -> None:
    script = MacroScript("pass\n", extra_names=("helper",))

    with pytest.raises(ValueError):
        asyncio.run(script.run(BufferRegistry(), DebugChannel(), build_util(), {}))


def test_debug_channel_forwards_to_sink() -> None:
    seen = []
    debug = DebugChannel(sink=seen.append)

    debug.log("a", "b", sep="-")
    debug.error("bad")

    assert [str(record) for record in seen] == ["a-b", "[error] bad"]
    assert [record.level for record in debug.records] == ["info", "error"]


def test_exit_names_are_not_builtins() -> None:
    with pytest.raises(ScriptExecutionError) as info:
        run_script("raise SystemExit(7)\n")

    assert isinstance(info.value.__cause__, NameError)


def test_system_exit_from_injected_callable_is_wrapped() -> None:
    def leave() -> None:
        raise SystemExit(7)

    with pytest.raises(ScriptExecutionError) as info:
        run_script("context.get_file().set_text('x')\nleave()\n", extras={"leave": leave})

    assert isinstance(info.value.__cause__, SystemExit)
    assert info.value.line == 2
