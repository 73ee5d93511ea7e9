from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

import pytest

from macro_engine.adapters.textual import (
    TextualMacroAdapter,
    TextualUIHooks,
    location_for_offset,
)
from macro_engine.host import MacroRunner, MacroStore
from macro_engine.replay import DisplaySurface, StringSurface
from macro_engine.runtime import Settings

UPPER_MACRO = "# macro\nf = context.get_file()\nf.set_text(f.get_text().upper())\n"


@dataclass
class FakeHost:
    macro: str
    target: StringSurface
    opened: List[StringSurface] = field(default_factory=list)
    shown: List[Tuple[str, int]] = field(default_factory=list)
    statuses: List[str] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)
    trims: List[int] = field(default_factory=list)

    async def open_surface(self, index: int) -> DisplaySurface:
        surface = StringSurface(name=f"output-{index}")
        self.opened.append(surface)
        return surface

    def show_macro(self, text: str, cursor: int) -> None:
        self.macro = text
        self.shown.append((text, cursor))


def make_adapter(
    tmp_path: Path, *, macro: str = UPPER_MACRO, target: str = "hello"
) -> Tuple[TextualMacroAdapter, FakeHost]:
    host = FakeHost(macro=macro, target=StringSurface(target))
    hooks = TextualUIHooks(
        read_macro=lambda: host.macro,
        read_target=lambda: host.target.text,
        target_surface=lambda: host.target,
        open_surface=host.open_surface,
        show_macro=host.show_macro,
        update_status=host.statuses.append,
        log=host.logs.append,
        trim_outputs=host.trims.append,
    )
    runner = MacroRunner(settings=Settings(macros_dir=tmp_path))
    return TextualMacroAdapter(runner, MacroStore(tmp_path), hooks), host


def command(adapter: TextualMacroAdapter, line: str):
    return asyncio.run(adapter.handle_command(line))


def test_run_rewrites_target(tmp_path: Path) -> None:
    adapter, host = make_adapter(tmp_path)

    result = command(adapter, "run")

    assert result.status == "run"
    assert host.target.text == "HELLO"
    assert host.statuses[-1].startswith("Macro finished: 1 buffer")


def test_run_opens_surfaces_for_extra_buffers(tmp_path: Path) -> None:
    macro = "# macro\ncontext.get_file(1).set_text('copy')\n"
    adapter, host = make_adapter(tmp_path, macro=macro)

    command(adapter, "run")

    assert [surface.text for surface in host.opened] == ["copy"]
    assert host.target.text == "hello"
    assert host.trims == [2]


def test_run_errors_are_reported_not_raised(tmp_path: Path) -> None:
    adapter, host = make_adapter(tmp_path, macro="f = 1\n")

    result = command(adapter, "run")

    assert result.status == "error"
    assert "macro" in host.statuses[-1]
    assert host.target.writes == []


def test_script_errors_are_reported(tmp_path: Path) -> None:
    adapter, host = make_adapter(tmp_path, macro="# macro\nraise KeyError('k')\n")

    result = command(adapter, "run")

    assert result.status == "error"
    assert "KeyError" in result.message
    assert host.target.writes == []


def test_save_list_load_delete_cycle(tmp_path: Path) -> None:
    adapter, host = make_adapter(tmp_path)

    assert command(adapter, "save upper").message == "Saved upper.py"
    assert command(adapter, "list").message == "upper.py"

    host.macro = ""
    assert command(adapter, "load upper").status == "load"
    assert host.macro == UPPER_MACRO

    assert command(adapter, "delete upper").status == "confirm"
    assert command(adapter, "delete upper").message == "Deleted upper.py"
    assert command(adapter, "list").message.startswith("You haven't saved")


def test_run_saved_macro_by_name(tmp_path: Path) -> None:
    adapter, host = make_adapter(tmp_path)
    command(adapter, "save upper")
    host.macro = "not a macro"

    result = command(adapter, "run upper")

    assert result.status == "run"
    assert host.target.text == "HELLO"


def test_load_missing_macro_reports_error(tmp_path: Path) -> None:
    adapter, host = make_adapter(tmp_path)

    result = command(adapter, "load missing")

    assert result.status == "error"
    assert host.shown == []


def test_new_shows_template_with_cursor(tmp_path: Path) -> None:
    adapter, host = make_adapter(tmp_path, macro="")

    command(adapter, "new")

    text, cursor = host.shown[-1]
    assert text.splitlines()[0] == "# macro"
    assert 0 < cursor < len(text)


@pytest.mark.parametrize(
    "line, status",
    [("", "command_empty"), ("frobnicate", "command_error"), ("save", "command_error")],
)
def test_unusable_commands(tmp_path: Path, line: str, status: str) -> None:
    adapter, host = make_adapter(tmp_path)

    assert command(adapter, line).status == status
    assert host.logs


def test_dir_reports_macros_directory(tmp_path: Path) -> None:
    adapter, _ = make_adapter(tmp_path)

    assert command(adapter, "dir").message == str(tmp_path)


@pytest.mark.parametrize(
    "offset, location",
    [(0, (0, 0)), (2, (0, 2)), (3, (1, 0)), (4, (1, 1)), (99, (1, 2)), (-5, (0, 0))],
)
def test_location_for_offset(offset: int, location: Tuple[int, int]) -> None:
    assert location_for_offset("ab\ncd", offset) == location


def test_delete_waits_for_repeat(tmp_path: Path) -> None:
    adapter, _ = make_adapter(tmp_path)
    command(adapter, "save upper")

    assert command(adapter, "delete upper").status == "confirm"
    command(adapter, "list")
    assert command(adapter, "delete upper").status == "confirm"
    assert adapter.store.list() == ["upper.py"]

    assert command(adapter, "rm upper.py").status == "delete"
    assert adapter.store.list() == []


def test_delete_confirmation_is_per_name(tmp_path: Path) -> None:
    adapter, _ = make_adapter(tmp_path)
    command(adapter, "save one")
    command(adapter, "save two")

    command(adapter, "delete one")

    assert command(adapter, "delete two").status == "confirm"
    assert adapter.store.list() == ["one.py", "two.py"]


def test_forced_delete_skips_confirmation(tmp_path: Path) -> None:
    adapter, _ = make_adapter(tmp_path)
    command(adapter, "save upper")

    assert command(adapter, "delete! upper").message == "Deleted upper.py"
    assert adapter.store.list() == []


def test_delete_of_missing_macro_reports_error(tmp_path: Path) -> None:
    adapter, _ = make_adapter(tmp_path)

    result = command(adapter, "delete ghost")

    assert result.status == "error"
    assert adapter.pending_delete is None
