"""Textual app hosting a macro editor next to the document it edits."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

try:  # pragma: no cover - imported only when the UI is started
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical
    from textual.widgets import Footer, Header, Input, Log, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use macro_engine.adapters.textual.app"
    ) from exc

from macro_engine.host import MacroRunner, MacroStore
from macro_engine.replay import DisplaySurface
from macro_engine.runtime import Settings
from macro_engine.script import DebugRecord, new_macro

from .controller import TextualMacroAdapter, TextualUIHooks
from .surface import TextAreaSurface, location_for_offset


class MacroEngineApp(App[None]):
    """Macro pane on the left, target document and extra outputs on the right."""

    CSS = """
	#panes {
		height: 1fr;
	}

	#macro-editor {
		width: 1fr;
		border: round $accent;
	}

	#documents {
		width: 1fr;
	}

	#documents TextArea {
		height: 1fr;
		border: round $secondary;
	}

	#debug-log {
		height: 8;
		border: round $surface-lighten-2;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+r", "run_macro", "Run macro"),
        ("ctrl+n", "new_macro", "New macro"),
        ("ctrl+s", "write_target", "Write target"),
        ("ctrl+l", "focus_command", "Command"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        target_path: Optional[Path] = None,
    ) -> None:
        super().__init__()
        self.settings = settings or Settings.from_env()
        self.target_path = target_path
        self.adapter: TextualMacroAdapter | None = None
        self._outputs: List[TextArea] = []

    def compose(self) -> ComposeResult:
        target_text = ""
        if self.target_path is not None and self.target_path.exists():
            target_text = self.target_path.read_text(encoding="utf-8")
        yield Header(show_clock=True)
        with Horizontal(id="panes"):
            yield TextArea("", id="macro-editor")
            with Vertical(id="documents"):
                yield TextArea(target_text, id="target")
        yield Log(id="debug-log")
        yield Static("", id="status-line")
        yield Input(
            placeholder="run | new | save NAME | load NAME | delete NAME | list | dir",
            id="command-line",
        )
        yield Footer()

    def on_mount(self) -> None:
        runner = MacroRunner(settings=self.settings, debug_sink=self._debug_line)
        store = MacroStore(self.settings.macros_dir)
        hooks = TextualUIHooks(
            read_macro=lambda: self._macro_editor.text,
            read_target=lambda: self._target.text,
            target_surface=lambda: TextAreaSurface(self._target),
            open_surface=self._open_surface,
            show_macro=self._show_macro,
            update_status=self._update_status,
            log=self._log_line,
            trim_outputs=self._trim_outputs,
        )
        self.adapter = TextualMacroAdapter(runner, store, hooks)
        self._show_macro(*new_macro())
        self._macro_editor.focus()

    @property
    def _macro_editor(self) -> TextArea:
        return self.query_one("#macro-editor", TextArea)

    @property
    def _target(self) -> TextArea:
        return self.query_one("#target", TextArea)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.input.value = ""
        if self.adapter:
            await self.adapter.handle_command(event.value)

    async def action_run_macro(self) -> None:
        if self.adapter:
            await self.adapter.handle_command("run")

    async def action_new_macro(self) -> None:
        if self.adapter:
            await self.adapter.handle_command("new")

    def action_focus_command(self) -> None:
        self.query_one("#command-line", Input).focus()

    def action_write_target(self) -> None:
        if self.target_path is None:
            self._update_status("No target file; start with a path to enable writing")
            return
        try:
            self.target_path.write_text(self._target.text, encoding="utf-8")
        except OSError as exc:
            self._update_status(f"Cannot write {self.target_path}: {exc}")
            return
        self._update_status(f"Wrote {self.target_path}")

    async def _open_surface(self, index: int) -> DisplaySurface:
        # output pane i holds buffer i + 1; replay overwrites reused panes
        if index <= len(self._outputs):
            return TextAreaSurface(self._outputs[index - 1])
        area = TextArea("", classes="output")
        self._outputs.append(area)
        await self.query_one("#documents", Vertical).mount(area)
        return TextAreaSurface(area)

    def _trim_outputs(self, buffer_count: int) -> None:
        keep = max(buffer_count - 1, 0)
        for area in self._outputs[keep:]:
            area.remove()
        del self._outputs[keep:]

    def _show_macro(self, text: str, cursor: int) -> None:
        editor = self._macro_editor
        editor.load_text(text)
        editor.cursor_location = location_for_offset(text, cursor)

    def _update_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)

    def _log_line(self, line: str) -> None:
        self.query_one("#debug-log", Log).write_line(line)

    def _debug_line(self, record: DebugRecord) -> None:
        self._log_line(f"debug | {record}")


__all__ = ["MacroEngineApp"]
