"""Command line entry point: run macros headless or start the Textual host."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from macro_engine.host import MacroRunner, MacroStore
from macro_engine.replay import DisplaySurface, StringSurface
from macro_engine.runtime import Settings, telemetry
from macro_engine.script import (
    DebugRecord,
    MacroValidationError,
    ScriptExecutionError,
    new_macro,
)


def _stderr_sink(record: DebugRecord) -> None:
    print(f"debug | {record}", file=sys.stderr)


def _output_path(directory: Path, target: Path, index: int) -> Path:
    if index == 0:
        return directory / target.name
    return directory / f"{target.stem}.{index}{target.suffix}"


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    source = Path(args.macro).read_text(encoding="utf-8")
    target = Path(args.target)
    text = target.read_text(encoding="utf-8")

    primary = StringSurface(text, name="buffer-0")
    opened: List[StringSurface] = []

    async def open_surface(index: int) -> DisplaySurface:
        surface = StringSurface(name=f"buffer-{index}")
        opened.append(surface)
        return surface

    runner = MacroRunner(settings=settings, debug_sink=_stderr_sink)
    await runner.run(source, text, primary, open_surface, filename=str(args.macro))

    surfaces = [primary, *opened]
    if args.in_place:
        target.write_text(primary.text, encoding="utf-8")
    if args.output_dir:
        directory = Path(args.output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        for index, surface in enumerate(surfaces):
            _output_path(directory, target, index).write_text(surface.text, encoding="utf-8")
    if not args.in_place and not args.output_dir:
        for index, surface in enumerate(surfaces):
            if len(surfaces) > 1:
                print(f"--- buffer {index} ---")
            sys.stdout.write(surface.text)
            if surface.text and not surface.text.endswith("\n"):
                sys.stdout.write("\n")
    return 0


def _cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    return asyncio.run(_run(args, settings))


def _cmd_new(args: argparse.Namespace, settings: Settings) -> int:
    text, _ = new_macro()
    if args.name:
        print(MacroStore(settings.macros_dir).save(args.name, text))
    else:
        sys.stdout.write(text)
    return 0


def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    del args
    for name in MacroStore(settings.macros_dir).list():
        print(name)
    return 0


def _cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    sys.stdout.write(MacroStore(settings.macros_dir).load(args.name))
    return 0


def _cmd_delete(args: argparse.Namespace, settings: Settings) -> int:
    path = MacroStore(settings.macros_dir).delete(args.name)
    print(f"Deleted {path.name}")
    return 0


def _cmd_ui(args: argparse.Namespace, settings: Settings) -> int:
    # the app owns the terminal; keep log lines off the console
    telemetry.configure(preset="quiet")
    from macro_engine.adapters.textual.app import MacroEngineApp

    target = Path(args.target) if args.target else None
    MacroEngineApp(settings=settings, target_path=target).run()
    return 0


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="macro-engine", description="Run text-editing macros against documents."
    )
    parser.add_argument(
        "--macros-dir",
        type=Path,
        default=None,
        help="Directory holding saved macros (default: $MACRO_ENGINE_MACROS_DIR)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "quiet"),
        default=None,
        help="Telemetry preset to apply before running",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a macro file against a target file")
    run.add_argument("macro", help="Path to the macro source")
    run.add_argument("target", help="Path to the document the macro edits")
    run.add_argument("--output-dir", help="Write every buffer into this directory")
    run.add_argument("--in-place", action="store_true", help="Overwrite the target with buffer 0")
    run.add_argument(
        "--debug-checkpoints",
        action="store_true",
        default=None,
        help="Checkpoint every set_text call",
    )
    run.add_argument(
        "--strict-loops",
        action="store_true",
        default=None,
        help="Reject macros containing while loops",
    )
    run.set_defaults(handler=_cmd_run)

    new = sub.add_parser("new", help="Print the macro template, or save it as NAME")
    new.add_argument("name", nargs="?", help="Save the template under this name")
    new.set_defaults(handler=_cmd_new)

    sub.add_parser("list", help="List saved macros").set_defaults(handler=_cmd_list)

    show = sub.add_parser("show", help="Print a saved macro")
    show.add_argument("name")
    show.set_defaults(handler=_cmd_show)

    delete = sub.add_parser("delete", help="Delete a saved macro")
    delete.add_argument("name")
    delete.set_defaults(handler=_cmd_delete)

    ui = sub.add_parser("ui", help="Start the Textual host")
    ui.add_argument("target", nargs="?", help="Document to open in the target pane")
    ui.set_defaults(handler=_cmd_ui)

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    settings = Settings.from_env().override(
        macros_dir=args.macros_dir,
        debug_checkpoints=getattr(args, "debug_checkpoints", None),
        strict_loops=getattr(args, "strict_loops", None),
    )
    try:
        return args.handler(args, settings)
    except (MacroValidationError, ScriptExecutionError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual entry
    sys.exit(main())
