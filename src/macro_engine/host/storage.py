"""Directory-backed store for saved macros."""

from __future__ import annotations

from pathlib import Path
from typing import List

from macro_engine.runtime import telemetry

SUFFIX = ".py"


class MacroStorageError(OSError):
    """Raised when the macros directory or one of its files cannot be used."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class MacroStore:
    """Saves, loads, lists and deletes macro files in one directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory).expanduser()

    def ensure_dir(self) -> Path:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MacroStorageError(
                f"Cannot create macros directory {self.directory}: {exc.strerror or exc}",
                path=self.directory,
            ) from exc
        return self.directory

    def path_for(self, name: str) -> Path:
        cleaned = name.strip()
        if not cleaned or "/" in cleaned or "\\" in cleaned or cleaned in {".", ".."}:
            raise MacroStorageError(f"Invalid macro name {name!r}")
        if not cleaned.lower().endswith(SUFFIX):
            cleaned += SUFFIX
        return self.directory / cleaned

    def list(self) -> List[str]:
        directory = self.ensure_dir()
        try:
            return sorted(entry.name for entry in directory.iterdir() if entry.is_file())
        except OSError as exc:
            raise MacroStorageError(
                f"Cannot read macros directory {directory}: {exc.strerror or exc}",
                path=directory,
            ) from exc

    def save(self, name: str, source: str) -> Path:
        path = self.path_for(name)
        self.ensure_dir()
        with telemetry.span(
            "storage::save", component="storage", metadata={"macro": path.name}
        ):
            try:
                path.write_text(source, encoding="utf-8")
            except OSError as exc:
                raise MacroStorageError(
                    f"Cannot save {path.name}: {exc.strerror or exc}", path=path
                ) from exc
        telemetry.record_event("storage.saved", data={"macro": path.name})
        return path

    def load(self, name: str) -> str:
        path = self.path_for(name)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MacroStorageError(
                f"Cannot load {path.name}: {exc.strerror or exc}", path=path
            ) from exc

    def delete(self, name: str) -> Path:
        path = self.path_for(name)
        with telemetry.span(
            "storage::delete", component="storage", metadata={"macro": path.name}
        ):
            try:
                path.unlink()
            except OSError as exc:
                raise MacroStorageError(
                    f"Cannot delete {path.name}: {exc.strerror or exc}", path=path
                ) from exc
        telemetry.record_event("storage.deleted", data={"macro": path.name})
        return path


__all__ = ["MacroStorageError", "MacroStore", "SUFFIX"]
