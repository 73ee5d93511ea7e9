"""Environment-backed settings for hosts (CLI and Textual app)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from .environment import env, env_flag

DEFAULT_MACROS_DIR = Path.home() / ".macro_engine" / "macros"


@dataclass(frozen=True, slots=True)
class Settings:
    """Knobs read once per host start.

    ``debug_checkpoints`` turns on ``debug_mode`` for every buffer a run
    creates; ``strict_loops`` rejects macros containing ``while`` loops
    instead of only warning about them.
    """

    macros_dir: Path = DEFAULT_MACROS_DIR
    debug_checkpoints: bool = False
    strict_loops: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        raw_dir = env("MACROS_DIR")
        return cls(
            macros_dir=Path(raw_dir).expanduser() if raw_dir else DEFAULT_MACROS_DIR,
            debug_checkpoints=env_flag("DEBUG_CHECKPOINTS", False),
            strict_loops=env_flag("STRICT_LOOPS", False),
        )

    def override(
        self,
        *,
        macros_dir: Optional[Path] = None,
        debug_checkpoints: Optional[bool] = None,
        strict_loops: Optional[bool] = None,
    ) -> "Settings":
        """Return a copy with the non-``None`` arguments applied."""

        changes = {}
        if macros_dir is not None:
            changes["macros_dir"] = Path(macros_dir).expanduser()
        if debug_checkpoints is not None:
            changes["debug_checkpoints"] = debug_checkpoints
        if strict_loops is not None:
            changes["strict_loops"] = strict_loops
        return replace(self, **changes)


__all__ = ["DEFAULT_MACROS_DIR", "Settings"]
