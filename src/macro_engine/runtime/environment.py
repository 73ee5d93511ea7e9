"""Environment lookups shared by telemetry and settings."""

from __future__ import annotations

import os
from typing import Optional

ENV_PREFIX = "MACRO_ENGINE_"

_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in _TRUTHY


__all__ = ["ENV_PREFIX", "env", "env_flag"]
