"""Runtime services: telemetry and environment-backed settings."""

from . import telemetry
from .settings import Settings

__all__ = ["Settings", "telemetry"]
