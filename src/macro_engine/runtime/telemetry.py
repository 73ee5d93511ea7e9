"""telelog wiring for the macro engine.

Every module logs through this one: ``get_logger`` for plain lines,
``record_event`` for structured ``event::`` lines, and ``span`` to profile a
block (buffer edits, script runs, replays, storage writes).

Configuration comes from ``MACRO_ENGINE_*`` variables unless a host calls
``configure`` with a preset.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, cast

import telelog  # type: ignore[import]

from .environment import env, env_flag

tl = cast(Any, telelog)

DEFAULT_LOGGER_NAME = env("LOGGER") or "macro_engine"

Payload = List[Tuple[str, str]]


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _pairs(data: Dict[str, Any]) -> Payload:
    return [(str(key), _text(value)) for key, value in data.items()]


def _log_file(fallback: str = "") -> str:
    return env("LOG_FILE") or fallback


def _development(config: Any) -> None:
    config.with_min_level("DEBUG")
    config.with_console_output(True)
    config.with_colored_output(True)
    config.with_json_format(False)


def _production(config: Any) -> None:
    config.with_min_level("INFO")
    config.with_console_output(False)
    config.with_file_output(_log_file("macro_engine.log"))
    config.with_buffering(True)


def _quiet(config: Any) -> None:
    # the Textual host owns the terminal
    config.with_min_level("WARNING")
    config.with_console_output(False)
    if _log_file():
        config.with_file_output(_log_file())


PRESETS: Dict[str, Callable[[Any], None]] = {
    "development": _development,
    "production": _production,
    "quiet": _quiet,
}


def _from_env(config: Any) -> None:
    config.with_min_level((env("LOG_LEVEL") or "INFO").upper())
    console = not env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not env_flag("NO_COLOR", False))
    if env_flag("LOG_JSON", False):
        config.with_json_format(True)
    if _log_file():
        config.with_file_output(_log_file())
    if env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(int(env("LOG_BUFFER_SIZE") or "2048"))


def build_config(preset: Optional[str] = None) -> Any:
    """Return a ``telelog.Config`` for ``preset``, or from the environment."""

    if preset is None:
        apply = _from_env
    else:
        try:
            apply = PRESETS[preset.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown telemetry preset {preset!r}; choose from {sorted(PRESETS)}"
            ) from None
    config = tl.Config()
    apply(config)
    # macro runs are short; every span should report its timing
    config.with_profiling(True)
    return config


@dataclass
class _State:
    config: Optional[Any] = None
    loggers: Dict[str, Any] = field(default_factory=dict)


_state = _State()


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Swap the active configuration and drop cached loggers.

    Pass either a ready ``telelog.Config`` or a preset name
    (``development``, ``production``, ``quiet``). With neither, the
    environment is read again.
    """

    if config is not None and preset is not None:
        raise ValueError("Pass either config or preset, not both.")
    if config is not None:
        config.with_profiling(True)
    _state.config = config if config is not None else build_config(preset)
    _state.loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    key = name or DEFAULT_LOGGER_NAME
    logger = _state.loggers.get(key)
    if logger is None:
        if _state.config is None:
            _state.config = build_config()
        logger = _state.loggers[key] = tl.Logger.with_config(key, _state.config)
    return logger


def _emit(logger: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(data))
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level {level!r}")
    plain(f"{message} {data}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` as key/value pairs."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span``; metadata added here is reported if the block fails."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata, "reason": reason}
        if self.component:
            payload["component"] = self.component
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> Iterator[SpanHandle]:
    """Profile the block under ``name``.

    ``component`` is tracked through telelog's component tracker, and
    ``metadata`` is attached as logger context for the duration of the block.
    An exception escaping the block logs ``span::fail`` and is re-raised.
    """

    logger = get_logger(logger_name)
    handle = SpanHandle(logger=logger, name=name, component=component)
    for key, value in (metadata or {}).items():
        handle.add_metadata(key, value)

    with ExitStack() as stack:
        for key, value in handle.metadata.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component:
            stack.enter_context(logger.track_component(component))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
