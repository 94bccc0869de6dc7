"""telelog-backed diagnostics for the modal engine.

Components log through ``record_event`` (``mode.*``, ``composer.*``,
``text_object.*``, ``find_char.*``, ``ex.*``, ``host.*``) and wrap dispatch in
``span`` so keystrokes show up as profiled, component-tracked blocks.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

from .settings import EngineSettings, LogSettings

tl = cast(Any, telelog)

DEFAULT_LOGGER_NAME = "vi_modal"

PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {"level": "DEBUG", "console": True, "colored": True},
    "production": {
        "level": "INFO",
        "console": False,
        "file": "vi_modal.log",
        "buffered": True,
    },
    "performance": {
        "level": "DEBUG",
        "console": False,
        "json": True,
        "file": "vi_modal-performance.log",
        "buffered": True,
    },
    "quiet": {"level": "ERROR", "console": False},
}

_LOGGERS: MutableMapping[str, Any] = {}
_CONFIG: Optional[Any] = None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def apply_preset(settings: LogSettings, preset: str) -> LogSettings:
    """Overlay a named preset; an explicit ``file`` on ``settings`` wins."""

    try:
        values = dict(PRESETS[preset.lower()])
    except KeyError:
        raise ValueError(f"Unknown preset '{preset}'.") from None
    if settings.file:
        values.pop("file", None)
    return replace(settings, preset=None, **values)


def _build_config(settings: LogSettings) -> Any:
    if settings.preset:
        settings = apply_preset(settings, settings.preset)

    config = tl.Config()
    config.with_min_level(settings.level)
    config.with_console_output(settings.console)
    if settings.console:
        config.with_colored_output(settings.colored)
    config.with_json_format(settings.json)
    if settings.file:
        config.with_file_output(settings.file)
    if settings.buffered:
        config.with_buffering(True)
        config.with_buffer_size(settings.buffer_size)
    config.with_profiling(True)
    return config


def configure(
    *, preset: Optional[str] = None, settings: Optional[LogSettings] = None
) -> None:
    """Rebuild the telelog configuration and drop cached loggers.

    Give a ``preset`` name or a ``LogSettings``, not both; with neither the
    ``VI_MODAL_LOG_*`` environment is read.
    """

    global _CONFIG
    if preset is not None and settings is not None:
        raise ValueError("Provide either `preset` or `settings`, not both.")
    if preset is not None:
        settings = apply_preset(LogSettings(), preset)
    elif settings is None:
        settings = EngineSettings.from_env().logging

    _CONFIG = _build_config(settings)
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _build_config(EngineSettings.from_env().logging)
    key = name or DEFAULT_LOGGER_NAME
    if key not in _LOGGERS:
        _LOGGERS[key] = tl.Logger.with_config(key, _CONFIG)
    return _LOGGERS[key]


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    level = level.lower()
    pairs = [(str(key), _text(value)) for key, value in payload.items()]
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, pairs)
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str, *, level: str = "info", data: Optional[Dict[str, Any]] = None
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    _emit(get_logger(), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Metadata collector for an open ``span``."""

    logger: Any
    name: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)


@contextmanager
def span(
    name: str,
    *,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, tracking it as ``component`` when one is given.

    ``component=True`` uses ``name`` itself. ``metadata`` becomes logger
    context for the duration of the block; an escaping exception is logged
    as ``span::fail`` and re-raised.
    """

    log = get_logger()
    component_name = name if component is True else component or None
    handle = SpanHandle(
        logger=log,
        name=name,
        metadata={key: _text(value) for key, value in (metadata or {}).items()},
    )

    with ExitStack() as stack:
        for key, value in handle.metadata.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            _emit(
                log,
                "error",
                "span::fail",
                {"span": name, **handle.metadata, "reason": str(exc)},
            )
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "apply_preset",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
