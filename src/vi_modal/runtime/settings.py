"""Environment-driven settings shared by the engine and its telemetry."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

ENV_PREFIX = "VI_MODAL_"

_TRUTHY = {"1", "true", "yes", "on"}


def _lookup(environ: Mapping[str, str], name: str) -> Optional[str]:
    return environ.get(f"{ENV_PREFIX}{name}")


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _lookup(environ, name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = _lookup(environ, name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True, slots=True)
class LogSettings:
    """Logging knobs consumed by ``runtime.telemetry``."""

    level: str = "INFO"
    file: str = ""
    json: bool = False
    console: bool = True
    colored: bool = True
    buffered: bool = False
    buffer_size: int = 2048
    preset: Optional[str] = None


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Tunables for the modal engine.

    ``text_object_window`` and ``find_char_window`` bound how much buffer
    text is read around the cursor; scanning never looks past them.
    """

    text_object_window: int = 1000
    find_char_window: int = 10000
    half_page_lines: int = 10
    mode_prefix: str = "vi-"
    command_prompt: str = ":"
    command_prompt_type: str = "vi-command"
    logging: LogSettings = field(default_factory=LogSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if environ is None else environ
        defaults = cls()
        logging = LogSettings(
            level=(_lookup(env, "LOG_LEVEL") or "INFO").upper(),
            file=_lookup(env, "LOG_FILE") or "",
            json=_flag(env, "LOG_JSON", False),
            console=not _flag(env, "DISABLE_CONSOLE", False),
            colored=not _flag(env, "NO_COLOR", False),
            buffered=_flag(env, "LOG_BUFFERED", False),
            buffer_size=_positive_int(env, "LOG_BUFFER_SIZE", 2048),
            preset=_lookup(env, "LOG_PRESET"),
        )
        return cls(
            text_object_window=_positive_int(
                env, "TEXT_OBJECT_WINDOW", defaults.text_object_window
            ),
            find_char_window=_positive_int(
                env, "FIND_CHAR_WINDOW", defaults.find_char_window
            ),
            half_page_lines=_positive_int(
                env, "HALF_PAGE_LINES", defaults.half_page_lines
            ),
            mode_prefix=_lookup(env, "MODE_PREFIX") or defaults.mode_prefix,
            command_prompt=_lookup(env, "COMMAND_PROMPT") or defaults.command_prompt,
            command_prompt_type=(
                _lookup(env, "COMMAND_PROMPT_TYPE") or defaults.command_prompt_type
            ),
            logging=logging,
        )

    def host_mode_name(self, mode: str) -> str:
        return f"{self.mode_prefix}{mode}"

    def with_overrides(self, **changes: object) -> "EngineSettings":
        return replace(self, **changes)


__all__ = ["ENV_PREFIX", "EngineSettings", "LogSettings"]
