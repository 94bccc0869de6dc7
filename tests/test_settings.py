import pytest

from vi_modal.runtime import telemetry
from vi_modal.runtime.settings import EngineSettings, LogSettings


def test_defaults() -> None:
    settings = EngineSettings.from_env({})

    assert settings.text_object_window == 1000
    assert settings.find_char_window == 10000
    assert settings.half_page_lines == 10
    assert settings.command_prompt_type == "vi-command"
    assert settings.logging == LogSettings()


def test_from_env_reads_prefixed_keys() -> None:
    settings = EngineSettings.from_env(
        {
            "VI_MODAL_TEXT_OBJECT_WINDOW": "50",
            "VI_MODAL_HALF_PAGE_LINES": "7",
            "VI_MODAL_MODE_PREFIX": "modal-",
            "VI_MODAL_LOG_LEVEL": "debug",
            "VI_MODAL_LOG_JSON": "yes",
            "VI_MODAL_NO_COLOR": "1",
        }
    )

    assert settings.text_object_window == 50
    assert settings.half_page_lines == 7
    assert settings.host_mode_name("visual") == "modal-visual"
    assert settings.logging.level == "DEBUG"
    assert settings.logging.json is True
    assert settings.logging.colored is False


def test_invalid_integers_fall_back_to_defaults() -> None:
    settings = EngineSettings.from_env(
        {"VI_MODAL_FIND_CHAR_WINDOW": "lots", "VI_MODAL_HALF_PAGE_LINES": "-3"}
    )

    assert settings.find_char_window == 10000
    assert settings.half_page_lines == 10


def test_with_overrides_returns_copy() -> None:
    settings = EngineSettings()

    narrowed = settings.with_overrides(find_char_window=20)

    assert narrowed.find_char_window == 20
    assert settings.find_char_window == 10000


def test_telemetry_configure_rejects_multiple_sources() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="quiet", settings=LogSettings())


def test_telemetry_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="chatty")


def test_preset_overlays_log_settings() -> None:
    quiet = telemetry.apply_preset(LogSettings(level="DEBUG"), "quiet")
    assert quiet.level == "ERROR"
    assert quiet.console is False
    assert quiet.preset is None

    production = telemetry.apply_preset(LogSettings(file="mine.log"), "Production")
    assert production.file == "mine.log"
    assert production.buffered is True
