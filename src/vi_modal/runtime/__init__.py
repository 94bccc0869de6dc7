"""Runtime services: settings and telemetry."""

from .settings import EngineSettings, LogSettings

__all__ = ["EngineSettings", "LogSettings"]
