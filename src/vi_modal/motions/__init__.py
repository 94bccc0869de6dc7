"""Motions that need buffer text to resolve."""

from .find_char import FindCharTracker, target_column

__all__ = ["FindCharTracker", "target_column"]
