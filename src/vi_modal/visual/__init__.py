"""Visual (character, line and block) selection handling."""

from .controller import VisualController

__all__ = ["VisualController"]
