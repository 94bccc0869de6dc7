"""Textual host, controller and demo app.

``app`` imports Textual itself and is therefore not imported here.
"""

from .controller import TextualUIHooks, TextualViAdapter, normalize_textual_key
from .host import TextAreaHost

__all__ = ["TextAreaHost", "TextualUIHooks", "TextualViAdapter", "normalize_textual_key"]
