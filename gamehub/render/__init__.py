"""
Render Module - Draws game state for a display.

Renderers read state and return a drawing. The engine never
depends on them.
"""

from .base import Renderer
from .text import TextRenderer, render_text, tetris_preview

__all__ = [
    "Renderer",
    "TextRenderer",
    "render_text",
    "tetris_preview",
]
