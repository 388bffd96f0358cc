"""
Renderer - Interface between game state and a display.

Renderers only read state. They never mutate it and never talk to
the rules; anything a display needs must be on the state itself.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.state import GameState


class Renderer(ABC):
    """Abstract base class for renderers."""

    @abstractmethod
    def render(self, state: GameState) -> str:
        """Draw the state."""
        pass
