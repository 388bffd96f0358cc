"""
Game State - Generic state container that each game specializes.

Design principles:
- Immutable-friendly: transitions return new state, never mutate
- Serializable: plain dataclasses, lists and dicts only
- Game-agnostic: game-specific state inherits from this
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any
from copy import deepcopy
from enum import Enum


class GamePhase(Enum):
    """High-level game phases."""
    READY = "ready"  # Waiting for the player to start
    PLAYING = "playing"
    PAUSED = "paused"
    WON = "won"
    GAME_OVER = "game_over"

    @property
    def is_terminal(self) -> bool:
        return self in {GamePhase.WON, GamePhase.GAME_OVER}


class Direction(Enum):
    """Grid directions. Rows grow downward."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """(dx, dy) for one step in this direction."""
        return {
            Direction.UP: (0, -1),
            Direction.DOWN: (0, 1),
            Direction.LEFT: (-1, 0),
            Direction.RIGHT: (1, 0),
        }[self]

    @property
    def opposite(self) -> Direction:
        return {
            Direction.UP: Direction.DOWN,
            Direction.DOWN: Direction.UP,
            Direction.LEFT: Direction.RIGHT,
            Direction.RIGHT: Direction.LEFT,
        }[self]

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> Direction | None:
        for direction in cls:
            if direction.delta == (dx, dy):
                return direction
        return None


@dataclass
class GameState:
    """
    Game state at a point in time.

    This is the canonical state the reducer operates on.
    Subclasses add their board, pieces and counters; every
    added field must have a default.
    """
    game_type: str = ""
    variant: str = "classic"

    phase: GamePhase = GamePhase.PLAYING
    score: int = 0
    moves: int = 0

    # Game clock, advanced by TICK actions only
    clock_ms: int = 0

    # Options the game was created with (grid size, players, ...)
    options: dict[str, Any] = field(default_factory=dict)

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_over(self) -> bool:
        return self.phase.is_terminal

    def _copy_with(self, **kwargs) -> GameState:
        """Create a deep copy with some fields replaced."""
        new_state = deepcopy(self)
        for key, value in kwargs.items():
            if not hasattr(new_state, key):
                raise AttributeError(f"{type(self).__name__} has no field {key!r}")
            setattr(new_state, key, value)
        return new_state

    def to_dict(self) -> dict[str, Any]:
        """Plain-data snapshot for serialization."""
        data = {}
        for f in fields(self):
            data[f.name] = _plain(getattr(self, f.name))
        return data


def _plain(value: Any) -> Any:
    """Convert enums, tuples and nested dataclasses to JSON-friendly data."""
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "__dataclass_fields__"):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
