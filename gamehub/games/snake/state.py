"""
Snake State - segment list, velocity, food and bonus food.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ...engine_core.state import GameState, GamePhase

Point = tuple[int, int]


@dataclass
class SnakeState(GameState):
    """
    Snake game state.

    The body is ordered tail first, head last.
    """
    phase: GamePhase = GamePhase.READY

    grid_size: int = 20
    body: list[Point] = field(default_factory=list)
    velocity: Point = (0, 0)
    growing: bool = False

    food: Point | None = None
    bonus_food: Point | None = None
    bonus_expires_at: int = 0  # In clock_ms

    speed: int = 10  # Ticks per second

    @property
    def head(self) -> Point:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)
