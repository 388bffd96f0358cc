"""
Tetris State - board, active piece, preview piece and counters.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ...engine_core.state import GameState
from .board import Grid, empty_grid, BOARD_WIDTH, BOARD_HEIGHT
from .pieces import Piece


@dataclass
class TetrisState(GameState):
    """
    Tetris game state.

    Invariant: the active piece never overlaps a locked cell and
    never leaves the board.
    """
    grid: Grid = field(default_factory=empty_grid)
    active: Piece | None = None
    next_piece: Piece | None = None

    lines: int = 0
    level: int = 1

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else BOARD_WIDTH

    @property
    def height(self) -> int:
        return len(self.grid) if self.grid else BOARD_HEIGHT
