"""
Tetris - falling tetrominoes on a 10x20 board.

This module contains:
- Tetromino shapes and rotation (pieces)
- Collision, locking and line clearing (board)
- Tetris-specific state model
- Classic and marathon rules
"""

from .pieces import Piece, TETROMINOES, PIECE_TYPES, create_piece, kick_offsets
from .board import collides, merge, clear_lines, empty_grid
from .state import TetrisState
from .rules import TetrisRules, line_clear_score

__all__ = [
    "Piece",
    "TETROMINOES",
    "PIECE_TYPES",
    "create_piece",
    "kick_offsets",
    "collides",
    "merge",
    "clear_lines",
    "empty_grid",
    "TetrisState",
    "TetrisRules",
    "line_clear_score",
]
