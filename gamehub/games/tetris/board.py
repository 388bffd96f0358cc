"""
Tetris board - collision, locking and line clearing.

The board is a list of rows; each cell is None (empty) or the
color tag of the piece that locked there. Functions here return
new grids and never modify their arguments.
"""

from __future__ import annotations

from .pieces import Piece

Grid = list[list[str | None]]

BOARD_WIDTH = 10
BOARD_HEIGHT = 20


def empty_grid(width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> Grid:
    return [[None] * width for _ in range(height)]


def collides(grid: Grid, piece: Piece) -> bool:
    """True if any filled cell is off the board or on an occupied cell."""
    height = len(grid)
    width = len(grid[0]) if grid else 0
    for x, y in piece.cells():
        if x < 0 or x >= width or y < 0 or y >= height:
            return True
        if grid[y][x] is not None:
            return True
    return False


def merge(grid: Grid, piece: Piece) -> Grid:
    """Lock a piece into a copy of the grid."""
    new_grid = [row[:] for row in grid]
    for x, y in piece.cells():
        new_grid[y][x] = piece.color
    return new_grid


def clear_lines(grid: Grid) -> tuple[Grid, int]:
    """
    Remove every full row and insert empty rows at the top.

    Returns (new grid, number of rows cleared).
    """
    width = len(grid[0]) if grid else 0
    kept = [row[:] for row in grid if any(cell is None for cell in row)]
    cleared = len(grid) - len(kept)
    new_rows = [[None] * width for _ in range(cleared)]
    return new_rows + kept, cleared
