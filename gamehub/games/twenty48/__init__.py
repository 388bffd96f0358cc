"""
2048 - slide tiles, merge equal numbers.
"""

from .rules import (
    Tile,
    Twenty48State,
    Twenty48Rules,
    process_line,
    can_move,
    slide,
    add_random_tile,
)

__all__ = [
    "Tile",
    "Twenty48State",
    "Twenty48Rules",
    "process_line",
    "can_move",
    "slide",
    "add_random_tile",
]
