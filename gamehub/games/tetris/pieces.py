"""
Tetromino definitions and piece geometry.

Shapes are row-major 0/1 matrices. The color tag of a piece is
its type letter; locked cells on the board store that tag.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from ...engine_core.rng import RandomSource


TETROMINOES: dict[str, list[list[int]]] = {
    "i": [[1, 1, 1, 1]],
    "l": [[0, 0, 1], [1, 1, 1]],
    "j": [[1, 0, 0], [1, 1, 1]],
    "s": [[0, 1, 1], [1, 1, 0]],
    "z": [[1, 1, 0], [0, 1, 1]],
    "o": [[1, 1], [1, 1]],
    "t": [[0, 1, 0], [1, 1, 1]],
}

PIECE_TYPES = "iljszot"


@dataclass
class Piece:
    """A tetromino with its position on the board (top-left of the shape)."""
    kind: str
    shape: list[list[int]]
    x: int = 0
    y: int = 0

    @property
    def color(self) -> str:
        return self.kind

    @property
    def width(self) -> int:
        return len(self.shape[0])

    @property
    def height(self) -> int:
        return len(self.shape)

    def cells(self) -> Iterator[tuple[int, int]]:
        """Board coordinates (x, y) of every filled cell."""
        for dy, row in enumerate(self.shape):
            for dx, value in enumerate(row):
                if value:
                    yield self.x + dx, self.y + dy

    def moved(self, dx: int = 0, dy: int = 0) -> Piece:
        return Piece(self.kind, [row[:] for row in self.shape], self.x + dx, self.y + dy)

    def rotated(self) -> Piece:
        """Clockwise rotation: transpose, then reverse each row."""
        return Piece(self.kind, rotate_shape(self.shape), self.x, self.y)


def rotate_shape(shape: list[list[int]]) -> list[list[int]]:
    return [
        [row[col] for row in shape][::-1]
        for col in range(len(shape[0]))
    ]


def create_piece(kind: str) -> Piece:
    if kind not in TETROMINOES:
        raise ValueError(f"Unknown tetromino: {kind!r}")
    return Piece(kind=kind, shape=[row[:] for row in TETROMINOES[kind]])


def random_piece(rng: RandomSource) -> Piece:
    """Uniform choice over the seven tetrominoes."""
    return create_piece(rng.choice(PIECE_TYPES))


def kick_offsets(width: int) -> list[int]:
    """
    Horizontal displacements tried after a rotation, in order.

    Steps alternate +1, -2, +3, -4, ... from the rotated position,
    giving cumulative offsets 0, +1, -1, +2, -2, ...  The search
    ends when the next rightward step would exceed the piece width.
    """
    offsets = [0]
    cumulative = 0
    step = 1
    while True:
        cumulative += step
        next_step = -(step + (1 if step > 0 else -1))
        if next_step > width:
            break
        offsets.append(cumulative)
        step = next_step
    return offsets
