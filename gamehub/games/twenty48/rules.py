"""
2048 Rules - slide and merge numbered tiles.

A move compacts every line toward the move direction and merges
each adjacent equal pair once. If anything changed, a new tile
(2 with probability 0.9, else 4) appears on a random empty cell.
The game is over when no direction can change the board.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ...engine_core.state import GameState, GamePhase, Direction
from ...engine_core.action import Action, ActionType, ActionResult
from ..base import GameRules

if TYPE_CHECKING:
    from ...engine_core.rng import RandomSource


FOUR_PROBABILITY = 0.1
DEFAULT_SIZE = 4


@dataclass
class Tile:
    """A numbered tile. Ids are stable across moves so renderers can animate."""
    id: int
    value: int
    row: int
    col: int


@dataclass
class Twenty48State(GameState):
    size: int = DEFAULT_SIZE
    board: list[list[Tile | None]] = field(default_factory=list)
    next_tile_id: int = 1

    # Ids of tiles absorbed by the last move
    merged_ids: list[int] = field(default_factory=list)

    @property
    def max_tile(self) -> int:
        return max((t.value for row in self.board for t in row if t), default=0)

    def values(self) -> list[list[int]]:
        """Board as plain numbers, 0 for empty."""
        return [[t.value if t else 0 for t in row] for row in self.board]


@dataclass
class LineResult:
    tiles: list[Tile | None]
    merged_ids: list[int]
    score: int


def process_line(line: list[Tile | None], forward: bool) -> LineResult:
    """
    Compact and merge one row or column.

    The line is given in board order; forward means the move goes
    toward the end of the line (right or down).
    """
    size = len(line)
    ordered = list(reversed(line)) if forward else list(line)
    filtered = [t for t in ordered if t]

    result: list[Tile | None] = []
    merged_ids = []
    score = 0
    i = 0
    while i < len(filtered):
        tile = filtered[i]
        if i + 1 < len(filtered) and tile.value == filtered[i + 1].value:
            merged = Tile(id=tile.id, value=tile.value * 2, row=tile.row, col=tile.col)
            result.append(merged)
            merged_ids.append(filtered[i + 1].id)
            score += merged.value
            i += 2
        else:
            result.append(Tile(id=tile.id, value=tile.value, row=tile.row, col=tile.col))
            i += 1
    result.extend([None] * (size - len(result)))
    if forward:
        result.reverse()
    return LineResult(tiles=result, merged_ids=merged_ids, score=score)


def can_move(board: list[list[Tile | None]]) -> bool:
    """True if any cell is empty or any neighbors share a value."""
    size = len(board)
    for r in range(size):
        for c in range(size):
            tile = board[r][c]
            if not tile:
                return True
            right = board[r][c + 1] if c < size - 1 else None
            below = board[r + 1][c] if r < size - 1 else None
            if right and right.value == tile.value:
                return True
            if below and below.value == tile.value:
                return True
    return False


class Twenty48Rules(GameRules):
    """Rules for 2048."""

    game_type = "2048"
    title = "2048"
    supported_actions = frozenset({ActionType.MOVE, ActionType.RESET})

    def normalize_options(self, options: dict[str, Any]) -> dict[str, Any]:
        unknown = set(options) - {"size"}
        if unknown:
            raise ValueError(f"Unknown 2048 options: {sorted(unknown)}")
        size = int(options.get("size", DEFAULT_SIZE))
        if not 3 <= size <= 8:
            raise ValueError("2048 size must be between 3 and 8")
        return {"size": size}

    def new_game(self, rng: RandomSource) -> Twenty48State:
        size = self.options["size"]
        state = Twenty48State(
            game_type=self.game_type,
            variant=self.variant,
            options=dict(self.options),
            phase=GamePhase.PLAYING,
            size=size,
            board=[[None] * size for _ in range(size)],
        )
        add_random_tile(state, rng)
        add_random_tile(state, rng)
        return state

    def _get_handler(self, action_type: ActionType):
        return {ActionType.MOVE: self._handle_move}.get(action_type)

    def high_score_key(self) -> str:
        return "2048-bestScore"

    def _handle_move(self, state: Twenty48State, action: Action, rng: RandomSource) -> ActionResult:
        direction = action.payload.direction or Direction.from_delta(
            action.payload.dx, action.payload.dy
        )
        if direction is None:
            return ActionResult.failure("Move needs a direction", error_code="INVALID_ACTION")

        new_state = slide(state, direction)
        if new_state is None:
            return ActionResult.rejection(state, "Nothing moved")

        events = []
        if new_state.merged_ids:
            events.append(f"Merged {len(new_state.merged_ids)} tile(s)")
        add_random_tile(new_state, rng)
        new_state.moves += 1

        if not can_move(new_state.board):
            new_state.phase = GamePhase.GAME_OVER
            events.append(f"Game over! Final score: {new_state.score}")
        return ActionResult.success_with_state(new_state, events=events)


def slide(state: Twenty48State, direction: Direction) -> Twenty48State | None:
    """
    Slide every line in one direction.

    Returns the new state, or None if the board did not change.
    """
    size = state.size
    vertical = direction in (Direction.UP, Direction.DOWN)
    forward = direction in (Direction.RIGHT, Direction.DOWN)

    board = [[None] * size for _ in range(size)]
    merged_ids = []
    gained = 0
    changed = False

    for i in range(size):
        line = [state.board[j][i] if vertical else state.board[i][j] for j in range(size)]
        result = process_line(line, forward)
        merged_ids.extend(result.merged_ids)
        gained += result.score

        for j, tile in enumerate(result.tiles):
            old = line[j]
            if _identity(old) != _identity(tile):
                changed = True
            if tile:
                tile.row, tile.col = (j, i) if vertical else (i, j)
            if vertical:
                board[j][i] = tile
            else:
                board[i][j] = tile

    if not changed:
        return None
    return state._copy_with(board=board, score=state.score + gained, merged_ids=merged_ids)


def _identity(tile: Tile | None) -> tuple[int, int] | None:
    return (tile.id, tile.value) if tile else None


def add_random_tile(state: Twenty48State, rng: RandomSource) -> Tile | None:
    """Place a 2 or 4 on a random empty cell of a state the caller owns."""
    empty = [
        (r, c)
        for r in range(state.size)
        for c in range(state.size)
        if not state.board[r][c]
    ]
    if not empty:
        return None
    r, c = empty[rng.randrange(len(empty))]
    value = 4 if rng.random() < FOUR_PROBABILITY else 2
    tile = Tile(id=state.next_tile_id, value=value, row=r, col=c)
    state.next_tile_id += 1
    state.board[r][c] = tile
    return tile
