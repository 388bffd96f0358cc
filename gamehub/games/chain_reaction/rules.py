"""
Chain Reaction Rules - hot-seat orb placement with cascading explosions.

Each cell holds orbs up to a capacity (2 in corners, 3 on edges,
4 inside). Reaching capacity empties the cell and sends one orb to
each orthogonal neighbor, converting it to the exploding player;
neighbors that fill up explode one wave later.

A player wins once more orbs than players are on the board and
nobody else owns any.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ...engine_core.state import GameState, GamePhase
from ...engine_core.action import Action, ActionType, ActionResult
from ..base import GameRules

if TYPE_CHECKING:
    from ...engine_core.rng import RandomSource


MIN_PLAYERS = 2
MAX_PLAYERS = 6
DEFAULT_GRID_SIZE = 10
COMPACT_GRID_SIZE = 8
MAX_EXPLOSIONS = 10_000

NEIGHBORS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass
class Cell:
    capacity: int
    owner: int | None = None
    orbs: int = 0


@dataclass
class ChainStep:
    """One orb flying from an exploding cell to a neighbor."""
    from_cell: tuple[int, int]
    to_cell: tuple[int, int]
    player: int
    wave: int


@dataclass
class ChainReactionState(GameState):
    grid_size: int = DEFAULT_GRID_SIZE
    num_players: int = 2
    cells: list[list[Cell]] = field(default_factory=list)

    current_player_idx: int = 0
    scores: list[int] = field(default_factory=list)  # Orbs owned, by player index
    winner: int | None = None  # Player id (1-based)

    # Explosions of the last move, for animation
    last_chain: list[ChainStep] = field(default_factory=list)

    @property
    def current_player(self) -> int:
        """1-based id of the player to move."""
        return self.current_player_idx + 1

    @property
    def total_orbs(self) -> int:
        return sum(self.scores)


def cell_capacity(row: int, col: int, size: int) -> int:
    on_row_edge = row in (0, size - 1)
    on_col_edge = col in (0, size - 1)
    if on_row_edge and on_col_edge:
        return 2
    if on_row_edge or on_col_edge:
        return 3
    return 4


def count_orbs(cells: list[list[Cell]], num_players: int) -> list[int]:
    scores = [0] * num_players
    for row in cells:
        for cell in row:
            if cell.owner is not None and 1 <= cell.owner <= num_players:
                scores[cell.owner - 1] += cell.orbs
    return scores


class ChainReactionRules(GameRules):
    """Rules for Chain Reaction."""

    game_type = "chain_reaction"
    title = "Chain Reaction"
    supported_actions = frozenset({ActionType.SELECT, ActionType.RESET})

    def normalize_options(self, options: dict[str, Any]) -> dict[str, Any]:
        unknown = set(options) - {"players", "grid_size"}
        if unknown:
            raise ValueError(f"Unknown chain reaction options: {sorted(unknown)}")
        players = int(options.get("players", MIN_PLAYERS))
        if not MIN_PLAYERS <= players <= MAX_PLAYERS:
            raise ValueError(f"Chain Reaction needs {MIN_PLAYERS}-{MAX_PLAYERS} players")
        grid_size = int(options.get("grid_size", DEFAULT_GRID_SIZE))
        if not 3 <= grid_size <= 12:
            raise ValueError("Chain Reaction grid_size must be between 3 and 12")
        return {"players": players, "grid_size": grid_size}

    def new_game(self, rng: RandomSource) -> ChainReactionState:
        size = self.options["grid_size"]
        players = self.options["players"]
        return ChainReactionState(
            game_type=self.game_type,
            variant=self.variant,
            options=dict(self.options),
            phase=GamePhase.PLAYING,
            grid_size=size,
            num_players=players,
            cells=[
                [Cell(capacity=cell_capacity(r, c, size)) for c in range(size)]
                for r in range(size)
            ],
            scores=[0] * players,
        )

    def _get_handler(self, action_type: ActionType):
        return {ActionType.SELECT: self._handle_select}.get(action_type)

    def _handle_select(
        self, state: ChainReactionState, action: Action, rng: RandomSource
    ) -> ActionResult:
        row, col = action.payload.row, action.payload.col
        if row is None or col is None or not (
            0 <= row < state.grid_size and 0 <= col < state.grid_size
        ):
            return ActionResult.failure(
                f"Cell ({row}, {col}) is off the board", error_code="INVALID_ACTION",
            )

        player = state.current_player
        target = state.cells[row][col]
        if target.owner is not None and target.owner != player:
            return ActionResult.rejection(state, f"Cell belongs to player {target.owner}")

        new_state = state._copy_with(last_chain=[])
        cell = new_state.cells[row][col]
        cell.owner = player
        cell.orbs += 1

        events = []
        if cell.orbs >= cell.capacity:
            new_state.last_chain = propagate(new_state, row, col, player)
            waves = max(step.wave for step in new_state.last_chain) + 1
            events.append(f"Chain reaction: {waves} wave(s)")

        new_state.scores = count_orbs(new_state.cells, new_state.num_players)
        new_state.moves += 1
        total = new_state.total_orbs

        if total > new_state.num_players:
            active = [i for i, score in enumerate(new_state.scores) if score > 0]
            if len(active) == 1:
                new_state.phase = GamePhase.WON
                new_state.winner = active[0] + 1
                events.append(f"Player {new_state.winner} wins!")
                return ActionResult.success_with_state(new_state, events=events)

        new_state.current_player_idx = _next_player(new_state, total)
        return ActionResult.success_with_state(new_state, events=events)


def propagate(state: ChainReactionState, row: int, col: int, player: int) -> list[ChainStep]:
    """
    Run the explosion breadth-first, in place, starting at (row, col).

    Stops early once no opposing orbs remain on the board, since a
    board owned by one player would otherwise keep exploding.
    """
    size = state.grid_size
    steps: list[ChainStep] = []
    state.cells[row][col].orbs = 0
    queue = deque([(row, col, 0)])
    explosions = 0

    while queue:
        r, c, wave = queue.popleft()
        explosions += 1
        for dr, dc in NEIGHBORS:
            nr, nc = r + dr, c + dc
            if not (0 <= nr < size and 0 <= nc < size):
                continue
            steps.append(ChainStep((r, c), (nr, nc), player, wave))
            neighbor = state.cells[nr][nc]
            neighbor.owner = player
            neighbor.orbs += 1
            if neighbor.orbs >= neighbor.capacity:
                queue.append((nr, nc, wave + 1))
                neighbor.orbs = 0

        if queue and (explosions >= MAX_EXPLOSIONS or _board_taken(state, player)):
            # Pending cells were emptied when queued; give their orbs back
            for qr, qc, _ in queue:
                state.cells[qr][qc].orbs = state.cells[qr][qc].capacity
            break

    return steps


def _board_taken(state: ChainReactionState, player: int) -> bool:
    """True when every orb on the board belongs to player."""
    return all(
        cell.owner == player
        for row in state.cells
        for cell in row
        if cell.orbs
    )


def _next_player(state: ChainReactionState, total_orbs: int) -> int:
    """Next player index with orbs on the board; everyone plays until all have placed."""
    idx = state.current_player_idx
    for _ in range(state.num_players):
        idx = (idx + 1) % state.num_players
        if state.scores[idx] > 0 or total_orbs < state.num_players:
            return idx
    return idx
