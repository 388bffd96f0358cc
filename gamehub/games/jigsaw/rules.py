"""
Jigsaw Rules - picture puzzles cut into an n x n grid.

Variants:
- sliding: the bottom-right piece is removed; click a piece next to
  the gap to slide it in. The start position is reached by random
  slides from the solved board, so it is always solvable.
- slots: every piece starts in a shuffled tray and is dragged onto
  a slot; dropping onto an occupied slot swaps the two pieces.

Piece ids equal the index of their correct slot (row * n + col).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ...engine_core.state import GameState, GamePhase
from ...engine_core.action import Action, ActionType, ActionResult
from ..base import GameRules

if TYPE_CHECKING:
    from ...engine_core.rng import RandomSource


MIN_DIFFICULTY = 3
MAX_DIFFICULTY = 6
DEFAULT_DIFFICULTY = 3
SCRAMBLE_FACTOR = 10
TIMER_INTERVAL_MS = 1000


@dataclass
class JigsawState(GameState):
    difficulty: int = DEFAULT_DIFFICULTY

    # Slot index -> piece id, None for an empty slot
    slots: list[int | None] = field(default_factory=list)

    # Pieces not yet placed (slots variant)
    tray: list[int] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> int:
        return self.clock_ms // 1000

    @property
    def elapsed_display(self) -> str:
        seconds = self.elapsed_seconds
        return f"{seconds // 60:02d}:{seconds % 60:02d}"

    @property
    def empty_slot(self) -> int | None:
        for index, piece in enumerate(self.slots):
            if piece is None:
                return index
        return None

    def position(self, slot: int) -> tuple[int, int]:
        return divmod(slot, self.difficulty)

    def slot_index(self, row: int, col: int) -> int:
        return row * self.difficulty + col


def is_adjacent(a: int, b: int, n: int) -> bool:
    ar, ac = divmod(a, n)
    br, bc = divmod(b, n)
    return abs(ar - br) + abs(ac - bc) == 1


def is_solved(state: JigsawState) -> bool:
    """Every piece sits in its own slot (the sliding gap at the end)."""
    if state.tray:
        return False
    last = len(state.slots) - 1
    for index, piece in enumerate(state.slots):
        if piece is None:
            if state.variant != "sliding" or index != last:
                return False
        elif piece != index:
            return False
    return True


class JigsawRules(GameRules):
    """Rules for sliding and drag-and-drop jigsaw puzzles."""

    game_type = "jigsaw"
    title = "Jigsaw Puzzle"
    variants = ("sliding", "slots")
    supported_actions = frozenset({
        ActionType.SELECT,
        ActionType.PLACE,
        ActionType.TICK,
        ActionType.RESET,
    })
    higher_is_better = False

    def normalize_options(self, options: dict[str, Any]) -> dict[str, Any]:
        unknown = set(options) - {"difficulty"}
        if unknown:
            raise ValueError(f"Unknown jigsaw options: {sorted(unknown)}")
        difficulty = int(options.get("difficulty", DEFAULT_DIFFICULTY))
        if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
            raise ValueError(
                f"Jigsaw difficulty must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}"
            )
        return {"difficulty": difficulty}

    def new_game(self, rng: RandomSource) -> JigsawState:
        n = self.options["difficulty"]
        state = JigsawState(
            game_type=self.game_type,
            variant=self.variant,
            options=dict(self.options),
            phase=GamePhase.PLAYING,
            difficulty=n,
        )
        if self.variant == "sliding":
            state.slots = list(range(n * n - 1)) + [None]
            scramble(state, rng)
        else:
            state.slots = [None] * (n * n)
            state.tray = rng.shuffle(list(range(n * n)))
        return state

    def _get_handler(self, action_type: ActionType):
        handlers = {
            ActionType.SELECT: self._handle_select,
            ActionType.PLACE: self._handle_place,
            ActionType.TICK: self._handle_tick,
        }
        return handlers.get(action_type)

    def tick_interval_ms(self, state: JigsawState) -> int:
        return TIMER_INTERVAL_MS

    def high_score_key(self) -> str:
        return f"jigsaw-{self.variant}-{self.options['difficulty']}-best-moves"

    def high_score_value(self, state: JigsawState) -> int | None:
        return state.moves if state.phase == GamePhase.WON else None

    # =========================================================================
    # Handlers
    # =========================================================================

    def _handle_select(self, state: JigsawState, action: Action, rng: RandomSource) -> ActionResult:
        if self.variant != "sliding":
            return ActionResult.failure(
                "Drag pieces onto slots with place", error_code="UNSUPPORTED_ACTION",
            )
        slot = self._slot_from_payload(state, action)
        if slot is None:
            return ActionResult.failure("Slot is off the board", error_code="INVALID_ACTION")

        empty = state.empty_slot
        if state.slots[slot] is None or not is_adjacent(slot, empty, state.difficulty):
            return ActionResult.rejection(state, "Piece is not next to the gap")

        new_state = state._copy_with()
        new_state.slots[empty], new_state.slots[slot] = new_state.slots[slot], None
        return self._after_move(new_state)

    def _handle_place(self, state: JigsawState, action: Action, rng: RandomSource) -> ActionResult:
        if self.variant != "slots":
            return ActionResult.failure(
                "Sliding pieces move with select", error_code="UNSUPPORTED_ACTION",
            )
        piece = action.payload.piece_id
        target = self._slot_from_payload(state, action)
        if target is None:
            return ActionResult.failure("Slot is off the board", error_code="INVALID_ACTION")
        if piece is None or not 0 <= piece < len(state.slots):
            return ActionResult.failure(f"Unknown piece {piece}", error_code="INVALID_ACTION")

        if state.slots[target] == piece:
            return ActionResult.rejection(state, "Piece is already there")

        new_state = state._copy_with()
        occupant = new_state.slots[target]
        if piece in new_state.tray:
            tray_index = new_state.tray.index(piece)
            if occupant is None:
                new_state.tray.pop(tray_index)
            else:
                new_state.tray[tray_index] = occupant
        else:
            source = new_state.slots.index(piece)
            new_state.slots[source] = occupant
        new_state.slots[target] = piece
        return self._after_move(new_state)

    def _handle_tick(self, state: JigsawState, action: Action, rng: RandomSource) -> ActionResult:
        return ActionResult.success_with_state(
            state._copy_with(clock_ms=state.clock_ms + action.payload.elapsed_ms)
        )

    def _after_move(self, state: JigsawState) -> ActionResult:
        state.moves += 1
        if is_solved(state):
            state.phase = GamePhase.WON
            return ActionResult.success_with_state(
                state,
                events=[f"Solved in {state.elapsed_display} with {state.moves} moves"],
            )
        return ActionResult.success_with_state(state)

    def _slot_from_payload(self, state: JigsawState, action: Action) -> int | None:
        row, col = action.payload.row, action.payload.col
        n = state.difficulty
        if row is None or col is None or not (0 <= row < n and 0 <= col < n):
            return None
        return state.slot_index(row, col)


def scramble(state: JigsawState, rng: RandomSource, moves: int | None = None):
    """Slide random neighbors into the gap, in place, until the board is mixed."""
    n = state.difficulty
    moves = moves if moves is not None else n * n * SCRAMBLE_FACTOR
    empty = state.empty_slot
    done = 0
    while done < moves or is_solved(state):
        neighbors = [
            slot for slot in range(n * n)
            if is_adjacent(slot, empty, n)
        ]
        chosen = rng.choice(neighbors)
        state.slots[empty], state.slots[chosen] = state.slots[chosen], None
        empty = chosen
        done += 1
