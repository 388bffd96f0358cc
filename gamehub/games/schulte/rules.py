"""
Schulte Table Rules - find the numbers 1..n^2 in order as fast as possible.

The clock starts when 1 is found and stops after the last number.
Wrong clicks count as mistakes but never end the game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ...engine_core.state import GameState, GamePhase
from ...engine_core.action import Action, ActionType, ActionResult
from ..base import GameRules

if TYPE_CHECKING:
    from ...engine_core.rng import RandomSource


MIN_GRID_SIZE = 3
MAX_GRID_SIZE = 7
DEFAULT_GRID_SIZE = 5
TIMER_INTERVAL_MS = 10


@dataclass
class SchulteState(GameState):
    phase: GamePhase = GamePhase.READY

    grid_size: int = DEFAULT_GRID_SIZE
    numbers: list[int] = field(default_factory=list)  # Row-major
    found: list[bool] = field(default_factory=list)
    current_number: int = 1
    mistakes: int = 0
    highlight: bool = False

    @property
    def total(self) -> int:
        return self.grid_size * self.grid_size

    @property
    def elapsed_display(self) -> str:
        return f"{self.clock_ms / 1000:.2f}"

    def number_at(self, row: int, col: int) -> int:
        return self.numbers[row * self.grid_size + col]


class SchulteRules(GameRules):
    """Rules for the Schulte table attention trainer."""

    game_type = "schulte"
    title = "Schulte Table"
    supported_actions = frozenset({
        ActionType.SELECT,
        ActionType.TICK,
        ActionType.TOGGLE_HIGHLIGHT,
        ActionType.RESET,
    })
    higher_is_better = False

    def normalize_options(self, options: dict[str, Any]) -> dict[str, Any]:
        unknown = set(options) - {"grid_size"}
        if unknown:
            raise ValueError(f"Unknown schulte options: {sorted(unknown)}")
        grid_size = int(options.get("grid_size", DEFAULT_GRID_SIZE))
        if not MIN_GRID_SIZE <= grid_size <= MAX_GRID_SIZE:
            raise ValueError(
                f"Schulte grid_size must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}"
            )
        return {"grid_size": grid_size}

    def new_game(self, rng: RandomSource) -> SchulteState:
        n = self.options["grid_size"]
        return SchulteState(
            game_type=self.game_type,
            variant=self.variant,
            options=dict(self.options),
            phase=GamePhase.READY,
            grid_size=n,
            numbers=rng.shuffle(list(range(1, n * n + 1))),
            found=[False] * (n * n),
        )

    def _get_handler(self, action_type: ActionType):
        handlers = {
            ActionType.SELECT: self._handle_select,
            ActionType.TICK: self._handle_tick,
            ActionType.TOGGLE_HIGHLIGHT: self._handle_toggle_highlight,
        }
        return handlers.get(action_type)

    def tick_interval_ms(self, state: SchulteState) -> int:
        return TIMER_INTERVAL_MS

    def high_score_key(self) -> str:
        return f"schulte-{self.options['grid_size']}-best-ms"

    def high_score_value(self, state: SchulteState) -> int | None:
        return state.clock_ms if state.phase == GamePhase.WON else None

    def _handle_select(self, state: SchulteState, action: Action, rng: RandomSource) -> ActionResult:
        row, col = action.payload.row, action.payload.col
        n = state.grid_size
        if row is None or col is None or not (0 <= row < n and 0 <= col < n):
            return ActionResult.failure(
                f"Cell ({row}, {col}) is off the table", error_code="INVALID_ACTION",
            )

        number = state.number_at(row, col)
        if state.phase == GamePhase.READY:
            if number != 1:
                return ActionResult.rejection(state, "Start with 1")
            new_state = state._copy_with(phase=GamePhase.PLAYING)
        elif number != state.current_number:
            new_state = state._copy_with(mistakes=state.mistakes + 1)
            return ActionResult(
                success=True,
                new_state=new_state,
                rejected=True,
                events=[f"Looking for {state.current_number}, not {number}"],
            )
        else:
            new_state = state._copy_with()

        new_state.found[row * n + col] = True
        new_state.current_number += 1
        new_state.moves += 1

        if new_state.current_number > new_state.total:
            new_state.phase = GamePhase.WON
            return ActionResult.success_with_state(
                new_state, events=[f"Done in {new_state.elapsed_display}s"],
            )
        return ActionResult.success_with_state(new_state)

    def _handle_tick(self, state: SchulteState, action: Action, rng: RandomSource) -> ActionResult:
        if state.phase != GamePhase.PLAYING:
            return ActionResult.rejection(state, "Timer not running")
        return ActionResult.success_with_state(
            state._copy_with(clock_ms=state.clock_ms + action.payload.elapsed_ms)
        )

    def _handle_toggle_highlight(
        self, state: SchulteState, action: Action, rng: RandomSource
    ) -> ActionResult:
        return ActionResult.success_with_state(state._copy_with(highlight=not state.highlight))
