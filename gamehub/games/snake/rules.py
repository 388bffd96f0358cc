"""
Snake Rules - segment movement, growth, food and self-collision.

Variants:
- classic: leaving the grid ends the game
- wrap: the snake re-enters on the opposite edge

A tick runs, in order: bonus expiry, eating, movement, death check.
Every fifth point from normal food spawns a bonus worth 10 that
disappears after three seconds of game clock.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

from ...engine_core.state import GamePhase
from ...engine_core.action import Action, ActionType, ActionResult
from ..base import GameRules
from .state import SnakeState, Point

if TYPE_CHECKING:
    from ...engine_core.rng import RandomSource


FOOD_POINTS = 1
BONUS_POINTS = 10
BONUS_EVERY = 5
BONUS_DURATION_MS = 3000

MIN_SPEED = 5
MAX_SPEED = 20
DEFAULT_SPEED = 10
DEFAULT_GRID_SIZE = 20


class SnakeRules(GameRules):
    """Rules for classic (walls) and wrap-around Snake."""

    game_type = "snake"
    title = "Snake"
    variants = ("classic", "wrap")
    supported_actions = frozenset({
        ActionType.START,
        ActionType.MOVE,
        ActionType.TICK,
        ActionType.SET_SPEED,
        ActionType.PAUSE,
        ActionType.RESET,
    })

    def normalize_options(self, options: dict[str, Any]) -> dict[str, Any]:
        unknown = set(options) - {"grid_size", "speed"}
        if unknown:
            raise ValueError(f"Unknown snake options: {sorted(unknown)}")
        grid_size = int(options.get("grid_size", DEFAULT_GRID_SIZE))
        if not 5 <= grid_size <= 40:
            raise ValueError("Snake grid_size must be between 5 and 40")
        speed = int(options.get("speed", DEFAULT_SPEED))
        if not MIN_SPEED <= speed <= MAX_SPEED:
            raise ValueError(f"Snake speed must be between {MIN_SPEED} and {MAX_SPEED}")
        return {"grid_size": grid_size, "speed": speed}

    def new_game(self, rng: RandomSource) -> SnakeState:
        size = self.options["grid_size"]
        state = SnakeState(
            game_type=self.game_type,
            variant=self.variant,
            options=dict(self.options),
            phase=GamePhase.READY,
            grid_size=size,
            body=[(size // 2, size // 2)],
            speed=self.options["speed"],
        )
        state.food = _free_cell(state, rng)
        return state

    def _get_handler(self, action_type: ActionType):
        handlers = {
            ActionType.START: self._handle_start,
            ActionType.MOVE: self._handle_move,
            ActionType.TICK: self._handle_tick,
            ActionType.SET_SPEED: self._handle_set_speed,
        }
        return handlers.get(action_type)

    def tick_interval_ms(self, state: SnakeState) -> int:
        return 1000 // state.speed

    def high_score_key(self) -> str:
        if self.variant == "wrap":
            return "snake-wrap-highscore"
        return "snake-highscore"

    # =========================================================================
    # Handlers
    # =========================================================================

    def _handle_start(self, state: SnakeState, action: Action, rng: RandomSource) -> ActionResult:
        if state.phase != GamePhase.READY:
            return ActionResult.rejection(state, "Game already started")
        return ActionResult.success_with_state(
            state._copy_with(phase=GamePhase.PLAYING), events=["Go!"],
        )

    def _handle_move(self, state: SnakeState, action: Action, rng: RandomSource) -> ActionResult:
        if state.phase != GamePhase.PLAYING:
            return ActionResult.rejection(state, "Press start to play")
        dx, dy = action.payload.dx, action.payload.dy
        if (dx, dy) not in {(0, -1), (0, 1), (-1, 0), (1, 0)}:
            return ActionResult.failure(
                f"Invalid snake direction: ({dx}, {dy})", error_code="INVALID_ACTION",
            )
        if state.length > 1 and state.velocity == (-dx, -dy):
            return ActionResult.rejection(state, "Cannot reverse into yourself")
        return ActionResult.success_with_state(state._copy_with(velocity=(dx, dy)))

    def _handle_set_speed(self, state: SnakeState, action: Action, rng: RandomSource) -> ActionResult:
        value = action.payload.value
        if value is None or not MIN_SPEED <= value <= MAX_SPEED:
            return ActionResult.failure(
                f"Speed must be between {MIN_SPEED} and {MAX_SPEED}",
                error_code="INVALID_ACTION",
            )
        return ActionResult.success_with_state(state._copy_with(speed=value))

    def _handle_tick(self, state: SnakeState, action: Action, rng: RandomSource) -> ActionResult:
        if state.phase != GamePhase.PLAYING:
            return ActionResult.rejection(state, "Not running")

        events = []
        new_state = state._copy_with(clock_ms=state.clock_ms + action.payload.elapsed_ms)

        if new_state.bonus_food is not None and new_state.clock_ms > new_state.bonus_expires_at:
            new_state.bonus_food = None
            events.append("Bonus food expired")

        if new_state.head == new_state.food:
            new_state.growing = True
            new_state.score += FOOD_POINTS
            events.append("Ate food")
            new_state.food = _free_cell(new_state, rng)
            if new_state.food is None:
                new_state.phase = GamePhase.WON
                events.append("The snake fills the board!")
                return ActionResult.success_with_state(new_state, events=events)
            if new_state.score % BONUS_EVERY == 0:
                new_state.bonus_food = _free_cell(new_state, rng)
                new_state.bonus_expires_at = new_state.clock_ms + BONUS_DURATION_MS
                events.append("Bonus food appeared")

        if new_state.bonus_food is not None and new_state.head == new_state.bonus_food:
            new_state.growing = True
            new_state.score += BONUS_POINTS
            new_state.bonus_food = None
            events.append("Ate bonus food")

        self._advance(new_state)
        new_state.moves += 1

        if self._is_dead(new_state):
            new_state.phase = GamePhase.GAME_OVER
            events.append(f"Game over! Final score: {new_state.score}")

        return ActionResult.success_with_state(new_state, events=events)

    # =========================================================================
    # Movement
    # =========================================================================

    def _advance(self, state: SnakeState):
        """Move the snake one cell in place on a state the caller owns."""
        x, y = state.head
        dx, dy = state.velocity
        head = (x + dx, y + dy)
        if self.variant == "wrap":
            head = (head[0] % state.grid_size, head[1] % state.grid_size)
        if not state.growing:
            state.body.pop(0)
        state.growing = False
        state.body.append(head)

    def _is_dead(self, state: SnakeState) -> bool:
        x, y = state.head
        if not (0 <= x < state.grid_size and 0 <= y < state.grid_size):
            return True
        return state.head in state.body[:-1]


def _free_cell(state: SnakeState, rng: RandomSource) -> Point | None:
    """Uniformly random cell not covered by the snake, or None if full."""
    occupied = set(state.body)
    free = [
        (x, y)
        for y in range(state.grid_size)
        for x in range(state.grid_size)
        if (x, y) not in occupied
    ]
    if not free:
        return None
    return free[rng.randrange(len(free))]
