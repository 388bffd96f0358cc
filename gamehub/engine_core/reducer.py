"""
Reducer - Applies actions to game state.

The reducer is the single point of state change.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action, rng) -> new_state
- Validates phase before dispatching
- Returns ActionResult with success/failure
- Delegates game logic to the GameRules
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .state import GameState, GamePhase
from .action import Action, ActionType, ActionResult

if TYPE_CHECKING:
    from .rng import RandomSource
    from ..games.base import GameRules


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    Rules provide the game-specific transitions.
    """
    rules: GameRules

    def apply(self, state: GameState, action: Action, rng: RandomSource) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            return ActionResult.failure(validation_error, error_code="INVALID_ACTION")

        if not self.rules.supports(action.action_type):
            return ActionResult.failure(
                f"{self.rules.get_name()} does not support {action.action_type.value}",
                error_code="UNSUPPORTED_ACTION",
            )

        if action.action_type == ActionType.RESET:
            return ActionResult.success_with_state(
                self.rules.new_game(rng), events=["New game"],
            )

        if action.action_type == ActionType.PAUSE:
            return self._toggle_pause(state)

        return self.rules.apply(state, action, rng)

    def _validate_action(self, state: GameState, action: Action) -> str | None:
        """
        Validate that an action is allowed in the current phase.

        Returns error message if invalid, None if valid.
        """
        if state.phase.is_terminal and action.action_type != ActionType.RESET:
            return "Game is over - only reset is allowed"

        if state.phase == GamePhase.PAUSED:
            if action.action_type not in {ActionType.PAUSE, ActionType.RESET}:
                return "Game is paused"

        return None

    def _toggle_pause(self, state: GameState) -> ActionResult:
        if state.phase == GamePhase.PLAYING:
            return ActionResult.success_with_state(
                state._copy_with(phase=GamePhase.PAUSED), events=["Paused"],
            )
        if state.phase == GamePhase.PAUSED:
            return ActionResult.success_with_state(
                state._copy_with(phase=GamePhase.PLAYING), events=["Resumed"],
            )
        return ActionResult.rejection(state, "Nothing to pause")


def apply_action(
    rules: GameRules,
    state: GameState,
    action: Action,
    rng: RandomSource,
) -> ActionResult:
    """Convenience function to apply an action."""
    reducer = Reducer(rules=rules)
    return reducer.apply(state, action, rng)
