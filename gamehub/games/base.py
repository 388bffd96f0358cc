"""
Game Rules - Interface every game implements.

A GameRules object is stateless apart from its variant and options.
All game state lives in the GameState it is handed.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

from ..engine_core.action import Action, ActionType, ActionResult

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.rng import RandomSource


Handler = Callable[["GameState", Action, "RandomSource"], ActionResult]


class GameRules(ABC):
    """
    Abstract base class for game rules.

    Subclasses declare their game_type, variants and the actions
    they accept, and implement new_game() plus one handler per
    action type. PAUSE and RESET are handled by the reducer.
    """

    game_type: str = ""
    title: str = ""
    variants: tuple[str, ...] = ("classic",)
    supported_actions: frozenset[ActionType] = frozenset({ActionType.RESET})

    # Lower-is-better scores (times, move counts) set this to False
    higher_is_better: bool = True

    def __init__(self, variant: str | None = None, **options: Any):
        variant = variant or self.variants[0]
        if variant not in self.variants:
            raise ValueError(
                f"Unknown variant {variant!r} for {self.game_type}; "
                f"expected one of {', '.join(self.variants)}"
            )
        self.variant = variant
        self.options = self.normalize_options(options)

    def normalize_options(self, options: dict[str, Any]) -> dict[str, Any]:
        """Validate and fill defaults. Raises ValueError on bad input."""
        if options:
            raise ValueError(f"{self.game_type} takes no options: {sorted(options)}")
        return {}

    @abstractmethod
    def new_game(self, rng: RandomSource) -> GameState:
        """Create the initial state for a new game."""
        pass

    def apply(self, state: GameState, action: Action, rng: RandomSource) -> ActionResult:
        """
        Apply a game-specific action.

        The reducer has already checked phase and support.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type.value}",
                error_code="UNSUPPORTED_ACTION",
            )
        return handler(state, action, rng)

    def _get_handler(self, action_type: ActionType) -> Handler | None:
        """Map action types to handler methods. Override per game."""
        return None

    def supports(self, action_type: ActionType) -> bool:
        return action_type in self.supported_actions

    def tick_interval_ms(self, state: GameState) -> int | None:
        """Interval between clock ticks, or None if the game is not tick-driven."""
        return None

    def high_score_key(self) -> str | None:
        """Storage key for this game's single persisted best value."""
        return None

    def high_score_value(self, state: GameState) -> int | None:
        """
        Value to submit to the high-score store for this state.

        Higher-is-better games submit the running score; lower-is-better
        games submit only once the game is won.
        """
        if self.higher_is_better:
            return state.score
        return None

    def get_name(self) -> str:
        return self.title or self.game_type
