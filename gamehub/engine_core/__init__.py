"""
Engine Core - Deterministic game state management.

The engine is the runtime that:
1. Holds a GameState
2. Applies actions via the reducer
3. Draws randomness from an injected RandomSource
4. Maps raw input to actions
"""

from .state import GameState, GamePhase, Direction
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action
from .rng import RandomSource
from .input_map import action_for_key, action_for_swipe, swipe_direction

__all__ = [
    "GameState",
    "GamePhase",
    "Direction",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "RandomSource",
    "action_for_key",
    "action_for_swipe",
    "swipe_direction",
]
