"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player input (move, rotate, select a cell, place a piece)
2. Clock ticks from the game loop
3. Control actions (start, pause, reset)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Direction


class ActionType(Enum):
    """Types of actions in the system."""
    # Player input
    MOVE = "move"
    ROTATE = "rotate"
    DROP = "drop"  # Soft drop one row (Tetris)
    SELECT = "select"  # Click a cell
    PLACE = "place"  # Drag a piece onto a slot

    # Clock
    TICK = "tick"

    # Control
    START = "start"
    PAUSE = "pause"  # Toggles pause
    RESET = "reset"
    SET_SPEED = "set_speed"
    TOGGLE_HIGHLIGHT = "toggle_highlight"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    This is a generic container; validation happens in the rules.
    """
    direction: Direction | None = None
    dx: int = 0
    dy: int = 0

    # For cell selection and placement
    row: int | None = None
    col: int | None = None
    piece_id: int | None = None

    # For ticks
    elapsed_ms: int = 0

    # For settings (speed)
    value: int | None = None

    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """
    A complete action to be applied to a game state.

    Actions are applied atomically by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None

    @classmethod
    def move(cls, direction: Direction | str) -> Action:
        """Factory for a directional move."""
        if isinstance(direction, str):
            direction = Direction(direction)
        dx, dy = direction.delta
        return cls(
            action_type=ActionType.MOVE,
            payload=ActionPayload(direction=direction, dx=dx, dy=dy),
        )

    @classmethod
    def rotate(cls) -> Action:
        return cls(action_type=ActionType.ROTATE)

    @classmethod
    def drop(cls) -> Action:
        return cls(action_type=ActionType.DROP)

    @classmethod
    def tick(cls, elapsed_ms: int) -> Action:
        """Factory for a clock tick."""
        return cls(
            action_type=ActionType.TICK,
            payload=ActionPayload(elapsed_ms=elapsed_ms),
        )

    @classmethod
    def select(cls, row: int, col: int) -> Action:
        """Factory for clicking a cell."""
        return cls(
            action_type=ActionType.SELECT,
            payload=ActionPayload(row=row, col=col),
        )

    @classmethod
    def place(cls, piece_id: int, row: int, col: int) -> Action:
        """Factory for dropping a piece onto a slot."""
        return cls(
            action_type=ActionType.PLACE,
            payload=ActionPayload(piece_id=piece_id, row=row, col=col),
        )

    @classmethod
    def start(cls) -> Action:
        return cls(action_type=ActionType.START)

    @classmethod
    def pause(cls) -> Action:
        return cls(action_type=ActionType.PAUSE)

    @classmethod
    def reset(cls) -> Action:
        return cls(action_type=ActionType.RESET)

    @classmethod
    def set_speed(cls, value: int) -> Action:
        return cls(
            action_type=ActionType.SET_SPEED,
            payload=ActionPayload(value=value),
        )

    @classmethod
    def toggle_highlight(cls) -> Action:
        return cls(action_type=ActionType.TOGGLE_HIGHLIGHT)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action was valid
    - New state (if valid)
    - Whether a valid action was rejected by the rules (no effect)
    - Events (for UI updates)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    # A legal request the rules turned down (collision, wrong cell, ...)
    rejected: bool = False

    # Human-readable changes
    events: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def rejection(cls, state: Any, reason: str) -> ActionResult:
        """The move was refused; state is returned unchanged."""
        return cls(success=True, new_state=state, rejected=True, events=[reason])

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        events: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, events=events or [])
