"""
Input Map - Translate raw keyboard and touch input into actions.

Key names follow the browser KeyboardEvent.key convention
("ArrowLeft", "a", " ", "Escape"). Lookups are case-insensitive
for single letters.
"""

from __future__ import annotations

from .state import Direction
from .action import Action


SWIPE_THRESHOLD = 30

DIRECTION_KEYS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

CONTROL_KEYS = {
    "p": Action.pause,
    "Escape": Action.pause,
    "pause": Action.pause,
    "r": Action.reset,
    "reset": Action.reset,
    " ": Action.start,
    "start": Action.start,
    "h": Action.toggle_highlight,
    "highlight": Action.toggle_highlight,
}


def _normalize(key: str) -> str:
    return key.lower() if len(key) == 1 else key


def swipe_direction(dx: float, dy: float, threshold: float = SWIPE_THRESHOLD) -> Direction | None:
    """
    Direction of a touch swipe, or None if it was too short.

    The dominant axis wins; screen y grows downward.
    """
    if abs(dx) <= threshold and abs(dy) <= threshold:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP


def direction_action(game_type: str, direction: Direction) -> Action:
    """Action for a direction; Tetris maps up to rotate and down to drop."""
    if game_type == "tetris":
        if direction == Direction.UP:
            return Action.rotate()
        if direction == Direction.DOWN:
            return Action.drop()
    return Action.move(direction)


def action_for_key(game_type: str, key: str) -> Action | None:
    """Action bound to a key for this game, or None if unbound."""
    key = _normalize(key)
    direction = DIRECTION_KEYS.get(key)
    if direction is not None:
        return direction_action(game_type, direction)
    factory = CONTROL_KEYS.get(key)
    if factory is not None:
        return factory()
    return None


def action_for_swipe(game_type: str, dx: float, dy: float) -> Action | None:
    direction = swipe_direction(dx, dy)
    if direction is None:
        return None
    return direction_action(game_type, direction)
