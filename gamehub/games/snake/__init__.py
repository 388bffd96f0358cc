"""
Snake - grow by eating food, avoid walls and yourself.
"""

from .state import SnakeState
from .rules import SnakeRules, BONUS_DURATION_MS

__all__ = [
    "SnakeState",
    "SnakeRules",
    "BONUS_DURATION_MS",
]
