"""
Schulte Table - an attention trainer on a shuffled number grid.
"""

from .rules import SchulteState, SchulteRules

__all__ = [
    "SchulteState",
    "SchulteRules",
]
