"""
Chain Reaction - 2 to 6 players fill cells until they burst.
"""

from .rules import (
    Cell,
    ChainStep,
    ChainReactionState,
    ChainReactionRules,
    cell_capacity,
    propagate,
)

__all__ = [
    "Cell",
    "ChainStep",
    "ChainReactionState",
    "ChainReactionRules",
    "cell_capacity",
    "propagate",
]
