"""
Games module - Game-specific implementations.

Each game has its own subpackage with:
- Game-specific state model
- Rules (new game + one handler per action)

GAME_RULES maps a game type to its rules class.
"""

from __future__ import annotations
from typing import Any

from .base import GameRules
from .tetris import TetrisRules
from .snake import SnakeRules
from .twenty48 import Twenty48Rules
from .chain_reaction import ChainReactionRules
from .jigsaw import JigsawRules
from .schulte import SchulteRules


GAME_RULES: dict[str, type[GameRules]] = {
    rules.game_type: rules
    for rules in (
        TetrisRules,
        SnakeRules,
        Twenty48Rules,
        ChainReactionRules,
        JigsawRules,
        SchulteRules,
    )
}


def get_rules(game_type: str, variant: str | None = None, **options: Any) -> GameRules:
    """
    Build rules for a game type.

    Raises ValueError for unknown game types, variants or options.
    """
    rules_class = GAME_RULES.get(game_type)
    if rules_class is None:
        raise ValueError(
            f"Unknown game type {game_type!r}; expected one of {', '.join(sorted(GAME_RULES))}"
        )
    return rules_class(variant, **options)


__all__ = [
    "GameRules",
    "GAME_RULES",
    "get_rules",
    "TetrisRules",
    "SnakeRules",
    "Twenty48Rules",
    "ChainReactionRules",
    "JigsawRules",
    "SchulteRules",
]
