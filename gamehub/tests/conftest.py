"""
Pytest fixtures for GameHub tests.
"""

import pytest

from ..engine_core.rng import RandomSource
from ..games import (
    TetrisRules,
    SnakeRules,
    Twenty48Rules,
    ChainReactionRules,
    JigsawRules,
    SchulteRules,
)
from ..games.twenty48 import Tile, Twenty48State
from ..engine_core.state import GamePhase
from ..session import SessionManager
from ..storage import MemoryHighScoreStore


class FixedRandom:
    """
    Stand-in for RandomSource that always picks the first option.

    random() returns `value`, so 2048 spawns a 4 when value < 0.1.
    """

    def __init__(self, value: float = 0.5):
        self.value = value

    def random(self) -> float:
        return self.value

    def randrange(self, stop: int) -> int:
        return 0

    def choice(self, seq):
        return seq[0]

    def shuffle(self, items):
        return items


@pytest.fixture
def rng() -> RandomSource:
    return RandomSource(seed=42)


@pytest.fixture
def fixed_rng() -> FixedRandom:
    return FixedRandom()


@pytest.fixture
def tetris_rules() -> TetrisRules:
    return TetrisRules()


@pytest.fixture
def snake_rules() -> SnakeRules:
    return SnakeRules()


@pytest.fixture
def twenty48_rules() -> Twenty48Rules:
    return Twenty48Rules()


@pytest.fixture
def chain_rules() -> ChainReactionRules:
    return ChainReactionRules(players=2, grid_size=6)


@pytest.fixture
def sliding_rules() -> JigsawRules:
    return JigsawRules("sliding", difficulty=3)


@pytest.fixture
def slots_rules() -> JigsawRules:
    return JigsawRules("slots", difficulty=3)


@pytest.fixture
def schulte_rules() -> SchulteRules:
    return SchulteRules(grid_size=3)


@pytest.fixture
def memory_store() -> MemoryHighScoreStore:
    return MemoryHighScoreStore()


@pytest.fixture
def manager(memory_store) -> SessionManager:
    return SessionManager(high_scores=memory_store)


def make_2048_state(values: list[list[int]]) -> Twenty48State:
    """Build a 2048 state from plain numbers (0 for empty)."""
    size = len(values)
    board = []
    next_id = 1
    for r, row in enumerate(values):
        tiles = []
        for c, value in enumerate(row):
            if value:
                tiles.append(Tile(id=next_id, value=value, row=r, col=c))
                next_id += 1
            else:
                tiles.append(None)
        board.append(tiles)
    return Twenty48State(
        game_type="2048",
        phase=GamePhase.PLAYING,
        size=size,
        board=board,
        next_tile_id=next_id,
        options={"size": size},
    )
