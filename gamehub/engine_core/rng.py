"""
Random Source - Seedable randomness injected into the rules.

All random selection (next piece, tile spawn, food placement,
shuffles) goes through a RandomSource so games can be replayed
from a seed.
"""

from __future__ import annotations
import random
from typing import Any, Sequence


class RandomSource:
    """
    Thin wrapper around random.Random.

    Usage:
        rng = RandomSource(seed=42)
        piece = rng.choice("iljszot")
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def random(self) -> float:
        return self._random.random()

    def randrange(self, stop: int) -> int:
        return self._random.randrange(stop)

    def choice(self, seq: Sequence[Any]) -> Any:
        return self._random.choice(seq)

    def shuffle(self, items: list[Any]) -> list[Any]:
        """Fisher-Yates shuffle in place; returns the list for chaining."""
        for i in range(len(items) - 1, 0, -1):
            j = self._random.randrange(i + 1)
            items[i], items[j] = items[j], items[i]
        return items

    def fork(self) -> RandomSource:
        """New independent source seeded from this stream."""
        return RandomSource(self._random.randrange(2**32))
