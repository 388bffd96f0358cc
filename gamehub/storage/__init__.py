"""
Storage Module - High-score persistence.
"""

from .highscores import HighScoreStore, MemoryHighScoreStore

__all__ = [
    "HighScoreStore",
    "MemoryHighScoreStore",
]
