"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through of a game:
- Created when user starts a game
- Holds the rules, the current state and a seeded random source
- Driven by a GameLoop (user actions plus clock ticks)
- Dropped when the game ends or goes stale

Sessions are EPHEMERAL. The only persistence is the high-score store.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "TurnResult",
]
