"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. User picks a game (type, variant, options, optional seed)
2. Manager builds the rules, a seeded RandomSource and the first state
3. During play, a GameLoop applies user actions and clock ticks
4. Session ends (game over, user quits, or stale cleanup) and is dropped

PERSISTENCE RULES:
- Sessions are in-memory only
- The only persisted data is one best value per game key
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import random
import time
import uuid

from ..engine_core.state import GameState
from ..engine_core.rng import RandomSource
from ..games import get_rules
from ..games.base import GameRules
from ..storage import HighScoreStore, MemoryHighScoreStore


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Accepting input
    FINISHED = "finished"  # Game reached a terminal phase
    ABANDONED = "abandoned"  # User quit or session expired


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The rules and the current canonical game state
    - The seeded random source used for every transition
    - The best stored value for this game
    """
    session_id: str
    game_type: str
    variant: str
    rules: GameRules
    state: GameState
    rng: RandomSource
    created_at: float

    seed: int | None = None
    options: dict[str, Any] = field(default_factory=dict)
    status: SessionState = SessionState.ACTIVE
    last_active_at: float = 0.0

    high_score_store: HighScoreStore | None = None
    high_score: int | None = None

    def is_active(self) -> bool:
        """Check if session is still accepting input."""
        return self.status == SessionState.ACTIVE

    @property
    def ended(self) -> bool:
        return self.status != SessionState.ACTIVE

    def touch(self):
        self.last_active_at = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions for any registered game
    - Track active sessions
    - Clean up finished and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, high_scores: HighScoreStore | None = None):
        self._sessions: dict[str, Session] = {}
        self.high_scores = high_scores if high_scores is not None else MemoryHighScoreStore()

    def create_session(
        self,
        game_type: str,
        variant: str | None = None,
        options: dict[str, Any] | None = None,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            game_type: Registered game type ("tetris", "2048", ...)
            variant: Game variant, defaults to the game's first variant
            options: Game options (grid size, players, ...)
            seed: Seed for deterministic play; random if omitted

        Returns:
            New Session with the initial state

        Raises:
            ValueError: unknown game type, variant or options
        """
        rules = get_rules(game_type, variant, **(options or {}))
        if seed is None:
            seed = random.randrange(2**31)
        rng = RandomSource(seed)
        now = time.time()

        session = Session(
            session_id=str(uuid.uuid4()),
            game_type=rules.game_type,
            variant=rules.variant,
            rules=rules,
            state=rules.new_game(rng),
            rng=rng,
            created_at=now,
            seed=seed,
            options=dict(rules.options),
            last_active_at=now,
            high_score_store=self.high_scores,
        )

        key = rules.high_score_key()
        if key:
            session.high_score = self.high_scores.get(key)

        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        if reason == "completed" or session.state.is_over:
            session.status = SessionState.FINISHED
        else:
            session.status = SessionState.ABANDONED
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions still accepting input."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Drop sessions idle for longer than max_age_seconds.

        Called periodically to free memory. Returns removed IDs.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
