"""
Game Loop - Drives one session in real time.

The loop:
1. User input arrives as an Action and is dispatched through the reducer
2. Wall-clock time arrives via advance(elapsed_ms)
3. Elapsed time is accumulated and converted into TICK actions at the
   interval the rules ask for
4. After every change the best value for the game is submitted to the
   high-score store

No ticks are produced while the game is ready, paused or over.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import logging

from ..engine_core.action import Action, ActionType, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.state import GamePhase

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)

# Upper bound on ticks produced by a single advance() call
MAX_TICKS_PER_ADVANCE = 1000


@dataclass
class TurnResult:
    """
    Result of dispatching an action or advancing the clock.

    success is False only for programmer errors (bad action for the game,
    action in the wrong phase). A legal-but-ineffective move is a
    rejection: success stays True and the state is unchanged.
    """
    success: bool
    phase: GamePhase
    rejected: bool = False
    ticks_applied: int = 0
    events: list[str] = field(default_factory=list)
    new_high_score: bool = False
    error: str | None = None
    error_code: str | None = None

    @property
    def finished(self) -> bool:
        return self.phase.is_terminal


class GameLoop:
    """
    The real-time driver for a session.

    Usage:
        loop = GameLoop(session)

        loop.dispatch(Action.start())
        while not session.state.is_over:
            result = loop.advance(16)
            draw(session.state)
    """

    def __init__(self, session: Session):
        self.session = session
        self.reducer = Reducer(rules=session.rules)
        self._accumulated_ms = 0

    @property
    def accumulated_ms(self) -> int:
        return self._accumulated_ms

    def dispatch(self, action: Action) -> TurnResult:
        """Apply a single user action to the session state."""
        session = self.session
        session.touch()

        result = self.reducer.apply(session.state, action, session.rng)
        if not result.success:
            logger.debug(
                "Session %s: %s failed: %s",
                session.session_id, action.action_type.value, result.error,
            )
            return TurnResult(
                success=False,
                phase=session.state.phase,
                error=result.error,
                error_code=result.error_code,
            )

        if action.action_type in {ActionType.DROP, ActionType.RESET}:
            self._accumulated_ms = 0

        self._commit(result)
        new_high = self._record_high_score()
        return TurnResult(
            success=True,
            phase=session.state.phase,
            rejected=result.rejected,
            events=list(result.events),
            new_high_score=new_high,
        )

    def advance(self, elapsed_ms: int) -> TurnResult:
        """
        Advance the session clock by elapsed_ms.

        Applies one TICK per full interval. Leftover time carries over
        to the next call.
        """
        session = self.session
        session.touch()

        if elapsed_ms < 0:
            return TurnResult(
                success=False,
                phase=session.state.phase,
                error="elapsed_ms must not be negative",
                error_code="INVALID_ACTION",
            )

        if session.state.phase != GamePhase.PLAYING:
            self._accumulated_ms = 0
            return TurnResult(success=True, phase=session.state.phase)

        interval = session.rules.tick_interval_ms(session.state)
        if not interval:
            return TurnResult(success=True, phase=session.state.phase)

        self._accumulated_ms += elapsed_ms
        events: list[str] = []
        ticks = 0
        new_high = False

        while self._accumulated_ms >= interval:
            if ticks >= MAX_TICKS_PER_ADVANCE:
                logger.warning(
                    "Session %s: dropping %d ms of backlog",
                    session.session_id, self._accumulated_ms,
                )
                self._accumulated_ms = 0
                break

            self._accumulated_ms -= interval
            result = self.reducer.apply(session.state, Action.tick(interval), session.rng)
            if not result.success:
                self._accumulated_ms = 0
                return TurnResult(
                    success=False,
                    phase=session.state.phase,
                    ticks_applied=ticks,
                    events=events,
                    error=result.error,
                    error_code=result.error_code,
                )

            ticks += 1
            self._commit(result)
            events.extend(result.events)
            new_high = self._record_high_score() or new_high

            if session.state.phase != GamePhase.PLAYING:
                self._accumulated_ms = 0
                break
            interval = session.rules.tick_interval_ms(session.state) or interval

        return TurnResult(
            success=True,
            phase=session.state.phase,
            ticks_applied=ticks,
            events=events,
            new_high_score=new_high,
        )

    def _commit(self, result: ActionResult):
        from .manager import SessionState

        if result.new_state is None:
            return
        self.session.state = result.new_state
        if self.session.state.is_over:
            self.session.status = SessionState.FINISHED
        else:
            self.session.status = SessionState.ACTIVE

    def _record_high_score(self) -> bool:
        """Submit the current value to the store; True if it became the best."""
        session = self.session
        rules = session.rules
        store = session.high_score_store
        key = rules.high_score_key()
        if store is None or not key:
            return False

        value = rules.high_score_value(session.state)
        if value is None:
            return False

        if not store.submit(key, value, higher_is_better=rules.higher_is_better):
            return False
        session.high_score = store.get(key)
        logger.info("New best for %s: %d", key, value)
        return True
