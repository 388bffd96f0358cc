"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their game loops
3. Serves the catalog and the high-score table
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Errors come back as ErrorResponse values, never as exceptions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    ActionRequest,
    AdvanceRequest,
    # Responses
    ErrorResponse,
    GameListResponse,
    CategoriesResponse,
    SessionResponse,
    TurnResponse,
    GameStateResponse,
    RenderResponse,
    HighScoresResponse,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..catalog import GameRecord, load_catalog, search_catalog, find_record, categories
from ..engine_core.action import Action, ActionType, ActionPayload
from ..engine_core.input_map import action_for_key
from ..engine_core.state import Direction
from ..render import Renderer, TextRenderer
from ..session import SessionManager, Session, GameLoop, TurnResult

logger = logging.getLogger(__name__)


def build_action(request: ActionRequest, game_type: str) -> Action:
    """
    Turn an ActionRequest into an engine Action.

    Raises ValueError when the request is malformed.
    """
    if request.key is not None:
        action = action_for_key(game_type, request.key)
        if action is None:
            raise ValueError(f"Key {request.key!r} does nothing in {game_type}")
        return action

    if not request.action_type:
        raise ValueError("Either action_type or key is required")
    try:
        action_type = ActionType(request.action_type.lower())
    except ValueError:
        raise ValueError(f"Unknown action type: {request.action_type}")

    if action_type == ActionType.MOVE:
        if request.direction:
            try:
                return Action.move(Direction(request.direction.lower()))
            except ValueError:
                raise ValueError(f"Unknown direction: {request.direction}")
        if (request.dx, request.dy) == (0, 0):
            raise ValueError("Move needs a direction or dx/dy")
        return Action(
            action_type=ActionType.MOVE,
            payload=ActionPayload(
                direction=Direction.from_delta(request.dx, request.dy),
                dx=request.dx,
                dy=request.dy,
            ),
        )

    if action_type == ActionType.SELECT:
        if request.row is None or request.col is None:
            raise ValueError("Select needs row and col")
        return Action.select(request.row, request.col)

    if action_type == ActionType.PLACE:
        if request.piece_id is None or request.row is None or request.col is None:
            raise ValueError("Place needs piece_id, row and col")
        return Action.place(request.piece_id, request.row, request.col)

    if action_type == ActionType.SET_SPEED:
        if request.value is None:
            raise ValueError("Set speed needs a value")
        return Action.set_speed(request.value)

    if action_type == ActionType.TICK:
        return Action.tick(request.elapsed_ms)

    return Action(action_type=action_type)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Browse the catalog
        games = service.list_games(query="tet")

        # Create session
        session_response = service.create_session(CreateSessionRequest(game_type="2048"))

        # Play
        turn = service.apply_action(session_id, ActionRequest(action_type="move", direction="left"))
        turn = service.advance(session_id, AdvanceRequest(elapsed_ms=16))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    catalog: list[GameRecord] = field(default_factory=load_catalog)
    renderer: Renderer = field(default_factory=TextRenderer)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_games(
        self,
        query: str | None = None,
        category: str | None = None,
        featured: bool = False,
    ) -> GameListResponse:
        games = search_catalog(
            self.catalog,
            query=query,
            category=category,
            featured_only=featured,
            featured_first=True,
        )
        return GameListResponse(games=games, count=len(games))

    def list_categories(self) -> CategoriesResponse:
        return CategoriesResponse(categories=categories(self.catalog))

    def get_game(self, game_id: int) -> GameRecord | ErrorResponse:
        record = find_record(self.catalog, game_id)
        if record is None:
            return ErrorResponse(
                error=f"Game {game_id} not found",
                error_code=ErrorCode.GAME_NOT_FOUND,
            )
        return record

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """
        Create a new game session.

        The game is named either by game_type or by a catalog game_id.
        """
        game_type, variant = request.game_type, request.variant
        if request.game_id is not None:
            record = find_record(self.catalog, request.game_id)
            if record is None:
                return ErrorResponse(
                    error=f"Game {request.game_id} not found",
                    error_code=ErrorCode.GAME_NOT_FOUND,
                )
            if not record.playable:
                return ErrorResponse(
                    error=f"{record.title} cannot be played here",
                    error_code=ErrorCode.INVALID_GAME,
                )
            game_type = record.game_type
            variant = variant or record.variant

        if not game_type:
            return ErrorResponse(
                error="game_type or game_id is required",
                error_code=ErrorCode.INVALID_GAME,
            )

        try:
            session = self.session_manager.create_session(
                game_type=game_type,
                variant=variant,
                options=request.options,
                seed=request.seed,
            )
        except ValueError as e:
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.INVALID_GAME,
                details={"game_type": game_type, "variant": variant},
            )

        self._game_loops[session.session_id] = GameLoop(session)
        logger.info(
            "Created session %s (%s/%s, seed=%s)",
            session.session_id, session.game_type, session.variant, session.seed,
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session and release its game loop."""
        self._game_loops.pop(session_id, None)
        ended = self.session_manager.end_session(session_id, reason)
        if ended:
            logger.info("Ended session %s (%s)", session_id, reason)
        return ended

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        for session_id in removed:
            self._game_loops.pop(session_id, None)
        if removed:
            logger.info("Removed %d stale session(s)", len(removed))
        return removed

    # =========================================================================
    # Game Loop
    # =========================================================================

    def apply_action(self, session_id: str, request: ActionRequest) -> TurnResponse | ErrorResponse:
        """Apply one player action."""
        session, loop = self._lookup(session_id)
        if session is None:
            return self._session_not_found(session_id)

        try:
            action = build_action(request, session.game_type)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ACTION)

        result = loop.dispatch(action)
        return self._turn_to_response(session, result)

    def advance(self, session_id: str, request: AdvanceRequest) -> TurnResponse | ErrorResponse:
        """Advance the session clock."""
        session, loop = self._lookup(session_id)
        if session is None:
            return self._session_not_found(session_id)
        result = loop.advance(request.elapsed_ms)
        return self._turn_to_response(session, result)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return GameStateResponse(
            session_id=session_id,
            game_type=session.game_type,
            variant=session.variant,
            status=SessionStatus(session.state.phase.value),
            state=session.state.to_dict(),
        )

    def render(self, session_id: str) -> RenderResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return RenderResponse(session_id=session_id, text=self.renderer.render(session.state))

    def get_high_scores(self) -> HighScoresResponse:
        return HighScoresResponse(scores=self.session_manager.high_scores.all())

    # =========================================================================
    # Helpers
    # =========================================================================

    def _lookup(self, session_id: str) -> tuple[Session | None, GameLoop | None]:
        session = self.session_manager.get_session(session_id)
        if not session:
            return None, None
        loop = self._game_loops.get(session_id)
        if loop is None:
            loop = GameLoop(session)
            self._game_loops[session_id] = loop
        return session, loop

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            game_type=session.game_type,
            variant=session.variant,
            status=SessionStatus(session.state.phase.value),
            score=session.state.score,
            moves=session.state.moves,
            options=session.options,
            seed=session.seed,
            high_score=session.high_score,
            tick_interval_ms=session.rules.tick_interval_ms(session.state),
            created_at=session.created_at,
        )

    def _turn_to_response(self, session: Session, result: TurnResult) -> TurnResponse | ErrorResponse:
        if not result.success:
            try:
                code = ErrorCode(result.error_code)
            except ValueError:
                code = ErrorCode.INVALID_ACTION
            return ErrorResponse(
                error=result.error or "Action failed",
                error_code=code,
                details={"phase": result.phase.value},
            )
        return TurnResponse(
            session_id=session.session_id,
            success=True,
            rejected=result.rejected,
            ticks_applied=result.ticks_applied,
            status=SessionStatus(result.phase.value),
            finished=result.finished,
            score=session.state.score,
            events=result.events,
            new_high_score=result.new_high_score,
            high_score=session.high_score,
            state=session.state.to_dict(),
        )
