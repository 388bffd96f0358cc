"""
FastAPI Application - REST API for the game hub.

Endpoints:
    GET    /api/v1/games                    Catalog list (q, category, featured)
    GET    /api/v1/games/categories         Distinct categories
    GET    /api/v1/games/{id}               One catalog record
    POST   /api/v1/sessions                 Create game session
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get session status
    DELETE /api/v1/sessions/{id}            End session
    POST   /api/v1/sessions/{id}/actions    Apply a player action
    POST   /api/v1/sessions/{id}/advance    Advance the game clock
    GET    /api/v1/sessions/{id}/state      Get game state
    GET    /api/v1/sessions/{id}/render     Get a text drawing
    GET    /api/v1/highscores               Stored high scores
    WS     /api/v1/sessions/{id}/ws         WebSocket for real-time play

Real-time games (Tetris, Snake, timers) are driven by the client:
it calls /advance with the elapsed wall-clock time, or sends
{"type": "advance", "elapsed_ms": ...} over the WebSocket.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import json
import logging
import os

from fastapi import FastAPI, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .. import __version__
from ..catalog import GameRecord, load_catalog
from ..session import SessionManager
from ..storage import HighScoreStore
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    ActionRequest,
    AdvanceRequest,
    # Response models
    ErrorResponse,
    GameListResponse,
    CategoriesResponse,
    SessionResponse,
    TurnResponse,
    GameStateResponse,
    RenderResponse,
    HighScoresResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Enums
    ErrorCode,
    ERROR_STATUS_CODES,
)

logger = logging.getLogger(__name__)


def load_settings() -> dict[str, object]:
    """Environment configuration, read when the app is created."""
    return {
        "env": os.getenv("GAMEHUB_ENV", "development"),
        "catalog_path": os.getenv("GAMEHUB_CATALOG") or None,
        "data_dir": os.getenv("GAMEHUB_DATA_DIR") or None,
        "allowed_origins": os.getenv("ALLOWED_ORIGINS", "*").split(","),
    }


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = load_settings()

    app = FastAPI(
        title="Game Hub API",
        description="""
Browser mini-games as a deterministic engine behind a REST API.

## Playing

1. Pick a game from `GET /games` and create a session with `POST /sessions`.
2. Send player input to `POST /sessions/{id}/actions`.
3. Drive real-time games by posting elapsed time to `POST /sessions/{id}/advance`.

A move that is legal to ask for but has no effect (a blocked piece,
a reversed snake) comes back with `rejected=true` and the state unchanged.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `GAME_NOT_FOUND` | Catalog record does not exist |
| `INVALID_GAME` | Unknown game type, variant or options |
| `INVALID_ACTION` | Malformed action or wrong phase |
| `UNSUPPORTED_ACTION` | The game does not take this action |
| `VALIDATION_ERROR` | Request body failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings["allowed_origins"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        store_path = None
        if settings["data_dir"]:
            store_path = os.path.join(settings["data_dir"], "highscores.json")
        service = APIService(
            session_manager=SessionManager(high_scores=HighScoreStore(store_path)),
            catalog=load_catalog(settings["catalog_path"]),
        )
    api_service = service
    app.state.service = api_service

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code or ERROR_STATUS_CODES[error_code],
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def from_error(response: ErrorResponse) -> JSONResponse:
        return make_error_response(response.error_code, response.error, details=response.details)

    async def broadcast_to_session(session_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a session."""
        if session_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[session_id]:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError):
                    dead_connections.append(ws)
            for ws in dead_connections:
                ws_connections[session_id].remove(ws)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            details={"errors": json.loads(json.dumps(exc.errors(), default=str))},
        )

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Catalog"],
        summary="List and search games",
    )
    async def list_games(
        q: Annotated[Optional[str], Query(description="Title search, case-insensitive")] = None,
        category: Annotated[Optional[str], Query(description="Exact category")] = None,
        featured: Annotated[bool, Query(description="Only featured games")] = False,
    ) -> GameListResponse:
        """Catalog records matching the search, featured first."""
        return api_service.list_games(query=q, category=category, featured=featured)

    @app.get(
        "/api/v1/games/categories",
        response_model=CategoriesResponse,
        tags=["Catalog"],
        summary="List categories",
    )
    async def list_categories() -> CategoriesResponse:
        return api_service.list_categories()

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameRecord,
        responses={404: {"model": ErrorResponse}},
        tags=["Catalog"],
        summary="Get one game",
    )
    async def get_game(game_id: int) -> Union[GameRecord, JSONResponse]:
        response = api_service.get_game(game_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid game or options"},
            404: {"model": ErrorResponse, "description": "Catalog record not found"},
        },
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        **Request Body:**
        ```json
        {"game_type": "snake", "variant": "wrap", "options": {"speed": 12}, "seed": 7}
        ```
        """
        response = api_service.create_session(body)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        if success:
            await broadcast_to_session(session_id, {"type": "session_ended"})
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid or unsupported action"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game Loop"],
        summary="Apply a player action",
    )
    async def apply_action(
        session_id: str,
        body: ActionRequest,
    ) -> Union[TurnResponse, JSONResponse]:
        """
        Apply one player action.

        **Request Body:**
        ```json
        {"action_type": "move", "direction": "left"}
        {"action_type": "select", "row": 2, "col": 3}
        {"key": "ArrowUp"}
        ```
        """
        response = api_service.apply_action(session_id, body)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        await broadcast_to_session(session_id, {
            "type": "state_update",
            "payload": response.model_dump(mode="json"),
        })
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/advance",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse, "description": "Session not found"}},
        tags=["Game Loop"],
        summary="Advance the game clock",
    )
    async def advance(
        session_id: str,
        body: AdvanceRequest,
    ) -> Union[TurnResponse, JSONResponse]:
        """Apply every clock tick that fits in elapsed_ms."""
        response = api_service.advance(session_id, body)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        if response.ticks_applied:
            await broadcast_to_session(session_id, {
                "type": "state_update",
                "payload": response.model_dump(mode="json"),
            })
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the complete current game state for display."""
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/render",
        response_model=RenderResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get a text drawing of the game",
    )
    async def render(session_id: str) -> Union[RenderResponse, JSONResponse]:
        response = api_service.render(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/highscores",
        response_model=HighScoresResponse,
        tags=["Scores"],
        summary="Stored high scores",
    )
    async def high_scores() -> HighScoresResponse:
        return api_service.get_high_scores()

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time play.

        Messages from server:
        - state_update: Game state changed
        - session_ended: Session was closed
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        - action: {"type": "action", ...ActionRequest fields}
        - advance: {"type": "advance", "elapsed_ms": 16}
        """
        await websocket.accept()

        state = api_service.get_game_state(session_id)
        if isinstance(state, ErrorResponse):
            await websocket.send_json({
                "type": "error",
                "payload": state.model_dump(mode="json"),
            })
            await websocket.close()
            return

        ws_connections.setdefault(session_id, []).append(websocket)

        try:
            await websocket.send_json({
                "type": "state_update",
                "payload": state.model_dump(mode="json"),
            })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if not isinstance(message, dict):
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Expected a JSON object"},
                    })
                    continue

                message_type = message.pop("type", None)
                if message_type == "ping":
                    await websocket.send_json({"type": "pong"})
                    continue

                try:
                    if message_type == "action":
                        response = api_service.apply_action(
                            session_id, ActionRequest.model_validate(message)
                        )
                    elif message_type == "advance":
                        response = api_service.advance(
                            session_id, AdvanceRequest.model_validate(message)
                        )
                    else:
                        await websocket.send_json({
                            "type": "error",
                            "payload": {"message": f"Unknown message type: {message_type}"},
                        })
                        continue
                except ValidationError as e:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": str(e)},
                    })
                    continue

                if isinstance(response, ErrorResponse):
                    await websocket.send_json({
                        "type": "error",
                        "payload": response.model_dump(mode="json"),
                    })
                else:
                    await broadcast_to_session(session_id, {
                        "type": "state_update",
                        "payload": response.model_dump(mode="json"),
                    })

        except WebSocketDisconnect:
            logger.debug("WebSocket closed for session %s", session_id)
        finally:
            if websocket in ws_connections.get(session_id, []):
                ws_connections[session_id].remove(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="gamehub",
            version=__version__,
            environment=settings["env"],
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Game Hub API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
            "games": len(api_service.catalog),
        }

    return app


# For running directly: uvicorn gamehub.api.app:app
app = create_app()
