"""
API Module - HTTP interface to the game engine.

Exposes the engine via a REST API. A front-end:
1. Browses the catalog
2. Creates game sessions
3. Sends player actions and clock advances
4. Receives state updates (JSON or WebSocket)

All game state is session-scoped. The only persisted data is high scores.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    ActionRequest,
    AdvanceRequest,
    # Responses
    ErrorResponse,
    GameListResponse,
    SessionResponse,
    TurnResponse,
    GameStateResponse,
    RenderResponse,
    HighScoresResponse,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService, build_action
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "ActionRequest",
    "AdvanceRequest",
    # Responses
    "ErrorResponse",
    "GameListResponse",
    "SessionResponse",
    "TurnResponse",
    "GameStateResponse",
    "RenderResponse",
    "HighScoresResponse",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "build_action",
    "create_app",
]
