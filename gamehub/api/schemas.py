"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front-end and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- GAME_NOT_FOUND: No catalog record with that id
- INVALID_GAME: Unknown game type, variant or options
- INVALID_ACTION: Malformed action, or not allowed in the current phase
- UNSUPPORTED_ACTION: The game does not accept this action type
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..catalog.models import GameRecord


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values, following the game phase."""
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    WON = "won"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    INVALID_GAME = "INVALID_GAME"
    INVALID_ACTION = "INVALID_ACTION"
    UNSUPPORTED_ACTION = "UNSUPPORTED_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"


ERROR_STATUS_CODES = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.GAME_NOT_FOUND: 404,
    ErrorCode.INVALID_GAME: 400,
    ErrorCode.INVALID_ACTION: 400,
    ErrorCode.UNSUPPORTED_ACTION: 400,
    ErrorCode.VALIDATION_ERROR: 422,
}


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    game_type: Optional[str] = Field(None, description="Registered game type, e.g. tetris")
    game_id: Optional[int] = Field(None, description="Start the game behind a catalog record")
    variant: Optional[str] = Field(None, description="Game variant; defaults to the first one")
    options: dict[str, Any] = Field(
        default_factory=dict, description="Game options: grid_size, speed, players, ..."
    )
    seed: Optional[int] = Field(None, description="Seed for reproducible games")


class ActionRequest(BaseModel):
    """
    An action to apply to a session.

    Either action_type (with its parameters) or a raw key name.
    """
    action_type: Optional[str] = Field(
        None, description="move, rotate, drop, select, place, start, pause, reset, ..."
    )
    key: Optional[str] = Field(None, description="Keyboard key, e.g. ArrowLeft or p")
    direction: Optional[str] = Field(None, description="up, down, left, right")
    dx: int = 0
    dy: int = 0
    row: Optional[int] = None
    col: Optional[int] = None
    piece_id: Optional[int] = None
    value: Optional[int] = Field(None, description="New value for set_speed")
    elapsed_ms: int = Field(0, ge=0)


class AdvanceRequest(BaseModel):
    """Advance a session clock."""
    elapsed_ms: int = Field(..., ge=0, description="Wall-clock time since the last advance")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameListResponse(BaseModel):
    """Catalog records matching a search."""
    games: list[GameRecord]
    count: int


class CategoriesResponse(BaseModel):
    categories: list[str]


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    game_type: str
    variant: str
    status: SessionStatus
    score: int = 0
    moves: int = 0
    options: dict[str, Any] = Field(default_factory=dict)
    seed: Optional[int] = None
    high_score: Optional[int] = None
    tick_interval_ms: Optional[int] = None
    created_at: float = 0.0
    api_version: str = "v1"


class TurnResponse(BaseModel):
    """Result of an action or a clock advance."""
    session_id: str
    success: bool
    rejected: bool = False
    ticks_applied: int = 0
    status: SessionStatus
    finished: bool = False
    score: int = 0
    events: list[str] = Field(default_factory=list)
    new_high_score: bool = False
    high_score: Optional[int] = None
    state: dict[str, Any] = Field(default_factory=dict)
    api_version: str = "v1"


class GameStateResponse(BaseModel):
    """Complete game state snapshot."""
    session_id: str
    game_type: str
    variant: str
    status: SessionStatus
    state: dict[str, Any]
    api_version: str = "v1"


class RenderResponse(BaseModel):
    """Text drawing of the current state."""
    session_id: str
    text: str


class HighScoresResponse(BaseModel):
    scores: dict[str, int]


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
