"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between game clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- GAME_NOT_FOUND: Room does not exist or has ended
- ROOM_EXISTS: Requested room id is already in use
- UNKNOWN_TRIBE: Tribe slug not in the catalog
- NOT_A_PARTICIPANT / NOT_YOUR_TURN / INVALID_PHASE: request rejected by the rules
- ILLEGAL_MOVE / INVALID_CORNER / INVALID_CHOICE: invalid move or answer
- GAME_FULL / ALREADY_JOINED / GAME_OVER: room cannot accept the request
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field

from ..engine_core.state import BOARD_SIZE


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Room status values."""
    WAITING = "waiting"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    ROOM_EXISTS = "ROOM_EXISTS"
    UNKNOWN_TRIBE = "UNKNOWN_TRIBE"
    NOT_A_PARTICIPANT = "NOT_A_PARTICIPANT"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_PHASE = "INVALID_PHASE"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    INVALID_CORNER = "INVALID_CORNER"
    INVALID_CHOICE = "INVALID_CHOICE"
    GAME_FULL = "GAME_FULL"
    ALREADY_JOINED = "ALREADY_JOINED"
    GAME_OVER = "GAME_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


CornerValue = Union[int, str]


# =============================================================================
# Shared Models
# =============================================================================

class Position(BaseModel):
    """A board coordinate."""
    x: int = Field(..., ge=0, lt=BOARD_SIZE)
    y: int = Field(..., ge=0, lt=BOARD_SIZE)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


class PlayerInfo(BaseModel):
    """Player information for display."""
    id: str
    name: str
    tribe: str
    is_first_player: bool = False


class CardView(BaseModel):
    """A card as seen by one player. Opponent cards carry the tribe only."""
    tribe: str
    type: Optional[str] = None
    slug: Optional[str] = None


class CellView(BaseModel):
    player: str
    x: int
    y: int
    card: CardView


class CombatSideView(BaseModel):
    role: str
    player: str
    x: int
    y: int
    card: CardView
    move: list[list[int]] = Field(default_factory=list)
    corner_index: Optional[int] = None
    value: Optional[CornerValue] = None


class CombatView(BaseModel):
    step: str
    winner: Optional[str] = None
    power_owner: Optional[str] = None
    attacker: CombatSideView
    defender: CombatSideView


class ActionOptionsView(BaseModel):
    player: Optional[PlayerInfo] = None
    prompt: str = ""
    targets: list[list[int]] = Field(default_factory=list)


class ActionView(BaseModel):
    """A pending prompt (without its server-side continuation)."""
    type: str
    options: ActionOptionsView


class TurnView(BaseModel):
    count: int
    active_player: Optional[PlayerInfo] = None
    phase: str
    timer: int
    combat: Optional[CombatView] = None
    action: Optional[ActionView] = None
    winner: Optional[PlayerInfo] = None


class StatePayload(BaseModel):
    """Game state as seen by one player."""
    room: str
    turn: TurnView
    player: Optional[PlayerInfo] = None
    opponent: Optional[PlayerInfo] = None
    board: list[CellView] = Field(default_factory=list)


class CardInfo(BaseModel):
    """Catalog card information."""
    slug: str
    name: str
    type: str
    corners: list[CornerValue]
    power: Optional[str] = None
    has_resolver: bool = False


class TribeInfo(BaseModel):
    slug: str
    name: str
    cards: list[CardInfo] = Field(default_factory=list)


class DestinationInfo(BaseModel):
    x: int
    y: int
    is_combat: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """
    Request to create a new game room.

    POST /api/v1/games
    """
    player_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    tribe: str
    room_id: Optional[str] = Field(None, description="Room id (generated when omitted)")


class JoinGameRequest(BaseModel):
    """POST /api/v1/games/{room_id}/join"""
    player_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    tribe: str


class LeaveGameRequest(BaseModel):
    """POST /api/v1/games/{room_id}/leave"""
    player_id: str


class MoveRequest(BaseModel):
    """POST /api/v1/games/{room_id}/move"""
    player_id: str
    source: Position
    destination: Position


class CornerRequest(BaseModel):
    """POST /api/v1/games/{room_id}/corner"""
    player_id: str
    corner_index: int = Field(..., ge=0, le=3)


class ResolveActionRequest(BaseModel):
    """POST /api/v1/games/{room_id}/action"""
    player_id: str
    target: Position


# =============================================================================
# Response Models
# =============================================================================

class GameResponse(BaseModel):
    """Room status."""
    room_id: str
    status: SessionStatus
    players: list[PlayerInfo] = Field(default_factory=list)
    turn_count: int = 0
    phase: str
    created_at: float
    api_version: str = "v1"


class OperationResponse(BaseModel):
    """Result of an accepted player operation, with the caller's new view."""
    success: bool = True
    room_id: str
    changes: list[str] = Field(default_factory=list)
    state: Optional[StatePayload] = None
    api_version: str = "v1"


class LegalMovesResponse(BaseModel):
    room_id: str
    source: Position
    destinations: list[DestinationInfo] = Field(default_factory=list)


class GameListResponse(BaseModel):
    """Response listing playable rooms."""
    games: list[str]
    count: int


class TribeListResponse(BaseModel):
    tribes: list[TribeInfo]


class EndGameResponse(BaseModel):
    """Response after ending a room."""
    success: bool
    room_id: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None
    api_version: str = "v1"


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
