"""
API Module - Client interface.

Exposes the engine via REST and WebSocket for game clients.
A client:
1. Creates or joins a game room
2. Opens a websocket to receive states and narration
3. Sends moves, corner choices and prompt answers
4. Queries its own filtered view of the game

All state is room-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    JoinGameRequest,
    LeaveGameRequest,
    MoveRequest,
    CornerRequest,
    ResolveActionRequest,
    # Responses
    GameResponse,
    OperationResponse,
    LegalMovesResponse,
    ErrorResponse,
    StatePayload,
    # Shared
    PlayerInfo,
    Position,
    ErrorCode,
)
from .hub import ConnectionHub
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "JoinGameRequest",
    "LeaveGameRequest",
    "MoveRequest",
    "CornerRequest",
    "ResolveActionRequest",
    # Responses
    "GameResponse",
    "OperationResponse",
    "LegalMovesResponse",
    "ErrorResponse",
    "StatePayload",
    # Shared
    "PlayerInfo",
    "Position",
    "ErrorCode",
    # Service
    "ConnectionHub",
    "APIService",
    "create_app",
]
