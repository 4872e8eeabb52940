"""
FastAPI Application - REST and WebSocket API for game clients.

Endpoints:
    POST   /api/v1/games                         Create a room
    GET    /api/v1/games                         List playable rooms
    GET    /api/v1/games/{room_id}               Get room status
    DELETE /api/v1/games/{room_id}               End a room
    POST   /api/v1/games/{room_id}/join          Join as second player
    POST   /api/v1/games/{room_id}/leave         Leave the room
    POST   /api/v1/games/{room_id}/move          Move a card
    POST   /api/v1/games/{room_id}/corner        Choose a combat corner
    POST   /api/v1/games/{room_id}/action        Answer a pending prompt
    GET    /api/v1/games/{room_id}/state         Get the caller's view
    GET    /api/v1/games/{room_id}/moves         Legal moves of one card
    GET    /api/v1/tribes                        List playable tribes
    WS     /api/v1/games/{room_id}/ws/{player_id}  Real-time states and messages

Game Flow:
    1. A player creates a room and opens the websocket
    2. A second player joins; the first active player is drawn
    3. Players send moves; contested moves start a combat
    4. Both players choose a corner of the opposing card
    5. States and narration are pushed on the websocket after every change

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import asyncio
import json
import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__, config
from ..engine_core.scheduler import AsyncioScheduler
from .hub import ConnectionHub
from .service import APIService
from .schemas import (
    # Request models
    CreateGameRequest,
    JoinGameRequest,
    LeaveGameRequest,
    MoveRequest,
    CornerRequest,
    ResolveActionRequest,
    # Response models
    GameResponse,
    OperationResponse,
    LegalMovesResponse,
    GameListResponse,
    TribeListResponse,
    EndGameResponse,
    StatePayload,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)


logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Zoondo Engine API",
        description="""
Two-player card battle on a 6x6 board.

## Combat Flow

A move onto an opposing card starts a combat:

1. Both players choose a corner (0-3) of the **opposing** card
2. Values are compared once both corners are chosen
3. A `*` value triggers the card's power
4. The game pauses before the next turn so clients can show the result

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Room does not exist |
| `NOT_YOUR_TURN` | Request from the inactive player |
| `INVALID_PHASE` | Request not allowed in the current phase |
| `ILLEGAL_MOVE` | Destination not reachable |
| `INVALID_CORNER` | Corner out of range or already chosen |
| `INVALID_CHOICE` | Prompt answer not among the offered targets |
| `GAME_OVER` | The game has a winner |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # CORS for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService(
        transport=ConnectionHub(),
        scheduler_factory=AsyncioScheduler,
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def from_error(response: ErrorResponse) -> JSONResponse:
        status_code = 404 if response.error_code == ErrorCode.GAME_NOT_FOUND else 400
        return make_error_response(
            response.error_code,
            response.error,
            status_code=status_code,
            details=response.details,
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    # =========================================================================
    # Room Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameResponse,
        responses={400: {"model": ErrorResponse, "description": "Unknown tribe or room id in use"}},
        tags=["Games"],
        summary="Create a new game room",
    )
    async def create_game(body: CreateGameRequest) -> Union[GameResponse, JSONResponse]:
        """
        Create a room and deploy the creator's tribe.

        The room waits for a second player before the first turn starts.
        """
        return respond(api_service.create_game(body))

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List playable rooms",
    )
    async def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{room_id}",
        response_model=GameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get room status",
    )
    async def get_game(room_id: str) -> Union[GameResponse, JSONResponse]:
        return respond(api_service.get_game(room_id))

    @app.delete(
        "/api/v1/games/{room_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game room",
    )
    async def end_game(
        room_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndGameResponse:
        """End a room and release its timers."""
        success = api_service.end_game(room_id, reason)
        return EndGameResponse(success=success, room_id=room_id)

    @app.get(
        "/api/v1/tribes",
        response_model=TribeListResponse,
        tags=["Games"],
        summary="List playable tribes",
    )
    async def list_tribes() -> TribeListResponse:
        return api_service.list_tribes()

    # =========================================================================
    # Player Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{room_id}/join",
        response_model=OperationResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Join a room as second player",
    )
    async def join_game(room_id: str, body: JoinGameRequest) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.join_game(room_id, body))

    @app.post(
        "/api/v1/games/{room_id}/leave",
        response_model=OperationResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Leave a room",
    )
    async def leave_game(room_id: str, body: LeaveGameRequest) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.leave_game(room_id, body))

    @app.post(
        "/api/v1/games/{room_id}/move",
        response_model=OperationResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Move a card",
    )
    async def move(room_id: str, body: MoveRequest) -> Union[OperationResponse, JSONResponse]:
        """
        Move one of your cards during your main phase.

        **Request Body:**
        ```json
        {"player_id": "p1", "source": {"x": 1, "y": 2}, "destination": {"x": 1, "y": 3}}
        ```
        """
        return respond(api_service.move(room_id, body))

    @app.post(
        "/api/v1/games/{room_id}/corner",
        response_model=OperationResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Choose a corner of the opposing card",
    )
    async def choose_corner(room_id: str, body: CornerRequest) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.choose_corner(room_id, body))

    @app.post(
        "/api/v1/games/{room_id}/action",
        response_model=OperationResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Answer the pending prompt",
    )
    async def resolve_action(room_id: str, body: ResolveActionRequest) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.resolve_action(room_id, body))

    # =========================================================================
    # State Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/games/{room_id}/state",
        response_model=StatePayload,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get the game state as seen by one player",
    )
    async def get_state(
        room_id: str,
        player_id: Annotated[str, Query(description="Requesting player")],
    ) -> Union[StatePayload, JSONResponse]:
        """Opponent cards are reduced to their tribe."""
        return respond(api_service.get_state(room_id, player_id))

    @app.get(
        "/api/v1/games/{room_id}/moves",
        response_model=LegalMovesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Legal destinations of one card",
    )
    async def legal_moves(
        room_id: str,
        player_id: Annotated[str, Query()],
        x: Annotated[int, Query(ge=0, lt=6)],
        y: Annotated[int, Query(ge=0, lt=6)],
    ) -> Union[LegalMovesResponse, JSONResponse]:
        return respond(api_service.legal_moves(room_id, player_id, x, y))

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/games/{room_id}/ws/{player_id}")
    async def websocket_endpoint(websocket: WebSocket, room_id: str, player_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state: Projected game state for this player
        - message: System narration (markdown)
        - error: Error occurred
        - pong: Keep-alive answer

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        hub = api_service.transport
        if not isinstance(hub, ConnectionHub):
            logger.error("WebSocket requested but the service transport is %s", type(hub).__name__)
            await websocket.close(code=1011)
            return

        initial = api_service.get_state(room_id, player_id)
        if isinstance(initial, ErrorResponse):
            await websocket.send_json({"type": "error", "payload": initial.model_dump()})
            await websocket.close(code=1008)
            return

        queue = hub.connect(room_id, player_id)
        await websocket.send_json({"type": "state", "payload": initial.model_dump()})

        async def pump():
            while True:
                frame = await queue.get()
                await websocket.send_json(frame)

        pump_task = asyncio.create_task(pump())
        try:
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
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
        except WebSocketDisconnect:
            logger.debug("WebSocket closed for %s in %s", player_id, room_id)
        finally:
            pump_task.cancel()
            hub.disconnect(room_id, player_id, queue)

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
            service="zoondo-engine",
            version=__version__,
            environment=config.ZOONDO_ENV,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Zoondo Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn zoondo.api.app:app
app = create_app()
