"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to Game operations
2. Manages rooms through the SessionManager
3. Formats engine results and projections as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import random

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
    TribeListResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    Position,
    StatePayload,
    DestinationInfo,
    TribeInfo,
    CardInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core.action import ActionResult
from ..engine_core.catalog import CardCatalog
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import Player
from ..engine_core.transport import InMemoryTransport, Transport
from ..games.classic import create_classic_catalog
from ..session import SessionManager, Session


logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for game clients.

    Usage:
        service = APIService()

        # Create a room
        game = service.create_game(CreateGameRequest(player_id="p1", name="Ana", tribe="ashen"))

        # Second player joins, first turn starts
        service.join_game(game.room_id, JoinGameRequest(player_id="p2", name="Bo", tribe="tidal"))
    """
    catalog: CardCatalog = field(default_factory=create_classic_catalog)
    transport: Transport = field(default_factory=InMemoryTransport)
    scheduler_factory: Callable[[], Scheduler] | None = None
    rng: random.Random | None = None
    combat_delay: float | None = None
    session_manager: SessionManager = field(init=False)

    def __post_init__(self):
        self.session_manager = SessionManager(
            catalog=self.catalog,
            transport=self.transport,
            scheduler_factory=self.scheduler_factory,
            rng=self.rng,
            combat_delay=self.combat_delay,
        )

    # =========================================================================
    # Rooms
    # =========================================================================

    def create_game(self, request: CreateGameRequest) -> GameResponse | ErrorResponse:
        """Create a room with its first player."""
        if not self.catalog.has_tribe(request.tribe):
            return ErrorResponse(
                error=f"Unknown tribe: {request.tribe}",
                error_code=ErrorCode.UNKNOWN_TRIBE,
            )
        if request.room_id and self.session_manager.get_session(request.room_id):
            return ErrorResponse(
                error=f"Room {request.room_id} already exists",
                error_code=ErrorCode.ROOM_EXISTS,
            )

        session = self.session_manager.create_session(
            Player(player_id=request.player_id, name=request.name, tribe=request.tribe),
            room_id=request.room_id,
        )
        return self._session_to_response(session)

    def get_game(self, room_id: str) -> GameResponse | ErrorResponse:
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        return self._session_to_response(session)

    def end_game(self, room_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(room_id, reason)

    def list_games(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def list_tribes(self) -> TribeListResponse:
        return TribeListResponse(tribes=[
            TribeInfo(
                slug=tribe.slug,
                name=tribe.name,
                cards=[
                    CardInfo(
                        slug=card.slug,
                        name=card.name,
                        type=card.type,
                        corners=list(card.corners),
                        power=card.power,
                        has_resolver=self.catalog.resolve_card(card.ref).resolver is not None,
                    )
                    for card in tribe.cards
                ],
            )
            for tribe in self.catalog.list_tribes()
        ])

    # =========================================================================
    # Player operations
    # =========================================================================

    def join_game(self, room_id: str, request: JoinGameRequest) -> OperationResponse | ErrorResponse:
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        result = session.game.join(
            Player(player_id=request.player_id, name=request.name, tribe=request.tribe)
        )
        return self._operation(session, request.player_id, result)

    def leave_game(self, room_id: str, request: LeaveGameRequest) -> OperationResponse | ErrorResponse:
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        result = self.session_manager.leave_session(room_id, request.player_id)
        if not result.success:
            return self._error(result)
        return OperationResponse(room_id=room_id, changes=result.state_changes)

    def move(self, room_id: str, request: MoveRequest) -> OperationResponse | ErrorResponse:
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        result = session.game.move(
            request.player_id,
            request.source.as_tuple(),
            request.destination.as_tuple(),
        )
        return self._operation(session, request.player_id, result)

    def choose_corner(self, room_id: str, request: CornerRequest) -> OperationResponse | ErrorResponse:
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        result = session.game.choose_corner(request.player_id, request.corner_index)
        return self._operation(session, request.player_id, result)

    def resolve_action(self, room_id: str, request: ResolveActionRequest) -> OperationResponse | ErrorResponse:
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        result = session.game.resolve_action(request.player_id, request.target.as_tuple())
        return self._operation(session, request.player_id, result)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_state(self, room_id: str, player_id: str) -> StatePayload | ErrorResponse:
        """The projected state for one participant."""
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        if not session.has_player(player_id):
            return ErrorResponse(
                error="Not a participant",
                error_code=ErrorCode.NOT_A_PARTICIPANT,
            )
        return StatePayload.model_validate(session.game.view(player_id))

    def legal_moves(
        self,
        room_id: str,
        player_id: str,
        x: int,
        y: int,
    ) -> LegalMovesResponse | ErrorResponse:
        session = self.session_manager.get_session(room_id)
        if not session:
            return self._not_found(room_id)
        destinations = session.game.legal_moves(player_id, (x, y))
        return LegalMovesResponse(
            room_id=room_id,
            source=Position(x=x, y=y),
            destinations=[
                DestinationInfo(x=d.x, y=d.y, is_combat=d.is_combat)
                for d in destinations
            ],
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _operation(
        self,
        session: Session,
        player_id: str,
        result: ActionResult,
    ) -> OperationResponse | ErrorResponse:
        if not result.success:
            return self._error(result)
        return OperationResponse(
            room_id=session.room_id,
            changes=result.state_changes,
            state=StatePayload.model_validate(session.game.view(player_id)),
        )

    def _error(self, result: ActionResult) -> ErrorResponse:
        return ErrorResponse(
            error=result.error or "Request rejected",
            error_code=ErrorCode(result.error_code.value) if result.error_code else ErrorCode.VALIDATION_ERROR,
        )

    def _not_found(self, room_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Game {room_id} not found",
            error_code=ErrorCode.GAME_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> GameResponse:
        """Convert Session to GameResponse."""
        state = session.game.state
        return GameResponse(
            room_id=session.room_id,
            status=SessionStatus(session.state.value),
            players=[PlayerInfo(**player.to_dict()) for player in state.players.values()],
            turn_count=state.turn.count,
            phase=state.turn.phase.value,
            created_at=session.created_at,
        )
