"""
Session Manager - Creates and manages game rooms.

LIFECYCLE:
1. A player creates a game → room created, board half deployed
2. A second player joins → first turn starts
3. During the game, inbound operations are routed to the room's Game
4. Game ends (emblem eliminated) or every player leaves → session ends,
   timers released

PERSISTENCE RULES:
- NO database
- Game state lives in memory for the lifetime of the match only
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import logging
import random
import time
import uuid

from .. import config
from ..engine_core.catalog import CardCatalog
from ..engine_core.game import Game
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import Player, TurnPhase
from ..engine_core.transport import Transport


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    WAITING = "waiting"  # Waiting for a second player
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # A winner is recorded
    ABANDONED = "abandoned"  # Ended before a winner


@dataclass
class Session:
    """
    A game room.

    The session is destroyed when the game ends or is abandoned.
    State is NOT persisted.
    """
    room_id: str
    game: Game
    created_at: float
    ended: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def state(self) -> SessionState:
        if self.game.is_over:
            return SessionState.GAME_OVER
        if self.ended:
            return SessionState.ABANDONED
        if self.game.state.turn.phase == TurnPhase.WAITING:
            return SessionState.WAITING
        return SessionState.ACTIVE

    def is_active(self) -> bool:
        """Check if session is still playable."""
        return self.state in {SessionState.WAITING, SessionState.ACTIVE}

    def has_player(self, player_id: str) -> bool:
        return player_id in self.game.state.players


class SessionManager:
    """
    Manages game rooms.

    Responsibilities:
    - Create rooms around a new Game
    - Track rooms in memory
    - Tear down finished or abandoned rooms

    No persistence - rooms are in-memory only.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        transport: Transport,
        scheduler_factory: Callable[[], Scheduler] | None = None,
        rng: random.Random | None = None,
        combat_delay: float | None = None,
    ):
        self.catalog = catalog
        self.transport = transport
        self.scheduler_factory = scheduler_factory
        self.rng = rng
        self.combat_delay = combat_delay
        self._sessions: dict[str, Session] = {}

    def create_session(self, first_player: Player, room_id: str | None = None) -> Session:
        """
        Create a new game room.

        Raises:
            KeyError: unknown tribe
            ValueError: room id already in use
        """
        self.catalog.tribe(first_player.tribe)

        room_id = room_id or str(uuid.uuid4())
        if room_id in self._sessions:
            raise ValueError(f"Room {room_id} already exists")

        game = Game(
            room_id=room_id,
            first_player=first_player,
            catalog=self.catalog,
            transport=self.transport,
            scheduler=self.scheduler_factory() if self.scheduler_factory else None,
            rng=self.rng,
            combat_delay=self.combat_delay,
        )
        session = Session(room_id=room_id, game=game, created_at=time.time())
        self._sessions[room_id] = session
        logger.info("Session %s created", room_id)
        return session

    def get_session(self, room_id: str) -> Session | None:
        """Get a session by room ID."""
        return self._sessions.get(room_id)

    def leave_session(self, room_id: str, player_id: str):
        """Remove a player; the room ends once every player has left."""
        session = self._sessions.get(room_id)
        if session is None:
            return None
        result = session.game.leave(player_id)
        if result.success and session.game.left >= set(session.game.state.players):
            self.end_session(room_id, reason="abandoned")
        return result

    def end_session(self, room_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        Timers are cancelled and the room is removed from memory.
        """
        session = self._sessions.pop(room_id, None)
        if session is None:
            return False
        session.ended = True
        session.game.teardown()
        logger.info("Session %s ended (%s)", room_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of playable rooms."""
        return [
            room_id for room_id, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> list[str]:
        """
        Remove finished sessions older than max_age.

        Called periodically to free memory.
        """
        max_age = config.SESSION_MAX_AGE if max_age_seconds is None else max_age_seconds
        current_time = time.time()
        to_remove = [
            room_id for room_id, session in self._sessions.items()
            if current_time - session.created_at > max_age and not session.is_active()
        ]
        for room_id in to_remove:
            self.end_session(room_id, reason="stale")
        return to_remove
