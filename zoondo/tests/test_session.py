"""
Tests for session management.

Tests:
- Room creation and lookup
- Leaving and teardown
- Stale session cleanup
"""

import time

import pytest

from ..engine_core.action import Action
from ..engine_core.state import Player
from ..engine_core.transport import InMemoryTransport
from ..session import SessionManager, SessionState
from .mocks import BLUE, RED, FirstChoice, ManualScheduler, build_catalog


@pytest.fixture
def manager():
    return SessionManager(
        catalog=build_catalog(),
        transport=InMemoryTransport(),
        scheduler_factory=ManualScheduler,
        rng=FirstChoice(),
    )


@pytest.fixture
def active_session(manager):
    session = manager.create_session(Player("p1", "Ana", RED), room_id="r1")
    session.game.join(Player("p2", "Bo", BLUE))
    return session


class TestSessionLifecycle:
    """Tests for SessionManager."""

    def test_create_session(self, manager):
        session = manager.create_session(Player("p1", "Ana", RED))

        assert session.room_id
        assert session.state == SessionState.WAITING
        assert session.is_active()
        assert session.has_player("p1")
        assert manager.get_session(session.room_id) is session

    def test_each_game_gets_its_own_scheduler(self, manager):
        a = manager.create_session(Player("p1", "Ana", RED))
        b = manager.create_session(Player("p1", "Ana", RED))

        assert a.game.scheduler is not b.game.scheduler

    def test_unknown_tribe(self, manager):
        with pytest.raises(KeyError):
            manager.create_session(Player("p1", "Ana", "green"))

    def test_duplicate_room(self, manager):
        manager.create_session(Player("p1", "Ana", RED), room_id="r1")

        with pytest.raises(ValueError):
            manager.create_session(Player("p1", "Ana", RED), room_id="r1")

    def test_active_after_join(self, active_session):
        assert active_session.state == SessionState.ACTIVE

    def test_game_over_state(self, active_session):
        active_session.game.push(Action.win("p1"))
        active_session.game.stack.resolve()

        assert active_session.state == SessionState.GAME_OVER
        assert not active_session.is_active()

    def test_end_session(self, manager, active_session):
        assert manager.end_session("r1")

        assert manager.get_session("r1") is None
        assert active_session.ended
        assert active_session.state == SessionState.ABANDONED

    def test_end_unknown_session(self, manager):
        assert not manager.end_session("nope")

    def test_leave_ends_room_when_everyone_left(self, manager, active_session):
        first = manager.leave_session("r1", "p1")

        assert first.success
        assert manager.get_session("r1") is active_session

        manager.leave_session("r1", "p2")

        assert manager.get_session("r1") is None
        assert active_session.state == SessionState.ABANDONED

    def test_leave_unknown_room(self, manager):
        assert manager.leave_session("nope", "p1") is None

    def test_list_active_sessions(self, manager, active_session):
        finished = manager.create_session(Player("p3", "Cy", RED), room_id="r2")
        finished.game.push(Action.win("p3"))
        finished.game.stack.resolve()

        assert manager.list_active_sessions() == ["r1"]

    def test_cleanup_stale_sessions(self, manager, active_session):
        finished = manager.create_session(Player("p3", "Cy", RED), room_id="r2")
        finished.game.push(Action.win("p3"))
        finished.game.stack.resolve()
        finished.created_at = time.time() - 7200
        active_session.created_at = time.time() - 7200

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == ["r2"]
        assert manager.get_session("r1") is active_session
