"""
Pytest fixtures for Zoondo tests.
"""

import pytest

from ..engine_core.game import Game
from ..engine_core.state import Player
from ..engine_core.transport import InMemoryTransport
from .mocks import BLUE, RED, ROOM, FirstChoice, ManualScheduler, build_catalog


@pytest.fixture
def transport() -> InMemoryTransport:
    """Transport with both players connected."""
    transport = InMemoryTransport()
    transport.connect(ROOM, "p1")
    transport.connect(ROOM, "p2")
    return transport

@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()

@pytest.fixture
def catalog():
    return build_catalog()

@pytest.fixture
def make_game(transport, scheduler, catalog):
    """Factory for a game; joined by the second player unless join=False."""

    def factory(join=True, catalog=catalog, rng=None):
        game = Game(
            room_id=ROOM,
            first_player=Player("p1", "Ana", RED),
            catalog=catalog,
            transport=transport,
            scheduler=scheduler,
            rng=rng or FirstChoice(),
            combat_delay=5.0,
            turn_timer=30,
        )
        if join:
            game.join(Player("p2", "Bo", BLUE))
        return game

    return factory

@pytest.fixture
def waiting_game(make_game) -> Game:
    """Game created by p1, nobody joined yet."""
    return make_game(join=False)

@pytest.fixture
def game(make_game) -> Game:
    """Started game, p1 (red) is the active player."""
    return make_game()
