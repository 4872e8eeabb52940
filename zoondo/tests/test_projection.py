"""
Tests for per-player state projection (fog of war).
"""

import json

from ..engine_core.action import Action
from .mocks import ROOM, build_catalog, clear_board, put


def opponent_slugs_leak(payload, opponent_tribe):
    """True if any card slug of the opponent tribe appears in the payload."""
    return f'"{opponent_tribe}-' in json.dumps(payload)


class TestBoardView:
    """Opponent cards show their tribe only."""

    def test_own_and_opponent_cells(self, game):
        view = game.view("p1")

        own = [c for c in view["board"] if c["player"] == "p1"]
        theirs = [c for c in view["board"] if c["player"] == "p2"]
        assert len(own) == 6 and len(theirs) == 6
        assert all(set(c["card"]) == {"tribe", "type", "slug"} for c in own)
        assert all(c["card"] == {"tribe": "blue"} for c in theirs)

    def test_no_leak_in_main_phase(self, game):
        assert not opponent_slugs_leak(game.view("p1"), "blue")
        assert not opponent_slugs_leak(game.view("p2"), "red")

    def test_players_and_turn(self, game):
        view = game.view("p2")

        assert view["room"] == ROOM
        assert view["player"]["id"] == "p2"
        assert view["opponent"]["id"] == "p1"
        assert view["turn"]["active_player"]["name"] == "Ana"
        assert view["turn"]["phase"] == "main"
        assert view["turn"]["timer"] == 30
        assert view["turn"]["combat"] is None
        assert view["turn"]["action"] is None
        assert view["turn"]["winner"] is None


class TestCombatView:
    """Combat cards stay hidden until resolution."""

    def setup_combat(self, game):
        clear_board(game)
        put(game, "p1", "scout", 1, 1)
        put(game, "p2", "brute", 1, 2)
        game.move("p1", (1, 1), (1, 2))

    def test_choice_step_hides_opposing_side(self, game):
        self.setup_combat(game)
        game.choose_corner("p2", 0)

        combat = game.view("p2")["turn"]["combat"]

        assert combat["step"] == "choice"
        assert combat["attacker"]["card"] == {"tribe": "red"}
        assert combat["attacker"]["value"] is None
        assert combat["attacker"]["corner_index"] is None
        assert combat["defender"]["card"]["slug"] == "blue-brute"
        assert not opponent_slugs_leak(game.view("p2"), "red")
        assert not opponent_slugs_leak(game.view("p1"), "blue")

    def test_resolve_step_reveals_both_sides(self, game):
        self.setup_combat(game)
        game.choose_corner("p1", 0)
        game.choose_corner("p2", 0)

        combat = game.view("p1")["turn"]["combat"]

        assert combat["step"] == "resolve"
        assert combat["winner"] == "defender"
        assert combat["defender"]["card"]["slug"] == "blue-brute"
        assert combat["defender"]["value"] == 5
        assert combat["attacker"]["value"] == 3
        assert combat["attacker"]["move"] == [[1, 2]]


class TestActionView:
    """Pending prompts are sent without their continuation."""

    def test_prompt_is_stripped(self, make_game, scheduler):
        def trick(game, action, done):
            game.push(Action.select_card(
                action.source.player, [(0, 0)], resume=lambda *args: None, prompt="Pick",
            ))
            done()

        game = make_game(catalog=build_catalog(trick=trick))
        clear_board(game)
        put(game, "p1", "trickster", 1, 1)
        put(game, "p2", "brute", 1, 2)
        game.move("p1", (1, 1), (1, 2))
        game.choose_corner("p1", 0)
        game.choose_corner("p2", 0)
        scheduler.run_all()

        action = game.view("p2")["turn"]["action"]

        assert action == {
            "type": "select_card",
            "options": {
                "player": {"id": "p1", "name": "Ana", "tribe": "red", "is_first_player": True},
                "prompt": "Pick",
                "targets": [[0, 0]],
            },
        }
        json.dumps(game.view("p1"))


class TestBroadcast:
    """Each connected player receives their own view."""

    def test_views_are_per_player(self, game, transport):
        p1_state = transport.last_state(ROOM, "p1")
        p2_state = transport.last_state(ROOM, "p2")

        assert p1_state["player"]["id"] == "p1"
        assert p2_state["player"]["id"] == "p2"
        assert not opponent_slugs_leak(p1_state, "blue")

    def test_disconnected_player_is_skipped(self, game, transport):
        transport.disconnect(ROOM, "p2")
        before = len(transport.states[(ROOM, "p2")])

        game.move("p1", (1, 2), (1, 3))

        assert len(transport.states[(ROOM, "p2")]) == before
        assert transport.last_state(ROOM, "p1")["turn"]["count"] == 2

    def test_waiting_game_has_no_opponent(self, waiting_game):
        view = waiting_game.view("p1")

        assert view["opponent"] is None
        assert view["turn"]["phase"] == "waiting"
        assert len(view["board"]) == 6
