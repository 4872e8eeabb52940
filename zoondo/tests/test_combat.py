"""
Tests for combat resolution.

Tests:
- Corner choice rules
- Outcome priority (draw, powers, attacker, defender)
- Retreat on draw
- Paced drain after resolution
- Emblem loss ends the game
"""

import pytest

from ..engine_core.action import ActionType, ErrorCode
from ..engine_core.state import CombatStep, TurnPhase
from .mocks import ROOM, build_catalog, clear_board, put


def fight(game, source, destination):
    """Start a combat and let both players pick corner 0."""
    assert game.move("p1", source, destination).success
    assert game.choose_corner("p1", 0).success
    assert game.choose_corner("p2", 0).success
    return game.state.turn.combat


class TestCornerChoice:
    """Tests for the choice step."""

    @pytest.fixture
    def combat_game(self, game):
        clear_board(game)
        put(game, "p1", "scout", 1, 1)
        put(game, "p2", "brute", 1, 2)
        game.move("p1", (1, 1), (1, 2))
        return game

    def test_move_onto_opponent_starts_combat(self, combat_game, transport):
        combat = combat_game.state.turn.combat

        assert combat_game.state.turn.phase == TurnPhase.COMBAT
        assert combat.step == CombatStep.CHOICE
        assert combat.attacker.player == "p1"
        assert combat.defender.player == "p2"
        assert combat.attacker.move == [(1, 2)]
        assert "**Combat** - a combat begins." in transport.messages_for(ROOM, "p2")

    def test_choice_sets_opposing_side(self, combat_game, transport):
        result = combat_game.choose_corner("p1", 2)
        combat = combat_game.state.turn.combat

        assert result.success
        assert combat.defender.corner_index == 0  # first of the (0, 2) pair
        assert combat.defender.value == 5
        assert combat.attacker.value is None
        assert combat.step == CombatStep.CHOICE
        assert "**Combat** - corner chosen, waiting for your opponent." in transport.messages_for(ROOM, "p1")

    def test_corner_out_of_range(self, combat_game):
        result = combat_game.choose_corner("p1", 4)

        assert result.error_code == ErrorCode.INVALID_CORNER
        assert combat_game.state.turn.combat.defender.value is None

    def test_corner_chosen_twice(self, combat_game):
        combat_game.choose_corner("p1", 0)

        result = combat_game.choose_corner("p1", 1)

        assert result.error_code == ErrorCode.INVALID_CORNER
        assert combat_game.state.turn.combat.defender.corner_index == 0

    def test_corner_outside_combat(self, game):
        result = game.choose_corner("p1", 0)

        assert result.error_code == ErrorCode.INVALID_PHASE

    def test_corner_from_stranger(self, combat_game):
        result = combat_game.choose_corner("p3", 0)

        assert result.error_code == ErrorCode.NOT_A_PARTICIPANT

    def test_no_move_during_combat(self, combat_game):
        result = combat_game.move("p1", (1, 1), (0, 1))

        assert result.error_code == ErrorCode.INVALID_PHASE

    def test_either_player_may_choose_first(self, combat_game):
        combat_game.choose_corner("p2", 1)
        combat = combat_game.state.turn.combat

        assert combat.attacker.corner_index == 1
        assert combat.attacker.value == 3
        assert combat.defender.value is None


class TestOutcomes:
    """Tests for CombatResolver.resolve."""

    def test_defender_wins(self, game, scheduler):
        """Attacker 3 against defender 5."""
        clear_board(game)
        put(game, "p1", "scout", 1, 1)
        defender = put(game, "p2", "brute", 1, 2)

        combat = fight(game, (1, 1), (1, 2))

        assert combat.winner == "defender"
        assert game.state.cell_at(1, 1) is None
        assert game.state.cell_at(1, 2) is defender
        assert len(game.state.graveyard) == 1
        assert game.state.graveyard[0].cell.player == "p1"
        assert game.state.graveyard[0].context == "combat"
        assert game.state.turn.phase == TurnPhase.COMBAT
        assert combat.step == CombatStep.RESOLVE

    def test_attacker_wins_and_takes_the_cell(self, game):
        clear_board(game)
        put(game, "p1", "brute", 1, 1)
        put(game, "p2", "scout", 1, 2)

        combat = fight(game, (1, 1), (1, 2))

        assert combat.winner == "attacker"
        assert game.state.cell_at(1, 1) is None
        assert game.state.cell_at(1, 2).player == "p1"
        assert [e.cell.player for e in game.state.graveyard] == ["p2"]

    def test_draw_retreats_attacker(self, game, transport):
        clear_board(game)
        put(game, "p1", "scout", 1, 0)
        put(game, "p2", "scout", 1, 2)

        combat = fight(game, (1, 0), (1, 2))

        assert combat.winner == "draw"
        assert game.state.cell_at(1, 1).player == "p1"
        assert game.state.cell_at(1, 0) is None
        assert game.state.cell_at(1, 2).player == "p2"
        assert game.state.graveyard == []
        assert any("falls back to _1,1_" in m for m in transport.messages_for(ROOM, "p1"))

    def test_draw_on_single_step_keeps_positions(self, game):
        clear_board(game)
        put(game, "p1", "scout", 1, 1)
        put(game, "p2", "scout", 1, 2)

        combat = fight(game, (1, 1), (1, 2))

        assert combat.winner == "draw"
        assert game.state.cell_at(1, 1).player == "p1"
        assert game.state.cell_at(1, 2).player == "p2"

    def test_draw_without_free_retreat_cell(self, game):
        """A jumped-over cell is occupied, so the attacker stays put."""
        clear_board(game)
        put(game, "p1", "jumper", 2, 2)
        put(game, "p2", "brute", 2, 3)
        put(game, "p2", "jumper", 2, 4)

        combat = fight(game, (2, 2), (2, 4))

        assert combat.winner == "draw"
        assert combat.attacker.move == [(2, 3), (2, 4)]
        assert game.state.cell_at(2, 2).player == "p1"
        assert game.state.cell_at(2, 3).player == "p2"

    def test_attacker_wildcard_pushes_power(self, game):
        clear_board(game)
        put(game, "p1", "trickster", 1, 1)
        put(game, "p2", "brute", 1, 2)

        combat = fight(game, (1, 1), (1, 2))

        assert combat.winner == "power"
        assert combat.power_owner == "attacker"
        [entry] = game.state.stack
        assert entry.action_type == ActionType.POWER
        assert entry.source.role == "attacker"
        assert entry.target.role == "defender"
        assert len(game.state.board) == 2

    def test_defender_wildcard_pushes_power(self, game):
        clear_board(game)
        put(game, "p1", "brute", 1, 1)
        put(game, "p2", "trickster", 1, 2)

        combat = fight(game, (1, 1), (1, 2))

        assert combat.winner == "power"
        assert combat.power_owner == "defender"
        assert game.state.stack[0].source.player == "p2"

    def test_both_wildcards_is_a_draw(self, game):
        clear_board(game)
        put(game, "p1", "trickster", 1, 1)
        put(game, "p2", "trickster", 1, 2)

        combat = fight(game, (1, 1), (1, 2))

        assert combat.winner == "draw"
        assert game.state.stack == []

    def test_resolution_waits_for_the_delay(self, game, scheduler):
        clear_board(game)
        put(game, "p1", "brute", 1, 1)
        put(game, "p2", "scout", 1, 2)
        put(game, "p1", "banner", 5, 0)
        put(game, "p2", "banner", 0, 5)

        fight(game, (1, 1), (1, 2))

        assert game.has_pending_timer
        assert scheduler.pending[0].delay == 5.0
        assert game.state.turn.count == 1

        scheduler.run_all()

        assert not game.has_pending_timer
        assert game.state.turn.count == 2
        assert game.state.turn.active_player == "p2"
        assert game.state.turn.phase == TurnPhase.MAIN
        assert game.state.turn.combat is None


class TestEmblemLoss:
    """The game ends when an emblem is eliminated."""

    def test_emblem_lost_in_combat(self, game, scheduler, transport):
        """Red's banner at (2,2) attacks the blue brute and loses."""
        assert game.state.cell_at(2, 2).card.is_emblem

        combat = fight(game, (2, 2), (2, 3))

        assert combat.winner == "defender"
        assert game.state.cell_at(2, 2) is None
        assert game.state.turn.phase == TurnPhase.COMBAT

        scheduler.run_all()

        assert game.state.turn.phase == TurnPhase.END
        assert game.state.turn.winner == "p2"
        assert game.is_over
        assert not game.has_pending_timer
        assert any("Game over" in m for m in transport.messages_for(ROOM, "p1"))

    def test_requests_rejected_after_game_over(self, game, scheduler):
        fight(game, (2, 2), (2, 3))
        scheduler.run_all()

        move = game.move("p1", (1, 2), (1, 3))
        corner = game.choose_corner("p2", 0)

        assert move.error_code == ErrorCode.GAME_OVER
        assert corner.error_code == ErrorCode.GAME_OVER
        assert game.state.turn.winner == "p2"

    def test_emblem_captured_by_attacker(self, make_game, scheduler):
        game = make_game()
        clear_board(game)
        put(game, "p1", "brute", 2, 2)
        put(game, "p2", "banner", 2, 3)

        fight(game, (2, 2), (2, 3))
        scheduler.run_all()

        assert game.state.turn.winner == "p1"
        assert game.state.cell_at(2, 3).player == "p1"


class TestMissingPower:
    """A power without plugin does nothing and the game goes on."""

    def test_dud_power(self, make_game, scheduler, transport):
        game = make_game(catalog=build_catalog())
        clear_board(game)
        put(game, "p1", "dud", 1, 1)
        put(game, "p2", "brute", 1, 2)

        combat = fight(game, (1, 1), (1, 2))
        scheduler.run_all()

        assert combat.winner == "power"
        assert len(game.state.board) == 2
        assert game.state.turn.count == 2
        assert any("is not implemented yet" in m for m in transport.messages_for(ROOM, "p1"))
