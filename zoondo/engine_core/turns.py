"""
Turn Controller - Turn lifecycle and active player rotation.

A turn is reset in one go (count, active player, stack, phase, combat,
pending action) before any state is broadcast, so observers never see a
half-started turn.
"""

from __future__ import annotations
from typing import TYPE_CHECKING
import logging

from .state import TurnPhase

if TYPE_CHECKING:
    from .game import Game


logger = logging.getLogger(__name__)


class TurnController:
    """Starts and ends turns for one game."""

    def __init__(self, game: Game):
        self.game = game

    def start_turn(self, player_id: str) -> None:
        game = self.game
        turn = game.state.turn

        turn.count += 1
        turn.active_player = player_id
        game.stack.clear()
        turn.phase = TurnPhase.MAIN
        turn.combat = None
        turn.action = None
        turn.timer = game.turn_timer

        player = game.state.get_player(player_id)
        game.send_state()
        game.send_message(f"Turn start: **{player.name}**.")
        logger.info(
            "Starting turn %d: %s %s (%s)",
            turn.count,
            player_id,
            player.name,
            "first player" if player.is_first_player else "second player",
        )

    def end_turn(self) -> str | None:
        """Close the current turn and return the id of the next player."""
        game = self.game
        game.send_message("End of turn.")
        return game.state.other_player_id(game.state.turn.active_player)
