"""
State Projector - Per-player views of the canonical state.

Fog of war:
- a card owned by the opponent shows its tribe only
- while a combat is still being chosen, the opponent's combat card shows
  its tribe only
- a pending prompt is sent without its continuation, with its player id
  resolved to the player record
"""

from __future__ import annotations
from typing import Any, TYPE_CHECKING

from .state import BoardCell, CardRef, CombatSide, CombatState, CombatStep, TurnPhase

if TYPE_CHECKING:
    from .action import Action
    from .game import Game


HIDDEN_STEPS = (CombatStep.CHOICE, CombatStep.WAIT)


def card_view(card: CardRef, visible: bool) -> dict[str, Any]:
    if visible:
        return {"tribe": card.tribe, "type": card.type, "slug": card.slug}
    return {"tribe": card.tribe}


class StateProjector:
    """Builds and delivers one payload per player."""

    def __init__(self, game: Game):
        self.game = game

    def project(self, player_id: str) -> dict[str, Any]:
        """The view of the game for `player_id`."""
        state = self.game.state
        turn = state.turn
        player = state.get_player(player_id)
        opponent = state.get_player(state.other_player_id(player_id))
        active = state.get_player(turn.active_player)
        winner = state.get_player(turn.winner)

        return {
            "room": state.room_id,
            "turn": {
                "count": turn.count,
                "active_player": active.to_dict() if active else None,
                "phase": turn.phase.value,
                "timer": turn.timer,
                "combat": self._combat_view(turn.combat, player_id),
                "action": (
                    self._action_view(turn.action)
                    if turn.phase == TurnPhase.ACTION and turn.action is not None
                    else None
                ),
                "winner": winner.to_dict() if winner else None,
            },
            "player": player.to_dict() if player else None,
            "opponent": opponent.to_dict() if opponent else None,
            "board": [self._cell_view(cell, player_id) for cell in state.board],
        }

    def broadcast(self) -> None:
        """Send every connected player their own view."""
        game = self.game
        for player_id in game.state.players:
            if not game.transport.has_channel(game.room_id, player_id):
                continue
            game.transport.send_state(game.room_id, player_id, self.project(player_id))

    def _cell_view(self, cell: BoardCell, viewer: str) -> dict[str, Any]:
        return {
            "player": cell.player,
            "x": cell.x,
            "y": cell.y,
            "card": card_view(cell.card, cell.player == viewer),
        }

    def _combat_view(self, combat: CombatState | None, viewer: str) -> dict[str, Any] | None:
        if combat is None:
            return None
        hidden = combat.step in HIDDEN_STEPS
        return {
            "step": combat.step.value,
            "winner": combat.winner,
            "power_owner": combat.power_owner,
            "attacker": self._side_view(combat.attacker, viewer, hidden),
            "defender": self._side_view(combat.defender, viewer, hidden),
        }

    def _side_view(self, side: CombatSide, viewer: str, hidden: bool) -> dict[str, Any]:
        visible = not hidden or side.player == viewer
        return {
            "role": side.role,
            "player": side.player,
            "x": side.x,
            "y": side.y,
            "card": card_view(side.card, visible),
            "move": [list(position) for position in side.move],
            "corner_index": side.corner_index if visible else None,
            "value": side.value if visible else None,
        }

    def _action_view(self, action: Action) -> dict[str, Any]:
        # the resume continuation never leaves the engine
        options = dict(action.options)
        if "player" in options:
            chooser = self.game.state.get_player(options["player"])
            options["player"] = chooser.to_dict() if chooser else None
        if "targets" in options:
            options["targets"] = [list(target) for target in options["targets"]]
        return {"type": action.type_name, "options": options}
