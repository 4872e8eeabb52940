"""
Combat Resolver - Two-step combat state machine.

A combat starts when a move targets an opposing card:
1. CHOICE: each player picks a corner for the side they cannot see
   (the opponent's card). The corner actually used is drawn at random
   from the pair of rotationally-equivalent corners holding the pick.
2. RESOLVE: once both sides have a value, the outcome is applied:
   draw, power trigger (attacker first), attacker win, defender win.

After resolution the stack drain resumes after a fixed, cancellable delay.
"""

from __future__ import annotations
from typing import TYPE_CHECKING
import logging

from .state import (
    BoardCell,
    CombatSide,
    CombatState,
    CombatStep,
    TurnPhase,
    WILDCARD,
    corner_pair,
)
from .action import Action, ActionResult, ErrorCode

if TYPE_CHECKING:
    from .game import Game


logger = logging.getLogger(__name__)


def _coords(position: tuple[int, int]) -> str:
    return ",".join(str(c) for c in position)


class CombatResolver:
    """Runs the combat of the current turn."""

    def __init__(self, game: Game):
        self.game = game

    @property
    def combat(self) -> CombatState | None:
        return self.game.state.turn.combat

    def begin(
        self,
        attacker: BoardCell,
        defender: BoardCell,
        path: list[tuple[int, int]],
    ) -> CombatState:
        """Enter combat between two board cells."""
        turn = self.game.state.turn
        turn.phase = TurnPhase.COMBAT
        turn.combat = CombatState(
            attacker=CombatSide.snapshot(attacker, "attacker", move=path),
            defender=CombatSide.snapshot(defender, "defender"),
            step=CombatStep.CHOICE,
        )
        logger.debug(
            "Combat: %s at %s attacks %s at %s",
            attacker.card.slug, attacker.position, defender.card.slug, defender.position,
        )
        self.game.send_message("**Combat** - a combat begins.")
        self.game.send_state()
        return turn.combat

    def choose_corner(self, player_id: str, corner_index: int) -> ActionResult:
        """
        Record a corner pick by `player_id` for the opposing side.

        Resolves the combat once both sides have a value.
        """
        combat = self.combat
        if combat is None or combat.step != CombatStep.CHOICE:
            return ActionResult.failure(
                "No corner choice is expected right now",
                error_code=ErrorCode.INVALID_PHASE,
            )

        try:
            pair = corner_pair(corner_index)
        except ValueError:
            return ActionResult.failure(
                f"Invalid corner: {corner_index}",
                error_code=ErrorCode.INVALID_CORNER,
            )

        sides = [side for side in combat.sides if side.player != player_id]
        if not sides or all(side.has_value for side in sides):
            return ActionResult.failure(
                "Corner already chosen",
                error_code=ErrorCode.INVALID_CORNER,
            )

        for side in sides:
            corner = self.game.rng.choice(pair)
            side.corner_index = corner
            side.value = self.game.resolve_card(side.card).corner(corner)
            logger.debug("Combat: %s corner %s -> %s", side.role, corner, side.value)

        if combat.is_ready:
            self.resolve()
        else:
            self.game.send_message_to(
                player_id, "**Combat** - corner chosen, waiting for your opponent.",
            )

        return ActionResult.ok([f"corner {corner_index}"])

    def resolve(self) -> str:
        """Apply the outcome of a combat whose sides both have a value."""
        game = self.game
        combat = self.combat
        attacker, defender = combat.attacker, combat.defender
        attacker_card = game.resolve_card(attacker.card)
        defender_card = game.resolve_card(defender.card)
        attacker_name = game.player_name(attacker.player)
        defender_name = game.player_name(defender.player)

        combat.step = CombatStep.RESOLVE

        if attacker.value == defender.value:
            combat.winner = "draw"
            outcome = " Both Zoons keep their positions."
            retreat = self._retreat_cell(attacker)
            if retreat is not None:
                game.state.move_cell(attacker.position, retreat)
                outcome = (
                    f" The attacking **{attacker_card.name}** falls back to _{_coords(retreat)}_."
                )
            game.send_message(f"**Combat** - the combat ends in a draw.{outcome}")

        elif attacker.value == WILDCARD:
            combat.winner = "power"
            combat.power_owner = "attacker"
            game.send_message(
                f"**Combat** - the _{attacker_card.name}_ of **{attacker_name}** "
                f"activates its power (_{attacker_card.power}_)."
            )
            game.push(Action.power(source=attacker, target=defender))

        elif defender.value == WILDCARD:
            combat.winner = "power"
            combat.power_owner = "defender"
            game.send_message(
                f"**Combat** - the _{defender_card.name}_ of **{defender_name}** "
                f"activates its power (_{defender_card.power}_)."
            )
            game.push(Action.power(source=defender, target=attacker))

        elif attacker.value > defender.value:
            combat.winner = "attacker"
            game.send_message(
                f"**Combat** - the _{attacker_card.name}_ of **{attacker_name}** eliminates "
                f"the _{defender_card.name}_ of **{defender_name}** and takes its place "
                f"at _{_coords(defender.position)}_."
            )
            game.eliminate(defender.x, defender.y, context="combat")
            game.state.move_cell(attacker.position, defender.position)

        else:
            combat.winner = "defender"
            game.send_message(
                f"**Combat** - the _{defender_card.name}_ of **{defender_name}** eliminates "
                f"the _{attacker_card.name}_ of **{attacker_name}** and holds its position."
            )
            game.eliminate(attacker.x, attacker.y, context="combat")

        logger.debug("Combat resolved: %s (%s vs %s)", combat.winner, attacker.value, defender.value)
        game.send_state()
        game.schedule_drain()
        return combat.winner

    def _retreat_cell(self, attacker: CombatSide) -> tuple[int, int] | None:
        """Penultimate cell of the attacker's path, when it is free."""
        if len(attacker.move) < 2:
            return None
        x, y = attacker.move[-2]
        if self.game.state.is_occupied(x, y):
            return None
        return (x, y)
