"""
Classic powers - Power plugins for the starter tribes.

Every plugin receives (game, action, done):
- action.source is the combat side whose power triggered
- action.target is the opposing side
- done() is called exactly once, when the plugin is finished

Cards whose power has no plugin here ("Meditation", "Undertow") are
resolved by the engine as a draw.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Callable
import logging

from ...engine_core.action import Action
from ...engine_core.geometry import ORTHOGONAL
from ...engine_core.powers import PowerRegistry
from ...engine_core.state import BoardCell, is_on_board
from .cards import ASHEN, TIDAL

if TYPE_CHECKING:
    from ...engine_core.game import Game


logger = logging.getLogger(__name__)

POWERS = PowerRegistry()


def _live_cell(game: Game, side) -> BoardCell | None:
    """The board cell a combat side refers to, if it is still there."""
    cell = game.state.cell_at(side.x, side.y)
    if cell is None or cell.player != side.player or cell.card != side.card:
        return None
    return cell


@POWERS.register(ASHEN, "ash-wolf")
@POWERS.register(TIDAL, "moray")
def swap(game: Game, action: Action, done: Callable[[], None]) -> None:
    """The two cards exchange their positions."""
    source = _live_cell(game, action.source)
    target = _live_cell(game, action.target)

    if source is None or target is None:
        game.send_message("**Power** - _Swap_ has nothing to swap.")
        done()
        return

    source.x, source.y, target.x, target.y = target.x, target.y, source.x, source.y
    game.send_message(
        f"**Power** - _Swap_: the Zoons exchange positions "
        f"(_{source.x},{source.y}_ and _{target.x},{target.y}_)."
    )
    done()


@POWERS.register(ASHEN, "soot-viper")
@POWERS.register(TIDAL, "jellyfish")
def venom(game: Game, action: Action, done: Callable[[], None]) -> None:
    """The opposing card is eliminated."""
    target = _live_cell(game, action.target)
    if target is not None:
        game.send_message("**Power** - _Venom_ strikes the opposing Zoon.")
        game.eliminate(target.x, target.y, context="power:venom")
    done()


@POWERS.register(ASHEN, "smoke-dancer")
@POWERS.register(TIDAL, "heron")
def leap(game: Game, action: Action, done: Callable[[], None]) -> None:
    """The power owner moves its card to a free orthogonally adjacent cell."""
    source = _live_cell(game, action.source)
    if source is None:
        done()
        return

    targets = [
        (source.x + dx, source.y + dy)
        for dx, dy in ORTHOGONAL
        if is_on_board(source.x + dx, source.y + dy)
        and not game.state.is_occupied(source.x + dx, source.y + dy)
    ]
    if not targets:
        game.send_message("**Power** - _Leap_ finds no free cell.")
        done()
        return

    origin = source.position

    def land(game: Game, prompt: Action, destination: tuple[int, int]) -> None:
        cell = game.state.cell_at(*origin)
        if cell is None or game.state.is_occupied(*destination):
            logger.debug("Leap target %s no longer available", destination)
            return
        game.state.move_cell(origin, destination)
        game.send_message(f"**Power** - _Leap_ to _{destination[0]},{destination[1]}_.")

    game.push(Action.select_card(
        source.player,
        targets,
        resume=land,
        prompt="Choose where to leap",
    ))
    done()
