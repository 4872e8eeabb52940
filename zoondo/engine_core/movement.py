"""
Movement Resolver - Legal destinations for a card on the board.

For each candidate path (from the move geometry) the resolver walks cell
by cell from the card:
- an empty cell is a simple move destination
- the first occupied cell stops the walk; it is a combat destination
  when it holds an opposing card, unreachable otherwise
- a jump step is passed over: never a destination, never a stop
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import logging

from .geometry import resolve_moves

if TYPE_CHECKING:
    from .catalog import CardCatalog
    from .state import BoardCell, GameState


logger = logging.getLogger(__name__)


@dataclass
class Destination:
    """A reachable cell and the path leading to it."""
    x: int
    y: int
    is_combat: bool = False
    path: list[tuple[int, int]] = field(default_factory=list)

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)


@dataclass
class MoveCheck:
    """Outcome of a move legality check."""
    is_valid: bool
    path: list[tuple[int, int]] = field(default_factory=list)
    is_combat: bool = False


class MovementResolver:
    """Derives and validates moves. Never mutates the state."""

    def __init__(self, catalog: CardCatalog):
        self.catalog = catalog

    def legal_moves(self, state: GameState, cell: BoardCell) -> list[Destination]:
        """All legal destinations for the card in `cell`."""
        mover = state.get_player(cell.player)
        flip = not mover.is_first_player if mover else False
        card = self.catalog.resolve_card(cell.card)

        destinations: list[Destination] = []
        seen: set[tuple[int, int]] = set()

        for path in resolve_moves(cell.position, card.moves, flip):
            taken: list[tuple[int, int]] = []
            for step in path:
                taken.append(step.position)
                if step.jump:
                    continue

                occupant = state.cell_at(step.x, step.y)
                if occupant is not None:
                    if occupant.player != cell.player and step.position not in seen:
                        seen.add(step.position)
                        destinations.append(Destination(
                            x=step.x, y=step.y, is_combat=True, path=list(taken),
                        ))
                    break

                if step.position not in seen:
                    seen.add(step.position)
                    destinations.append(Destination(x=step.x, y=step.y, path=list(taken)))

        return destinations

    def check_move(
        self,
        state: GameState,
        cell: BoardCell,
        destination: tuple[int, int],
    ) -> MoveCheck:
        """Check whether `cell` may move to `destination`."""
        for candidate in self.legal_moves(state, cell):
            if candidate.position == tuple(destination):
                return MoveCheck(
                    is_valid=True,
                    path=candidate.path,
                    is_combat=candidate.is_combat,
                )

        logger.debug(
            "Illegal move for %s/%s from %s to %s",
            cell.card.tribe, cell.card.slug, cell.position, destination,
        )
        return MoveCheck(is_valid=False)
