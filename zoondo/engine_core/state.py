"""
Game State - Canonical state container for one match.

Design principles:
- One GameState per match, owned by the Game aggregate
- Mutated in place by the resolvers (never shared across games)
- Board cells are plain records; combat keeps deep copies of them
- Serialization for clients happens in the projector, not here
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy
from enum import Enum


BOARD_SIZE = 6

# Card type markers
FIGHTERS = "fighters"
EMBLEMS = "emblems"

# Corner value that triggers a power instead of a numeric comparison
WILDCARD = "*"

# Corners rotated by 180 degrees are interchangeable
CORNER_PAIRS = ((0, 2), (1, 3))


class TurnPhase(Enum):
    """Phases of a turn."""
    WAITING = "waiting"  # Before the second player joins
    MAIN = "main"  # Active player may move
    COMBAT = "combat"  # Waiting for corner choices / resolution
    ACTION = "action"  # A stack entry needs player input
    END = "end"  # Terminal, a winner is recorded


class CombatStep(Enum):
    """Steps of a combat."""
    CHOICE = "choice"
    WAIT = "wait"
    RESOLVE = "resolve"


@dataclass
class Player:
    """A participant in the match."""
    player_id: str
    name: str
    tribe: str
    is_first_player: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.player_id,
            "name": self.name,
            "tribe": self.tribe,
            "is_first_player": self.is_first_player,
        }


@dataclass(frozen=True)
class CardRef:
    """
    Identifies a card definition in the catalog.

    Note: this is a reference, not the definition.
    The definition (name, moves, corners, power) lives in the CardCatalog.
    """
    tribe: str
    type: str
    slug: str

    @property
    def is_emblem(self) -> bool:
        return self.type == EMBLEMS


@dataclass
class BoardCell:
    """A card placed on the board."""
    player: str
    x: int
    y: int
    card: CardRef

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)


@dataclass
class CombatSide:
    """
    One side of a combat.

    Holds a snapshot of the board cell taken when the combat started,
    so later board mutations cannot alter the compared values.
    """
    role: str  # "attacker" or "defender"
    player: str
    x: int
    y: int
    card: CardRef
    move: list[tuple[int, int]] = field(default_factory=list)
    corner_index: int | None = None
    value: int | str | None = None

    @classmethod
    def snapshot(
        cls,
        cell: BoardCell,
        role: str,
        move: list[tuple[int, int]] | None = None,
    ) -> CombatSide:
        cell = deepcopy(cell)
        return cls(
            role=role,
            player=cell.player,
            x=cell.x,
            y=cell.y,
            card=cell.card,
            move=list(move or []),
        )

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def has_value(self) -> bool:
        return self.value is not None


@dataclass
class CombatState:
    """Combat in progress (or just resolved) for the current turn."""
    attacker: CombatSide
    defender: CombatSide
    step: CombatStep = CombatStep.CHOICE

    # Set on resolution: "draw", "power", "attacker" or "defender"
    winner: str | None = None
    power_owner: str | None = None

    def side(self, role: str) -> CombatSide:
        return self.attacker if role == "attacker" else self.defender

    @property
    def sides(self) -> tuple[CombatSide, CombatSide]:
        return (self.attacker, self.defender)

    @property
    def is_ready(self) -> bool:
        """Both sides have a corner value."""
        return all(side.has_value for side in self.sides)


@dataclass
class Turn:
    """
    The single turn record of a match, reset in place every turn.
    """
    count: int = 0
    active_player: str | None = None
    phase: TurnPhase = TurnPhase.WAITING
    combat: CombatState | None = None
    action: Any | None = None  # Pending SelectCard Action
    timer: int = 30
    winner: str | None = None


@dataclass
class GraveyardEntry:
    """An eliminated cell and the context that eliminated it."""
    cell: BoardCell
    turn: int
    context: str


@dataclass
class GameState:
    """
    Complete match state at a point in time.

    This is the canonical state. Players only ever see it through
    the StateProjector.
    """
    room_id: str
    players: dict[str, Player] = field(default_factory=dict)
    board: list[BoardCell] = field(default_factory=list)
    turn: Turn = field(default_factory=Turn)
    stack: list[Any] = field(default_factory=list)  # Action entries, FIFO
    graveyard: list[GraveyardEntry] = field(default_factory=list)

    def get_player(self, player_id: str | None) -> Player | None:
        """Get player by ID."""
        if player_id is None:
            return None
        return self.players.get(player_id)

    def other_player_id(self, player_id: str | None) -> str | None:
        """The id of the only other participant."""
        for pid in self.players:
            if pid != player_id:
                return pid
        return None

    @property
    def active_player(self) -> Player | None:
        return self.get_player(self.turn.active_player)

    # =========================================================================
    # Board operations
    # =========================================================================

    def cell_at(self, x: int, y: int) -> BoardCell | None:
        """Get the cell at a position, if any."""
        for cell in self.board:
            if cell.x == x and cell.y == y:
                return cell
        return None

    def is_occupied(self, x: int, y: int) -> bool:
        return self.cell_at(x, y) is not None

    def place(self, cell: BoardCell) -> BoardCell:
        """Add a cell to the board."""
        if not is_on_board(cell.x, cell.y):
            raise ValueError(f"Position {cell.position} is outside the board")
        if self.is_occupied(cell.x, cell.y):
            raise ValueError(f"Position {cell.position} is already occupied")
        self.board.append(cell)
        return cell

    def move_cell(self, origin: tuple[int, int], destination: tuple[int, int]) -> BoardCell:
        """Relocate the card at origin to an empty destination."""
        cell = self.cell_at(*origin)
        if cell is None:
            raise ValueError(f"No card at {origin}")
        if origin == destination:
            return cell
        if self.is_occupied(*destination):
            raise ValueError(f"Position {destination} is already occupied")
        cell.x, cell.y = destination
        return cell

    def remove_cell(self, x: int, y: int) -> BoardCell:
        """Remove and return the cell at a position."""
        cell = self.cell_at(x, y)
        if cell is None:
            raise ValueError(f"No card at {(x, y)}")
        self.board.remove(cell)
        return cell

    def cells_of(self, player_id: str) -> list[BoardCell]:
        return [cell for cell in self.board if cell.player == player_id]


def is_on_board(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def mirror(x: int, y: int) -> tuple[int, int]:
    """Point reflection across the board center."""
    return (BOARD_SIZE - 1 - x, BOARD_SIZE - 1 - y)


def corner_pair(corner_index: int) -> tuple[int, int]:
    """The pair of rotationally-equivalent corners containing corner_index."""
    for pair in CORNER_PAIRS:
        if corner_index in pair:
            return pair
    raise ValueError(f"Invalid corner index: {corner_index}")
