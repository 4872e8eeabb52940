"""
Engine Core - Rules engine for one two-player match.

The engine is the runtime that:
1. Owns the board, turn and action stack of a match
2. Validates moves against each card's movement pattern
3. Resolves combats and power effects
4. Drains the action stack, which advances turns
5. Projects a fog-of-war view of the state for each player
"""

from .state import (
    GameState,
    Player,
    CardRef,
    BoardCell,
    Turn,
    TurnPhase,
    CombatState,
    CombatSide,
    CombatStep,
    GraveyardEntry,
    is_on_board,
    mirror,
)
from .action import Action, ActionType, ActionResult, ErrorCode
from .catalog import CardCatalog, CardDefinition, TribeDefinition
from .geometry import PathStep, resolve_moves
from .powers import PowerRegistry
from .movement import MovementResolver, MoveCheck, Destination
from .combat import CombatResolver
from .stack import StackResolver, ResolverState
from .turns import TurnController
from .projection import StateProjector
from .scheduler import AsyncioScheduler, ThreadTimerScheduler
from .transport import Transport, InMemoryTransport
from .game import Game

__all__ = [
    "GameState",
    "Player",
    "CardRef",
    "BoardCell",
    "Turn",
    "TurnPhase",
    "CombatState",
    "CombatSide",
    "CombatStep",
    "GraveyardEntry",
    "is_on_board",
    "mirror",
    "Action",
    "ActionType",
    "ActionResult",
    "ErrorCode",
    "CardCatalog",
    "CardDefinition",
    "TribeDefinition",
    "PathStep",
    "resolve_moves",
    "PowerRegistry",
    "MovementResolver",
    "MoveCheck",
    "Destination",
    "CombatResolver",
    "StackResolver",
    "ResolverState",
    "TurnController",
    "StateProjector",
    "AsyncioScheduler",
    "ThreadTimerScheduler",
    "Transport",
    "InMemoryTransport",
    "Game",
]
