"""
Action System - Stack entries and inbound results.

Stack entries represent pending game effects:
1. Prompts the active player must answer (select card)
2. Power resolutions (handed to a power plugin)
3. Win conditions

Inbound player operations (move, corner choice, ...) report an ActionResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class ActionType(Enum):
    """Types of stack entries."""
    SELECT_CARD = "select_card"
    POWER = "power"
    WIN = "win"


class ErrorCode(str, Enum):
    """Reasons an inbound operation was rejected."""
    NOT_A_PARTICIPANT = "NOT_A_PARTICIPANT"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_PHASE = "INVALID_PHASE"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    INVALID_CORNER = "INVALID_CORNER"
    INVALID_CHOICE = "INVALID_CHOICE"
    GAME_FULL = "GAME_FULL"
    ALREADY_JOINED = "ALREADY_JOINED"
    UNKNOWN_TRIBE = "UNKNOWN_TRIBE"
    GAME_OVER = "GAME_OVER"


@dataclass
class Action:
    """
    An entry on the action stack.

    The stack is processed FIFO by the StackResolver. Only SELECT_CARD
    blocks on player input; its `resume` callback is called with
    (game, action, target) once the player answers.
    """
    action_type: Any  # ActionType (anything else is skipped by the resolver)

    # POWER
    source: Any | None = None  # CombatSide or BoardCell
    target: Any | None = None

    # WIN
    winner: str | None = None

    # SELECT_CARD
    options: dict[str, Any] = field(default_factory=dict)
    resume: Callable[..., None] | None = None

    @classmethod
    def select_card(
        cls,
        player_id: str,
        targets: list[tuple[int, int]],
        resume: Callable[..., None],
        prompt: str = "",
    ) -> Action:
        """Factory for a prompt the given player must answer."""
        return cls(
            action_type=ActionType.SELECT_CARD,
            options={
                "player": player_id,
                "prompt": prompt,
                "targets": [list(t) for t in targets],
            },
            resume=resume,
        )

    @classmethod
    def power(cls, source: Any, target: Any) -> Action:
        """Factory for a power resolution."""
        return cls(action_type=ActionType.POWER, source=source, target=target)

    @classmethod
    def win(cls, winner: str) -> Action:
        """Factory for a win condition."""
        return cls(action_type=ActionType.WIN, winner=winner)

    @property
    def type_name(self) -> str:
        if isinstance(self.action_type, ActionType):
            return self.action_type.value
        return str(self.action_type)


@dataclass
class ActionResult:
    """
    Result of an inbound player operation.

    Contains:
    - Whether the operation was accepted
    - Errors (if rejected)
    - Human-readable changes (for logs and clients)
    """
    success: bool
    error: str | None = None
    error_code: ErrorCode | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(cls, changes: list[str] | None = None) -> ActionResult:
        """Create a success result."""
        return cls(success=True, state_changes=changes or [])
