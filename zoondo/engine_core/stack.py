"""
Stack Resolver - Drains the action stack one entry at a time.

The stack is FIFO. Draining runs in a loop, not by recursion, and stops
in an explicit wait state when an entry needs something from outside:
- WAITING_CHOICE: a SELECT_CARD prompt waits for the player's answer
- WAITING_POWER: a power plugin has not called its continuation yet

An empty stack ends the turn and starts the next one. This is the only
way turns advance.
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Callable
import logging

from .action import Action, ActionType
from .state import TurnPhase

if TYPE_CHECKING:
    from .game import Game


logger = logging.getLogger(__name__)


class ResolverState(Enum):
    """State of the stack resolver."""
    READY = "ready"  # Idle, nothing in progress
    RESOLVING = "resolving"  # Draining entries
    WAITING_CHOICE = "waiting_choice"  # Paused for player input
    WAITING_POWER = "waiting_power"  # Paused for a power plugin
    HALTED = "halted"  # Game over, nothing more is processed


class StackResolver:
    """
    Drives the action stack of one game.

    Usage:
        game.push(Action.power(source, target))
        game.stack.resolve()
    """

    def __init__(self, game: Game):
        self.game = game
        self.state = ResolverState.READY
        self._draining = False
        self._power_token: object | None = None
        self._resume_phase = TurnPhase.MAIN

    @property
    def entries(self) -> list[Action]:
        return self.game.state.stack

    def push(self, action: Action) -> None:
        self.entries.append(action)

    def clear(self) -> None:
        """Drop pending entries and forget any power in progress."""
        self.entries.clear()
        self._power_token = None

    def halt(self) -> None:
        self.clear()
        self.state = ResolverState.HALTED

    def resolve(self) -> None:
        """Drain the stack until it suspends, halts or advances the turn."""
        if self._draining or self.state != ResolverState.READY:
            return

        self._draining = True
        self.state = ResolverState.RESOLVING
        try:
            while self.state == ResolverState.RESOLVING:
                self._resolve_next()
        finally:
            self._draining = False

    def answer(self, target: tuple[int, int]) -> None:
        """Resume after the pending SELECT_CARD prompt has been answered."""
        turn = self.game.state.turn
        action = turn.action
        turn.action = None
        turn.phase = self._resume_phase
        self.state = ResolverState.READY

        if action is not None and action.resume is not None:
            action.resume(self.game, action, target)

        self.game.send_state()
        self.resolve()

    def _resolve_next(self) -> None:
        game = self.game
        action = self.entries.pop(0) if self.entries else None

        # without action in the stack, change turn
        if action is None:
            self.state = ResolverState.READY
            game.turns.start_turn(game.turns.end_turn())
            return

        if action.action_type == ActionType.SELECT_CARD:
            turn = game.state.turn
            self._resume_phase = turn.phase
            turn.phase = TurnPhase.ACTION
            turn.action = action
            self.state = ResolverState.WAITING_CHOICE
            game.send_state()

        elif action.action_type == ActionType.POWER:
            self._resolve_power(action)

        elif action.action_type == ActionType.WIN:
            self.halt()
            game.end_game(action.winner)

        else:
            logger.warning("Unhandled stack entry type: %s", action.type_name)

    def _resolve_power(self, action: Action) -> None:
        game = self.game
        card = game.resolve_card(action.source.card)

        if card.resolver is None:
            logger.warning("Power action: no resolver for %s", card.name)
            game.send_message(
                f"The power of **{card.name}** is not implemented yet. "
                "The combat is treated as a draw."
            )
            return

        token = object()
        self._power_token = token
        self.state = ResolverState.WAITING_POWER
        logger.debug("Resolving power %s of %s", card.power, card.name)
        card.resolver(game, action, self._continuation(token, card.name))

    def _continuation(self, token: object, name: str) -> Callable[[], None]:
        called = False

        def done() -> None:
            nonlocal called
            if called:
                raise RuntimeError(f"Power continuation for {name} called more than once")
            called = True

            with self.game.lock:
                if self._power_token is not token or self.state != ResolverState.WAITING_POWER:
                    logger.debug("Ignoring stale power continuation for %s", name)
                    return
                self._power_token = None
                self.game.send_state()
                if self._draining:
                    # called from inside the plugin: the drain loop picks up
                    self.state = ResolverState.RESOLVING
                else:
                    self.state = ResolverState.READY
                    self.resolve()

        return done
