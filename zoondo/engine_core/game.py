"""
Game - One match, its state and the components acting on it.

The game:
1. Deploys both tribes and picks the first active player
2. Validates inbound player operations (move, corner, prompt answer)
3. Hands moves to the movement and combat resolvers
4. Drains the action stack, which advances turns
5. Broadcasts a filtered state to each player after every change

All mutating entry points run under one re-entrant lock per game, so
inbound requests, pacing timers and power continuations never interleave.
"""

from __future__ import annotations
from typing import Any
import logging
import random
import threading

from .. import config
from .state import (
    BoardCell,
    GameState,
    GraveyardEntry,
    Player,
    TurnPhase,
    mirror,
)
from .action import Action, ActionResult, ErrorCode
from .catalog import CardCatalog, CardDefinition
from .combat import CombatResolver
from .movement import Destination, MovementResolver
from .projection import StateProjector
from .scheduler import Scheduler, ThreadTimerScheduler, TimerHandle
from .stack import StackResolver
from .transport import Transport
from .turns import TurnController


logger = logging.getLogger(__name__)


def _coords(position) -> str:
    return ",".join(str(c) for c in position)


class Game:
    """
    A two-player match.

    Usage:
        game = Game("room-1", Player("p1", "Ana", "ashen"), catalog, transport)
        game.join(Player("p2", "Bo", "tidal"))
        game.move("p1", (1, 2), (1, 3))
    """

    def __init__(
        self,
        room_id: str,
        first_player: Player,
        catalog: CardCatalog,
        transport: Transport,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        combat_delay: float | None = None,
        turn_timer: int | None = None,
    ):
        self.room_id = room_id
        self.catalog = catalog
        self.transport = transport
        self.scheduler = scheduler or ThreadTimerScheduler()
        self.rng = rng or random.Random()
        self.combat_delay = config.COMBAT_DELAY if combat_delay is None else combat_delay
        self.turn_timer = config.TURN_TIMER if turn_timer is None else turn_timer
        self.lock = threading.RLock()

        self.state = GameState(room_id=room_id)
        self.state.turn.timer = self.turn_timer
        self.left: set[str] = set()
        self._timer: TimerHandle | None = None

        self.movement = MovementResolver(catalog)
        self.combat = CombatResolver(self)
        self.stack = StackResolver(self)
        self.turns = TurnController(self)
        self.projector = StateProjector(self)

        first_player.is_first_player = True
        self.state.players[first_player.player_id] = first_player
        self._deploy(first_player)

        logger.info("Game %s created by %s", room_id, first_player.player_id)
        self.send_message("Game created. Waiting for a second player…")
        self.send_state()

    # =========================================================================
    # Inbound operations
    # =========================================================================

    def join(self, player: Player) -> ActionResult:
        """Second player joins: deploy, then start the first turn."""
        with self.lock:
            if player.player_id in self.state.players:
                return ActionResult.failure("Already in this game", ErrorCode.ALREADY_JOINED)
            if len(self.state.players) >= 2:
                return ActionResult.failure("This game is full", ErrorCode.GAME_FULL)
            if not self.catalog.has_tribe(player.tribe):
                return ActionResult.failure(f"Unknown tribe: {player.tribe}", ErrorCode.UNKNOWN_TRIBE)

            player.is_first_player = False
            self.state.players[player.player_id] = player
            self._deploy(player)

            logger.info("Game %s joined by %s", self.room_id, player.player_id)
            self.send_message(f"**{player.name}** joined the game.")
            self.send_state()
            self.turns.start_turn(self.rng.choice(list(self.state.players)))
            return ActionResult.ok([f"{player.player_id} joined"])

    def leave(self, player_id: str) -> ActionResult:
        with self.lock:
            player = self.state.get_player(player_id)
            if player is None:
                return ActionResult.failure("Not a participant", ErrorCode.NOT_A_PARTICIPANT)
            self.left.add(player_id)
            logger.info("Game %s left by %s", self.room_id, player_id)
            self.send_message(f"**{player.name}** left the game.")
            return ActionResult.ok([f"{player_id} left"])

    def move(
        self,
        player_id: str,
        source: tuple[int, int],
        destination: tuple[int, int],
    ) -> ActionResult:
        """Move a card, or start a combat when the destination is contested."""
        with self.lock:
            error = self._check_request(player_id, TurnPhase.MAIN, active_only=True)
            if error:
                return self._reject(player_id, error)

            source, destination = tuple(source), tuple(destination)
            cell = self.state.cell_at(*source)
            if cell is None or cell.player != player_id:
                return self._reject(player_id, ActionResult.failure(
                    f"You have no card at {_coords(source)}", ErrorCode.ILLEGAL_MOVE,
                ))

            check = self.movement.check_move(self.state, cell, destination)
            if not check.is_valid:
                return self._reject(player_id, ActionResult.failure(
                    "Invalid move", ErrorCode.ILLEGAL_MOVE,
                ))

            if check.is_combat:
                self.combat.begin(cell, self.state.cell_at(*destination), check.path)
                return ActionResult.ok([f"combat at {_coords(destination)}"])

            card = self.resolve_card(cell.card)
            self.state.move_cell(source, destination)
            logger.debug("Move %s %s -> %s", card.slug, source, destination)
            self.send_state()
            self.send_message_to(
                player_id,
                f"**Move** - _{card.name}_ from _{_coords(source)}_ to _{_coords(destination)}_",
            )
            self.send_message_to(
                self.state.other_player_id(player_id),
                f"**Move** - Zoon from _{_coords(source)}_ to _{_coords(destination)}_",
            )
            self.stack.resolve()
            return ActionResult.ok([f"moved {_coords(source)} -> {_coords(destination)}"])

    def choose_corner(self, player_id: str, corner_index: int) -> ActionResult:
        """Pick a corner for the opposing side of the current combat."""
        with self.lock:
            error = self._check_request(player_id, TurnPhase.COMBAT)
            if error:
                return self._reject(player_id, error)
            result = self.combat.choose_corner(player_id, corner_index)
            if not result.success:
                return self._reject(player_id, result)
            return result

    def resolve_action(self, player_id: str, target: tuple[int, int]) -> ActionResult:
        """Answer the pending SELECT_CARD prompt."""
        with self.lock:
            error = self._check_request(player_id, TurnPhase.ACTION)
            if error:
                return self._reject(player_id, error)

            action = self.state.turn.action
            if action is None or action.options.get("player") != player_id:
                return self._reject(player_id, ActionResult.failure(
                    "This choice is not yours to make", ErrorCode.INVALID_CHOICE,
                ))

            target = tuple(target)
            if list(target) not in action.options.get("targets", []):
                return self._reject(player_id, ActionResult.failure(
                    f"Invalid target: {_coords(target)}", ErrorCode.INVALID_CHOICE,
                ))

            self.stack.answer(target)
            return ActionResult.ok([f"chose {_coords(target)}"])

    def legal_moves(self, player_id: str, source: tuple[int, int]) -> list[Destination]:
        """Legal destinations for one of the player's own cards."""
        with self.lock:
            cell = self.state.cell_at(*source)
            if cell is None or cell.player != player_id:
                return []
            return self.movement.legal_moves(self.state, cell)

    def view(self, player_id: str) -> dict[str, Any]:
        """Current projected state for one player."""
        with self.lock:
            return self.projector.project(player_id)

    # =========================================================================
    # Helpers for resolvers and power plugins
    # =========================================================================

    @property
    def is_over(self) -> bool:
        return self.state.turn.phase == TurnPhase.END

    def resolve_card(self, card) -> CardDefinition:
        return self.catalog.resolve_card(card)

    def player_name(self, player_id: str) -> str:
        player = self.state.get_player(player_id)
        return player.name if player else player_id

    def push(self, action: Action) -> None:
        self.stack.push(action)

    def eliminate(self, x: int, y: int, context: str = "combat") -> BoardCell:
        """Remove a card from the board; losing an emblem queues a win."""
        cell = self.state.remove_cell(x, y)
        self.state.graveyard.append(
            GraveyardEntry(cell=cell, turn=self.state.turn.count, context=context)
        )
        self.send_message(f"Zoon eliminated: **{self.resolve_card(cell.card).name}**")
        if cell.card.is_emblem:
            self.push(Action.win(self.state.other_player_id(cell.player)))
        return cell

    def end_game(self, winner_id: str) -> None:
        turn = self.state.turn
        turn.phase = TurnPhase.END
        turn.winner = winner_id
        self.stack.halt()
        self.cancel_timer()
        logger.info("Game %s over, winner %s", self.room_id, winner_id)
        self.send_state()
        self.send_message(
            f"Game over, **{self.player_name(winner_id)}** eliminated the opposing emblem."
        )

    def teardown(self) -> None:
        """Release timers; nothing is processed afterwards."""
        with self.lock:
            self.cancel_timer()
            self.stack.halt()

    def schedule_drain(self, delay: float | None = None) -> None:
        """Resume the stack drain after the combat pacing delay."""
        self.cancel_timer()
        delay = self.combat_delay if delay is None else delay
        self._timer = self.scheduler.call_later(delay, self._on_drain_timer)

    def cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def send_state(self) -> None:
        self.projector.broadcast()

    def send_message(self, message: str) -> None:
        self.transport.send_message(self.room_id, message)

    def send_message_to(self, player_id: str | None, message: str) -> None:
        if player_id is None:
            return
        self.transport.send_message(self.room_id, message, player_id=player_id)

    # =========================================================================
    # Internals
    # =========================================================================

    def _on_drain_timer(self) -> None:
        with self.lock:
            self._timer = None
            if self.is_over:
                return
            self.stack.resolve()

    def _deploy(self, player: Player) -> None:
        tribe = self.catalog.tribe(player.tribe)
        for y, row in enumerate(reversed(tribe.disposition)):
            for x, slug in enumerate(row):
                if slug is None:
                    continue
                px, py = (x, y) if player.is_first_player else mirror(x, y)
                self.state.place(BoardCell(
                    player=player.player_id, x=px, y=py, card=tribe.card_ref(slug),
                ))

    def _check_request(
        self,
        player_id: str,
        phase: TurnPhase,
        active_only: bool = False,
    ) -> ActionResult | None:
        if player_id not in self.state.players:
            return ActionResult.failure("Not a participant", ErrorCode.NOT_A_PARTICIPANT)
        if self.is_over:
            return ActionResult.failure("The game is over", ErrorCode.GAME_OVER)
        if self.state.turn.phase != phase:
            return ActionResult.failure(
                f"Not allowed during the {self.state.turn.phase.value} phase",
                ErrorCode.INVALID_PHASE,
            )
        if active_only and self.state.turn.active_player != player_id:
            return ActionResult.failure("It is not your turn", ErrorCode.NOT_YOUR_TURN)
        return None

    def _reject(self, player_id: str, result: ActionResult) -> ActionResult:
        logger.warning("Rejected request from %s in %s: %s", player_id, self.room_id, result.error)
        if player_id in self.state.players:
            self.send_message_to(player_id, f"**Error** - {result.error}")
        return result
