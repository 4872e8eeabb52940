"""
Transport - Delivery of state payloads and system messages.

The engine never talks to sockets directly. It only needs:
- whether a player currently has a delivery channel
- deliver a state payload to one player
- deliver a system message to one player or to the whole room

A player without a channel is skipped silently: disconnection is not
an error.
"""

from __future__ import annotations
from collections import defaultdict
from typing import Any, Protocol


class Transport(Protocol):
    def has_channel(self, room_id: str, player_id: str) -> bool: ...

    def send_state(self, room_id: str, player_id: str, payload: dict[str, Any]) -> None: ...

    def send_message(self, room_id: str, message: str, player_id: str | None = None) -> None: ...


class InMemoryTransport:
    """
    Transport that keeps everything in memory.

    Used for local play and tests: each connected player gets an inbox
    of states and messages.
    """

    def __init__(self):
        self._channels: dict[str, set[str]] = defaultdict(set)
        self.states: dict[tuple[str, str], list[dict[str, Any]]] = defaultdict(list)
        self.messages: dict[tuple[str, str], list[str]] = defaultdict(list)

    def connect(self, room_id: str, player_id: str) -> None:
        self._channels[room_id].add(player_id)

    def disconnect(self, room_id: str, player_id: str) -> None:
        self._channels[room_id].discard(player_id)

    def has_channel(self, room_id: str, player_id: str) -> bool:
        return player_id in self._channels.get(room_id, ())

    def send_state(self, room_id: str, player_id: str, payload: dict[str, Any]) -> None:
        if self.has_channel(room_id, player_id):
            self.states[(room_id, player_id)].append(payload)

    def send_message(self, room_id: str, message: str, player_id: str | None = None) -> None:
        if player_id is None:
            recipients = list(self._channels.get(room_id, ()))
        elif self.has_channel(room_id, player_id):
            recipients = [player_id]
        else:
            recipients = []
        for recipient in recipients:
            self.messages[(room_id, recipient)].append(message)

    def last_state(self, room_id: str, player_id: str) -> dict[str, Any] | None:
        states = self.states.get((room_id, player_id))
        return states[-1] if states else None

    def messages_for(self, room_id: str, player_id: str) -> list[str]:
        return list(self.messages.get((room_id, player_id), []))
