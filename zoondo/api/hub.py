"""
Connection Hub - WebSocket-backed transport.

Each connected (room, player) pair owns an asyncio queue. The engine puts
state payloads and messages on the queue; the websocket endpoint pumps
the queue to the socket.

Outgoing frames:
    {"type": "state", "payload": <projected state>}
    {"type": "message", "payload": {"text": <markdown text>}}
"""

from __future__ import annotations
from collections import defaultdict
from typing import Any
import asyncio
import logging


logger = logging.getLogger(__name__)


class ConnectionHub:
    """Transport delivering engine output to websocket queues."""

    def __init__(self):
        self._queues: dict[str, dict[str, asyncio.Queue]] = defaultdict(dict)
        self._loop: asyncio.AbstractEventLoop | None = None

    def connect(self, room_id: str, player_id: str) -> asyncio.Queue:
        """Open a channel; a reconnect replaces the previous queue."""
        self._loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        self._queues[room_id][player_id] = queue
        logger.debug("Channel opened for %s in %s", player_id, room_id)
        return queue

    def disconnect(self, room_id: str, player_id: str, queue: asyncio.Queue | None = None) -> None:
        room = self._queues.get(room_id)
        if not room:
            return
        if queue is None or room.get(player_id) is queue:
            room.pop(player_id, None)
            logger.debug("Channel closed for %s in %s", player_id, room_id)
        if not room:
            self._queues.pop(room_id, None)

    def has_channel(self, room_id: str, player_id: str) -> bool:
        return player_id in self._queues.get(room_id, {})

    def send_state(self, room_id: str, player_id: str, payload: dict[str, Any]) -> None:
        queue = self._queues.get(room_id, {}).get(player_id)
        if queue is not None:
            self._put(queue, {"type": "state", "payload": payload})

    def send_message(self, room_id: str, message: str, player_id: str | None = None) -> None:
        room = self._queues.get(room_id, {})
        if player_id is None:
            queues = list(room.values())
        else:
            queues = [room[player_id]] if player_id in room else []
        frame = {"type": "message", "payload": {"text": message}}
        for queue in queues:
            self._put(queue, frame)

    def _put(self, queue: asyncio.Queue, frame: dict[str, Any]) -> None:
        # Timer threads may deliver while the loop runs elsewhere
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if self._loop is None or running is self._loop:
            queue.put_nowait(frame)
        else:
            self._loop.call_soon_threadsafe(queue.put_nowait, frame)
