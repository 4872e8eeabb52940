"""
Schedulers - Cancellable delayed callbacks.

The combat resolver pauses before draining the stack again. The pause is a
delayed task owned by the game: it is cancelled when the game ends or is
torn down.
"""

from __future__ import annotations
import asyncio
import threading
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Schedules callbacks on an asyncio event loop.

    Used by the API: inbound requests and timers then run on the same
    loop, one at a time.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class ThreadTimerScheduler:
    """Schedules callbacks on daemon timer threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
