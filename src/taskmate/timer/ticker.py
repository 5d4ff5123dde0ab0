# src/taskmate/timer/ticker.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class AsyncioRepeatingHandle:
    """
    Repeating callback on an asyncio loop (setInterval equivalent).

    Each delivery re-arms the next one with loop.call_later() before running the
    callback. cancel() cancels the pending TimerHandle and sets a flag that every
    delivery checks first, so nothing fires after cancel() returns, even when the
    callback itself cancels the handle.

    Not thread-safe: create, fire and cancel on the loop thread.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_seconds: float,
        callback: Callable[[], None],
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._loop = loop
        self._interval = float(interval_seconds)
        self._callback = callback
        self._cancelled = False
        self._next: asyncio.TimerHandle | None = loop.call_later(self._interval, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._next is not None:
            self._next.cancel()
            self._next = None

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._next = self._loop.call_later(self._interval, self._fire)
        try:
            self._callback()
        except Exception:
            logger.exception("Repeating callback failed; cancelling.")
            self.cancel()


class AsyncioTickScheduler:
    """TickScheduler backed by the running asyncio loop (resolved lazily)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> AsyncioRepeatingHandle:
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioRepeatingHandle(loop, interval_seconds, callback)
