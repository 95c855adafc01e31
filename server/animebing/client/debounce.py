"""Debounced search submission."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.4


class SearchDebouncer:
    """Run ``callback(query)`` only once input has been quiet for ``delay`` seconds.

    Every ``submit`` cancels the pending timer and starts a new one. A
    callback that is already running is never cancelled.
    """

    def __init__(self, callback: Callable[[str], Awaitable[Any]], delay: float = DEFAULT_DELAY):
        self.callback = callback
        self.delay = delay
        self._timer: Optional[asyncio.Task] = None
        self._pending: Optional[str] = None
        self._running: Optional[asyncio.Task] = None

    @property
    def pending(self) -> Optional[str]:
        return self._pending

    def submit(self, query: str) -> None:
        """Schedule ``query``, replacing anything not yet fired."""
        self._cancel_timer()
        self._pending = query
        self._timer = asyncio.get_running_loop().create_task(self._fire_later(query))

    def cancel(self) -> None:
        """Drop the pending query, if any."""
        self._cancel_timer()
        self._pending = None

    async def flush(self) -> None:
        """Run the pending query now instead of waiting for the timer."""
        if self._pending is None:
            return
        query = self._pending
        self.cancel()
        await self._fire(query)

    async def wait(self) -> None:
        """Wait until the pending timer (and the callback it starts) finish."""
        if self._timer is not None:
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
        if self._running is not None:
            await self._running

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire_later(self, query: str) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self._pending = None
        self._running = asyncio.current_task()
        try:
            await self._fire(query)
        finally:
            self._running = None

    async def _fire(self, query: str) -> None:
        logger.debug("Search settled on %r", query)
        await self.callback(query)
