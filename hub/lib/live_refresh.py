"""
Live refresh: re-fetch a channel's entries on a fixed interval.

Each tick is a full fetch followed by delivery of the complete list; the next
sleep only starts after delivery, so ticks never overlap. A failed fetch is
logged and reported, that tick is dropped, and polling carries on. A
SessionError is reported once and ends the poll.

Usage:
    poller = LiveRefresh(fetch=load_entries, on_update=send_entries, interval=30)
    poller.start()
    ...
    await poller.stop()
"""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from hub.lib import config
from hub.lib.errors import SessionError
from hub.lib.logger import setup_logger

logger = setup_logger("live_refresh")

Fetch = Callable[[], Awaitable[Any]]
Deliver = Callable[[Any], Awaitable[None]]
Report = Callable[[Exception], Awaitable[None]]


class LiveRefresh:
    """Cancellable fixed-interval poll tied to the lifetime of one view."""

    def __init__(
        self,
        fetch: Fetch,
        on_update: Deliver,
        interval: float = None,
        on_error: Optional[Report] = None,
        name: str = "entries",
    ):
        self.fetch = fetch
        self.on_update = on_update
        self.on_error = on_error
        self.interval = config.LIVE_REFRESH_SECONDS if interval is None else interval
        self.name = name
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin polling. A running poller is left as is."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Live refresh started for %s (every %.0fs)", self.name, self.interval)

    async def stop(self) -> None:
        """Cancel the poll and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Live refresh stopped for %s after %d ticks", self.name, self.ticks)

    async def tick(self) -> bool:
        """One fetch-and-replace cycle. Returns False once polling should end."""
        try:
            data = await self.fetch()
        except asyncio.CancelledError:
            raise
        except SessionError as e:
            # Retrying cannot succeed after logout
            logger.info("Live refresh for %s ended: %s", self.name, e.message)
            if self.on_error:
                await self.on_error(e)
            return False
        except Exception as e:
            logger.error("Live refresh fetch failed for %s: %s", self.name, e)
            if self.on_error:
                await self.on_error(e)
            return True
        self.ticks += 1
        await self.on_update(data)
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not await self.tick():
                break
