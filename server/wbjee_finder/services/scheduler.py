"""Periodic background jobs run on the asyncio event loop."""

import asyncio
import contextlib
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run ``handler`` every ``interval`` seconds until stopped.

    ``run_once`` executes the handler synchronously so callers (and tests)
    can trigger a pass without waiting on the timer.
    """

    def __init__(self, name: str, interval: float, handler: Callable[[], None]):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.interval = interval
        self.handler = handler
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> None:
        """Execute the handler, logging rather than propagating its failures."""
        try:
            self.handler()
        except Exception:
            logger.exception("Periodic task %s failed", self.name)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.run_once()

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.debug("Started periodic task %s (interval=%ss)", self.name, self.interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.debug("Stopped periodic task %s", self.name)
