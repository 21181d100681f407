"""
Countdown ticker for InterviewDesk

Runs the per-second countdown of the active question as a background
asyncio task. The ticker only calls ``tick()``; it never submits. When
time runs out it invokes the optional ``on_expired`` callback so the
caller can decide what to do.
"""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class CountdownTicker:
    """Periodic task that ticks one question's countdown to zero."""

    def __init__(
        self,
        tick: Callable[[], Awaitable[int]],
        interval_seconds: float = 1.0,
        on_expired: Callable[[], Awaitable[None]] | None = None,
    ):
        """
        Args:
            tick: Coroutine that decrements the countdown and returns seconds
                remaining; returning 0 ends the ticker
            interval_seconds: Delay between ticks
            on_expired: Awaited once when the countdown reaches zero
        """
        self._tick = tick
        self.interval_seconds = interval_seconds
        self._on_expired = on_expired
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. No-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish."""
        task, self._task = self._task, None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            remaining = await self._tick()
            if remaining <= 0:
                break

        if self._on_expired is not None:
            try:
                await self._on_expired()
            except Exception as e:
                logger.error(f"Countdown expiry callback error: {e}")
