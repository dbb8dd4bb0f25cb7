"""Cancelable asyncio timers used by the client components."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None] | None]


async def _invoke(callback: Callback) -> None:
    result = callback()
    if inspect.isawaitable(result):
        await result


class RepeatingTimer:
    """Runs a callback every ``interval`` seconds until stopped."""

    def __init__(self, interval: float, callback: Callback) -> None:
        self.interval = max(0.01, float(interval))
        self._callback = callback
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; a no-op when already running."""
        if not self.running:
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop ticking and wait for the loop to finish."""
        if self._task is None:
            return
        self._stopping.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await _invoke(self._callback)
            except Exception as exc:
                logger.warning("Timer callback failed: %s", exc)
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue


class OneShotTimer:
    """Runs a callback once after ``delay`` seconds unless cancelled or restarted."""

    def __init__(self, delay: float, callback: Callback) -> None:
        self.delay = max(0.0, float(delay))
        self._callback = callback
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def restart(self) -> None:
        """(Re)arm the timer from now."""
        self.cancel()
        self._task = asyncio.create_task(self._run())

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        try:
            await _invoke(self._callback)
        except Exception as exc:
            logger.warning("Timer callback failed: %s", exc)
