"""Scheduler-agnostic periodic task: a ticker plus a stop event as its cancellation token."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    def __init__(self, name: str, interval: float, tick: Callable[[], Awaitable[Any]]) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self._tick = tick
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info("Started periodic task %s (every %.1fs)", self.name, self.interval)

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None
        logger.info("Stopped periodic task %s", self.name)

    async def run_once(self) -> None:
        self.ticks += 1
        try:
            await self._tick()
        except Exception:
            logger.exception("Periodic task %s tick failed", self.name)

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), self.interval)
            except asyncio.TimeoutError:
                await self.run_once()
