from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class GameClock:
    """Drives the movement schedule and the optional food-motion schedule.

    ``on_tick`` returns whether the game keeps running; a false result ends
    both schedules. ``interval_ms`` is read after every tick and a changed
    value re-arms the movement schedule with the new period.
    """

    def __init__(
        self,
        on_tick: Callable[[], bool],
        interval_ms: Callable[[], float],
        on_food_step: Callable[[], None] | None = None,
        food_interval_ms: float = 1000,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._on_tick = on_tick
        self._interval_ms = interval_ms
        self._on_food_step = on_food_step
        self._food_interval_ms = food_interval_ms
        self._sleep = sleep

        self._movement_task: asyncio.Task | None = None
        self._food_task: asyncio.Task | None = None
        self._period_ms: float | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def period_ms(self) -> float | None:
        return self._period_ms

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._arm_movement(self._interval_ms())
        if self._on_food_step is not None:
            self._food_task = asyncio.create_task(self._food_loop(self._on_food_step), name="snake-food-motion")

    async def stop(self) -> None:
        self._running = False
        tasks = [task for task in (self._movement_task, self._food_task) if task is not None]
        self._movement_task = None
        self._food_task = None
        self._period_ms = None
        current = asyncio.current_task()
        for task in tasks:
            if task is not current:
                task.cancel()
        for task in tasks:
            if task is current:
                continue
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _arm_movement(self, period_ms: float) -> None:
        self._period_ms = period_ms
        self._movement_task = asyncio.create_task(self._movement_loop(period_ms), name="snake-movement")

    async def _movement_loop(self, period_ms: float) -> None:
        while self._running:
            await self._sleep(period_ms / 1000)
            if not self._running:
                return
            if not self._on_tick():
                self._finish()
                return
            current = self._interval_ms()
            if current != period_ms:
                logger.debug("re-arming movement schedule: %sms -> %sms", period_ms, current)
                self._arm_movement(current)
                return

    async def _food_loop(self, on_food_step: Callable[[], None]) -> None:
        while self._running:
            await self._sleep(self._food_interval_ms / 1000)
            if not self._running:
                return
            on_food_step()

    def _finish(self) -> None:
        self._running = False
        self._period_ms = None
        self._movement_task = None
        if self._food_task is not None:
            self._food_task.cancel()
            self._food_task = None
