from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from typing import Protocol

from .clock import GameClock, SleepFn
from .config import GameConfig
from .controls import InputController, InputRouter
from .models import FoodMotion, GameSnapshot
from .state import GameState

logger = logging.getLogger(__name__)


class FrameListener(Protocol):
    async def send_frame(self, chat_id: int, snapshot: GameSnapshot) -> None: ...

    async def send_game_over(self, chat_id: int, snapshot: GameSnapshot) -> None: ...


class GameSession:
    """One running game: state, clock and input binding for a single chat.

    Everything acquired by ``start`` is released by ``stop``, including on
    error paths when the session is used as an async context manager.
    """

    def __init__(
        self,
        chat_id: int,
        config: GameConfig,
        router: InputRouter,
        listener: FrameListener | None = None,
        rng: random.Random | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.chat_id = chat_id
        self.state = GameState(config, rng)
        self._router = router
        self._listener = listener
        self._sleep = sleep

        self._clock: GameClock | None = None
        self._controller: InputController | None = None
        self._resources = contextlib.ExitStack()
        self._publish_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._clock is not None and self._clock.running

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def controller(self) -> InputController | None:
        return self._controller

    def snapshot(self) -> GameSnapshot:
        return self.state.snapshot()

    async def __aenter__(self) -> GameSession:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def start(self) -> None:
        if self._clock is not None:
            return
        config = self.state.config
        controller = InputController(self.state)
        binding = self._router.bind(self.chat_id, controller)
        self._resources.callback(binding.release)
        self._resources.callback(controller.close)
        self._controller = controller

        on_food_step = self._on_food_step if config.food_motion == FoodMotion.RANDOM_WALK else None
        self._clock = GameClock(
            on_tick=self._on_tick,
            interval_ms=lambda: self.state.tick_interval_ms,
            on_food_step=on_food_step,
            food_interval_ms=config.food_motion_interval_ms,
            sleep=self._sleep,
        )
        self._clock.start()
        logger.info("game session started: chat_id=%s", self.chat_id)
        self._publish()

    async def stop(self) -> None:
        clock = self._clock
        self._clock = None
        try:
            if clock is not None:
                await clock.stop()
        finally:
            self._release_input()
        if self._publish_task is not None:
            await asyncio.wait([self._publish_task])
            self._publish_task = None
        if clock is not None:
            logger.info("game session stopped: chat_id=%s score=%s", self.chat_id, self.state.score)

    async def reset(self) -> None:
        await self.stop()
        self.state.reset()
        await self.start()

    def _on_tick(self) -> bool:
        outcome = self.state.tick()
        if outcome.game_over:
            logger.info(
                "game over: chat_id=%s score=%s won=%s",
                self.chat_id,
                self.state.score,
                outcome.won,
            )
            self._publish(final=True)
            self._release_input()
            return False
        self._publish()
        return True

    def _release_input(self) -> None:
        self._resources.close()
        self._controller = None

    def _on_food_step(self) -> None:
        self.state.move_food()
        self._publish()

    def _publish(self, final: bool = False) -> None:
        if self._listener is None:
            return
        previous = self._publish_task
        if previous is not None and not previous.done():
            if not final:
                return
        else:
            previous = None
        self._publish_task = asyncio.create_task(
            self._deliver(self._listener, self.state.snapshot(), final, previous),
            name=f"snake-frame-{self.chat_id}",
        )

    async def _deliver(
        self,
        listener: FrameListener,
        snapshot: GameSnapshot,
        final: bool,
        previous: asyncio.Task | None,
    ) -> None:
        if previous is not None:
            await asyncio.wait([previous])
        try:
            if final:
                await listener.send_game_over(self.chat_id, snapshot)
            else:
                await listener.send_frame(self.chat_id, snapshot)
        except Exception:
            logger.exception("failed to deliver frame: chat_id=%s final=%s", self.chat_id, final)
