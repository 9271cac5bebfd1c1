from __future__ import annotations

import asyncio
import logging
import random

from .clock import SleepFn
from .config import GameConfig
from .controls import InputRouter
from .models import Direction
from .session import FrameListener, GameSession

logger = logging.getLogger(__name__)


class GameManager:
    """Keeps at most one game session per chat.

    ``play``, ``reset`` and ``stop_game`` for the same chat run one at a
    time, so a session is never started while another is still stopping.
    """

    def __init__(
        self,
        config: GameConfig,
        listener: FrameListener | None = None,
        seed: int | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._config = config
        self._listener = listener
        self._seed = seed
        self._sleep = sleep
        self._router = InputRouter()
        self._sessions: dict[int, GameSession] = {}
        self._locks: dict[int, asyncio.Lock] = {}

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def router(self) -> InputRouter:
        return self._router

    def get(self, chat_id: int) -> GameSession | None:
        return self._sessions.get(chat_id)

    def _lock(self, chat_id: int) -> asyncio.Lock:
        lock = self._locks.get(chat_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[chat_id] = lock
        return lock

    async def play(self, chat_id: int) -> GameSession:
        async with self._lock(chat_id):
            return await self._play(chat_id)

    async def reset(self, chat_id: int) -> GameSession:
        async with self._lock(chat_id):
            session = self._sessions.get(chat_id)
            if session is None:
                return await self._play(chat_id)
            await session.reset()
            return session

    async def stop_game(self, chat_id: int) -> GameSession | None:
        async with self._lock(chat_id):
            return await self._stop_game(chat_id)

    async def _play(self, chat_id: int) -> GameSession:
        await self._stop_game(chat_id)
        rng = random.Random(self._seed) if self._seed is not None else None
        session = GameSession(
            chat_id=chat_id,
            config=self._config,
            router=self._router,
            listener=self._listener,
            rng=rng,
            sleep=self._sleep,
        )
        self._sessions[chat_id] = session
        await session.start()
        return session

    async def _stop_game(self, chat_id: int) -> GameSession | None:
        session = self._sessions.pop(chat_id, None)
        if session is not None:
            await session.stop()
        return session

    def steer(self, chat_id: int, direction: Direction) -> bool:
        return self._router.direction(chat_id, direction)

    def press_key(self, chat_id: int, key: str) -> bool:
        return self._router.key(chat_id, key)

    async def stop(self) -> None:
        chat_ids = list(self._sessions)
        results = await asyncio.gather(*(self.stop_game(chat_id) for chat_id in chat_ids), return_exceptions=True)
        for chat_id, result in zip(chat_ids, results):
            if isinstance(result, Exception):
                logger.error("failed to stop session for chat %s", chat_id, exc_info=result)
