from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol

from aiogram import Dispatcher, F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message, User

from .manager import GameManager
from .models import Direction
from .notifier import KEY_CALLBACK_PREFIX, PLAY_AGAIN_CALLBACK

HELP_TEXT = """
Snake, right here in the chat.

Commands:
/play - start a new game (replaces the current one)
/reset - restart the current game from scratch
/stop - stop the current game
/score - show the current score
/up /down /left /right - steer the snake
/help - show this help

Use the arrow buttons under the board to steer and the Play again button after a game over.
The snake cannot turn straight back into itself.
""".strip()

DIRECTION_COMMANDS = {direction.value: direction for direction in Direction}


class BoardProtocol(Protocol):
    def forget(self, chat_id: int) -> None: ...


@dataclass(slots=True)
class BotContext:
    owner_user_id: int
    command_cooldown_seconds: float


class CommandGuard:
    def __init__(self, context: BotContext) -> None:
        self._context = context
        self._last_seen: dict[int, float] = {}

    def is_owner(self, user: User | None) -> bool:
        return user is not None and user.id == self._context.owner_user_id

    async def authorize(self, message: Message) -> bool:
        user = message.from_user
        if not self.is_owner(user):
            await message.answer("Unauthorized")
            return False
        now = time.monotonic()
        last = self._last_seen.get(user.id)
        if last is not None and now - last < self._context.command_cooldown_seconds:
            wait_for = self._context.command_cooldown_seconds - (now - last)
            await message.answer(f"Rate limited. Retry in {wait_for:.1f}s")
            return False
        self._last_seen[user.id] = now
        return True


def _chat_id(message: Message) -> int:
    if message.chat is not None:
        return int(message.chat.id)
    user = message.from_user
    if user is None:
        raise RuntimeError("Message has no chat or user")
    return int(user.id)


def _callback_chat_id(callback: CallbackQuery) -> int:
    message = callback.message
    if message is not None and message.chat is not None:
        return int(message.chat.id)
    return int(callback.from_user.id)


def _parse_key(data: str | None) -> str | None:
    if not data or not data.startswith(KEY_CALLBACK_PREFIX):
        return None
    key = data[len(KEY_CALLBACK_PREFIX) :].strip()
    return key or None


def build_dispatcher(
    manager: GameManager,
    owner_user_id: int,
    command_cooldown_seconds: float,
    board: BoardProtocol | None = None,
) -> Dispatcher:
    dispatcher = Dispatcher()
    router = Router()
    guard = CommandGuard(
        BotContext(
            owner_user_id=owner_user_id,
            command_cooldown_seconds=command_cooldown_seconds,
        )
    )

    def _forget_board(chat_id: int) -> None:
        if board is not None:
            board.forget(chat_id)

    @router.message(Command("start", "help"))
    async def help_handler(message: Message) -> None:
        if not await guard.authorize(message):
            return
        await message.answer(HELP_TEXT)

    @router.message(Command("play"))
    async def play_handler(message: Message) -> None:
        if not await guard.authorize(message):
            return
        chat_id = _chat_id(message)
        _forget_board(chat_id)
        await manager.play(chat_id)

    @router.message(Command("reset"))
    async def reset_handler(message: Message) -> None:
        if not await guard.authorize(message):
            return
        chat_id = _chat_id(message)
        _forget_board(chat_id)
        await manager.reset(chat_id)

    @router.message(Command("stop"))
    async def stop_handler(message: Message) -> None:
        if not await guard.authorize(message):
            return
        chat_id = _chat_id(message)
        session = await manager.stop_game(chat_id)
        _forget_board(chat_id)
        if session is None:
            await message.answer("No game running. Use /play to start one.")
            return
        await message.answer(f"Game stopped. Score: {session.score}")

    @router.message(Command("score"))
    async def score_handler(message: Message) -> None:
        if not await guard.authorize(message):
            return
        session = manager.get(_chat_id(message))
        if session is None:
            await message.answer("No game running. Use /play to start one.")
            return
        snapshot = session.snapshot()
        state = "over" if snapshot.game_over else "running"
        await message.answer(f"Score: {snapshot.score} (length {snapshot.length}, {state})")

    @router.message(Command(*DIRECTION_COMMANDS))
    async def direction_handler(message: Message) -> None:
        # Steering skips the cooldown; it has to keep up with the tick rate.
        if not guard.is_owner(message.from_user):
            return
        command = (message.text or "").strip().split(maxsplit=1)[0].lstrip("/").split("@", 1)[0].lower()
        direction = DIRECTION_COMMANDS.get(command)
        if direction is None:
            return
        manager.steer(_chat_id(message), direction)

    @router.callback_query(F.data.startswith(KEY_CALLBACK_PREFIX))
    async def key_handler(callback: CallbackQuery) -> None:
        if not guard.is_owner(callback.from_user):
            await callback.answer("Unauthorized")
            return
        key = _parse_key(callback.data)
        if key is not None:
            manager.press_key(_callback_chat_id(callback), key)
        await callback.answer()

    @router.callback_query(F.data == PLAY_AGAIN_CALLBACK)
    async def play_again_handler(callback: CallbackQuery) -> None:
        if not guard.is_owner(callback.from_user):
            await callback.answer("Unauthorized")
            return
        chat_id = _callback_chat_id(callback)
        _forget_board(chat_id)
        await manager.reset(chat_id)
        await callback.answer()

    dispatcher.include_router(router)
    return dispatcher
