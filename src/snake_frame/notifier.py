from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from aiogram import Bot
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from .models import GameSnapshot
from .render import render_board

logger = logging.getLogger(__name__)

KEY_CALLBACK_PREFIX = "key:"
PLAY_AGAIN_CALLBACK = "game:reset"
ARROW_BUTTONS: tuple[tuple[str, str], ...] = (
    ("⬅️", "ArrowLeft"),
    ("⬆️", "ArrowUp"),
    ("⬇️", "ArrowDown"),
    ("➡️", "ArrowRight"),
)


def arrow_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text=label, callback_data=f"{KEY_CALLBACK_PREFIX}{key}")
                for label, key in ARROW_BUTTONS
            ]
        ]
    )


def play_again_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text="🔁 Play again", callback_data=PLAY_AGAIN_CALLBACK)]]
    )


@dataclass(slots=True)
class _Board:
    message_id: int
    text: str
    edited_at: float


class TelegramNotifier:
    """Shows a game as one board message per chat, edited in place."""

    def __init__(
        self,
        bot: Bot,
        render_min_interval_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._bot = bot
        self._render_min_interval_seconds = render_min_interval_seconds
        self._clock = clock
        self._boards: dict[int, _Board] = {}

    def forget(self, chat_id: int) -> None:
        """Drop the board message so the next frame opens a fresh one."""
        self._boards.pop(chat_id, None)

    async def send_frame(self, chat_id: int, snapshot: GameSnapshot) -> None:
        board = self._boards.get(chat_id)
        if board is not None and self._clock() - board.edited_at < self._render_min_interval_seconds:
            return
        await self._show(chat_id, render_board(snapshot), keyboard=True)

    async def send_game_over(self, chat_id: int, snapshot: GameSnapshot) -> None:
        try:
            await self._show(chat_id, render_board(snapshot), keyboard=False)
        except Exception:
            logger.exception("failed to update final board for chat %s", chat_id)
        outcome = "You filled the board!" if snapshot.won else "Game over!"
        await self._bot.send_message(
            chat_id,
            f"{outcome} Score: {snapshot.score}\nTap Play again or use /reset.",
            reply_markup=play_again_keyboard(),
        )

    async def _show(self, chat_id: int, text: str, keyboard: bool) -> None:
        markup = arrow_keyboard() if keyboard else None
        board = self._boards.get(chat_id)
        now = self._clock()
        if board is None:
            sent = await self._bot.send_message(chat_id, text, reply_markup=markup)
            self._boards[chat_id] = _Board(message_id=sent.message_id, text=text, edited_at=now)
            return
        if board.text == text:
            return
        await self._bot.edit_message_text(
            text=text,
            chat_id=chat_id,
            message_id=board.message_id,
            reply_markup=markup,
        )
        board.text = text
        board.edited_at = now
