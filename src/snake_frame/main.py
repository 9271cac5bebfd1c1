from __future__ import annotations

import asyncio
import logging
import sys

from aiogram import Bot

from .bot import build_dispatcher
from .config import ConfigError, load_settings
from .logging_setup import setup_logging
from .manager import GameManager
from .notifier import TelegramNotifier

logger = logging.getLogger(__name__)


async def _run_async() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    bot = Bot(token=settings.telegram_bot_token)
    notifier = TelegramNotifier(
        bot=bot,
        render_min_interval_seconds=settings.render_min_interval_seconds,
    )
    manager = GameManager(
        config=settings.game,
        listener=notifier,
        seed=settings.seed,
    )
    dispatcher = build_dispatcher(
        manager=manager,
        owner_user_id=settings.owner_telegram_id,
        command_cooldown_seconds=settings.command_cooldown_seconds,
        board=notifier,
    )

    logger.info(
        "starting snake bot: grid_size=%s boundary=%s food_policy=%s food_motion=%s",
        settings.game.grid_size,
        settings.game.boundary_policy.value,
        settings.game.food_policy.value,
        settings.game.food_motion.value,
    )
    try:
        await dispatcher.start_polling(bot)
    finally:
        await manager.stop()
        await bot.session.close()


def run() -> int:
    try:
        asyncio.run(_run_async())
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        print("Hint: copy .env.example to .env and set required values.", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
