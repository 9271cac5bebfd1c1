from types import SimpleNamespace

import pytest

from snake_frame.models import Direction, GameSnapshot
from snake_frame.notifier import KEY_CALLBACK_PREFIX, PLAY_AGAIN_CALLBACK, TelegramNotifier, arrow_keyboard


class FakeBot:
    def __init__(self) -> None:
        self.messages: list[tuple[int, str]] = []
        self.edits: list[tuple[int, int, str, object]] = []
        self.markups: list[object] = []

    async def send_message(self, chat_id: int, text: str, reply_markup=None):  # type: ignore[no-untyped-def]
        self.messages.append((chat_id, text))
        self.markups.append(reply_markup)
        return SimpleNamespace(message_id=500 + len(self.messages))

    async def edit_message_text(self, text: str, chat_id: int, message_id: int, reply_markup=None):  # type: ignore[no-untyped-def]
        self.edits.append((chat_id, message_id, text, reply_markup))


class FailingEditBot(FakeBot):
    async def edit_message_text(self, text: str, chat_id: int, message_id: int, reply_markup=None):  # type: ignore[no-untyped-def]
        raise RuntimeError("message to edit not found")


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _snapshot(head=(1, 1), score: int = 0, game_over: bool = False, won: bool = False) -> GameSnapshot:  # type: ignore[no-untyped-def]
    return GameSnapshot(
        grid_size=4,
        snake=(head,),
        food=(3, 3),
        direction=Direction.RIGHT,
        score=score,
        tick_interval_ms=200,
        game_over=game_over,
        won=won,
    )


def test_arrow_keyboard_carries_key_names() -> None:
    keyboard = arrow_keyboard()

    data = [button.callback_data for button in keyboard.inline_keyboard[0]]

    assert data == [f"{KEY_CALLBACK_PREFIX}{key}" for key in ("ArrowLeft", "ArrowUp", "ArrowDown", "ArrowRight")]


@pytest.mark.asyncio
async def test_first_frame_opens_board_then_edits_are_throttled() -> None:
    bot = FakeBot()
    clock = FakeClock()
    notifier = TelegramNotifier(bot=bot, render_min_interval_seconds=1.0, clock=clock)  # type: ignore[arg-type]

    await notifier.send_frame(42, _snapshot(head=(1, 1)))
    clock.now += 0.2
    await notifier.send_frame(42, _snapshot(head=(2, 1)))
    clock.now += 1.0
    await notifier.send_frame(42, _snapshot(head=(3, 1)))

    assert len(bot.messages) == 1
    assert bot.messages[0][0] == 42
    assert len(bot.edits) == 1
    chat_id, message_id, text, markup = bot.edits[0]
    assert (chat_id, message_id) == (42, 501)
    assert text.splitlines()[2] == "⬛⬛⬛🐍"
    assert markup is not None


@pytest.mark.asyncio
async def test_unchanged_board_is_not_edited() -> None:
    bot = FakeBot()
    clock = FakeClock()
    notifier = TelegramNotifier(bot=bot, render_min_interval_seconds=0.0, clock=clock)  # type: ignore[arg-type]

    await notifier.send_frame(42, _snapshot())
    await notifier.send_frame(42, _snapshot())

    assert bot.edits == []


@pytest.mark.asyncio
async def test_game_over_bypasses_throttle_and_announces_score() -> None:
    bot = FakeBot()
    clock = FakeClock()
    notifier = TelegramNotifier(bot=bot, render_min_interval_seconds=5.0, clock=clock)  # type: ignore[arg-type]

    await notifier.send_frame(42, _snapshot())
    await notifier.send_game_over(42, _snapshot(score=300, game_over=True))

    assert len(bot.edits) == 1
    assert bot.edits[0][3] is None
    assert bot.messages[-1] == (42, "Game over! Score: 300\nTap Play again or use /reset.")
    buttons = bot.markups[-1].inline_keyboard
    assert [button.callback_data for row in buttons for button in row] == [PLAY_AGAIN_CALLBACK]


@pytest.mark.asyncio
async def test_game_over_message_survives_failed_board_edit() -> None:
    bot = FailingEditBot()
    notifier = TelegramNotifier(bot=bot, clock=FakeClock())  # type: ignore[arg-type]

    await notifier.send_frame(42, _snapshot())
    await notifier.send_game_over(42, _snapshot(score=1600, game_over=True, won=True))

    assert bot.messages[-1][1].startswith("You filled the board! Score: 1600")


@pytest.mark.asyncio
async def test_forget_opens_a_fresh_board() -> None:
    bot = FakeBot()
    notifier = TelegramNotifier(bot=bot, clock=FakeClock())  # type: ignore[arg-type]

    await notifier.send_frame(42, _snapshot())
    notifier.forget(42)
    await notifier.send_frame(42, _snapshot())

    assert len(bot.messages) == 2
    assert bot.edits == []
