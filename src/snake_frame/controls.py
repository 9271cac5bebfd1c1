from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .models import Direction
from .state import GameState

logger = logging.getLogger(__name__)

KEY_DIRECTIONS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}


class InputController:
    """Turns key presses and swipe gestures into direction requests.

    The controller only ever writes ``pending_direction``; ticks decide what
    happens with it. Once closed it ignores everything.
    """

    def __init__(self, state: GameState) -> None:
        self._state: GameState | None = state
        self._swipe_start: tuple[float, float] | None = None

    @property
    def closed(self) -> bool:
        return self._state is None

    def close(self) -> None:
        self._state = None
        self._swipe_start = None

    def request_direction(self, candidate: Direction) -> bool:
        if self._state is None:
            return False
        return self._state.request_direction(candidate)

    def handle_key(self, key: str) -> bool:
        direction = KEY_DIRECTIONS.get(key)
        if direction is None:
            return False
        return self.request_direction(direction)

    def begin_swipe(self, x: float, y: float) -> None:
        if self._state is None:
            return
        self._swipe_start = (x, y)

    def move_swipe(self, x: float, y: float) -> bool:
        if self._swipe_start is None:
            return False
        direction = swipe_direction(x - self._swipe_start[0], y - self._swipe_start[1])
        if direction is None:
            return False
        return self.request_direction(direction)


def swipe_direction(dx: float, dy: float) -> Direction | None:
    # Screen coordinates: y grows downwards. Ties go to the vertical axis.
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    if dy > 0:
        return Direction.DOWN
    if dy < 0:
        return Direction.UP
    return None


@dataclass(slots=True)
class InputBinding:
    chat_id: int
    release: Callable[[], None]


class InputRouter:
    """Routes chat input to the controller of the game running in that chat."""

    def __init__(self) -> None:
        self._controllers: dict[int, InputController] = {}

    def bind(self, chat_id: int, controller: InputController) -> InputBinding:
        self._controllers[chat_id] = controller

        def _release() -> None:
            if self._controllers.get(chat_id) is controller:
                self._controllers.pop(chat_id, None)

        return InputBinding(chat_id=chat_id, release=_release)

    def key(self, chat_id: int, key: str) -> bool:
        controller = self._controllers.get(chat_id)
        if controller is None:
            return False
        accepted = controller.handle_key(key)
        logger.debug("key input: chat_id=%s key=%s accepted=%s", chat_id, key, accepted)
        return accepted

    def direction(self, chat_id: int, direction: Direction) -> bool:
        controller = self._controllers.get(chat_id)
        if controller is None:
            return False
        return controller.request_direction(direction)
