from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from .models import Direction, FoodPolicy, Position
from .positions import all_cells, clamp, step

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 64


class FoodSpawner:
    """Places and moves the food cell.

    All randomness comes from the injected ``rng`` so a seeded generator
    replays the same food sequence.
    """

    def __init__(
        self,
        grid_size: int,
        policy: FoodPolicy = FoodPolicy.AVOID_ON_EAT,
        rng: random.Random | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._grid_size = grid_size
        self._policy = policy
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts

    def random_cell(self) -> Position:
        return (
            self._rng.randrange(self._grid_size),
            self._rng.randrange(self._grid_size),
        )

    def spawn(self, snake: Iterable[Position]) -> Position | None:
        """Return a new food cell under the configured placement policy.

        ``None`` means the snake covers the whole board.
        """
        if self._policy == FoodPolicy.NO_AVOID_ON_EAT:
            return self.random_cell()
        return self.spawn_avoiding(snake)

    def spawn_avoiding(self, snake: Iterable[Position]) -> Position | None:
        occupied = set(snake)
        for _ in range(self._max_attempts):
            candidate = self.random_cell()
            if candidate not in occupied:
                return candidate

        free_cells = [cell for cell in all_cells(self._grid_size) if cell not in occupied]
        if not free_cells:
            return None
        logger.debug(
            "food resampling exhausted, falling back to scan: occupied=%s free=%s",
            len(occupied),
            len(free_cells),
        )
        return free_cells[0]

    def walk(self, food: Position) -> Position:
        direction = self._rng.choice(list(Direction))
        return clamp(step(food, direction), self._grid_size)
