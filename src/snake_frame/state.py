from __future__ import annotations

import logging
import random

from .collision import CollisionPolicy
from .config import GameConfig
from .food import FoodSpawner
from .models import Direction, FoodMotion, GameSnapshot, Position, TickOutcome
from .positions import step

logger = logging.getLogger(__name__)


class GameState:
    """Authoritative state of one single-player game and its tick transition."""

    def __init__(self, config: GameConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self._collisions = CollisionPolicy(config.boundary_policy, config.grid_size)
        self._food = FoodSpawner(config.grid_size, config.food_policy, rng)

        self.snake: list[Position] = []
        self.food: Position = config.start_position
        self.direction = Direction.RIGHT
        self.pending_direction = Direction.RIGHT
        self.score = 0
        self.tick_interval_ms: float = config.initial_interval_ms
        self.game_over = False
        self.won = False
        self.reset()

    @property
    def grid_size(self) -> int:
        return self.config.grid_size

    @property
    def head(self) -> Position:
        return self.snake[0]

    def reset(self) -> None:
        self.snake = [self.config.start_position]
        self.direction = Direction.RIGHT
        self.pending_direction = Direction.RIGHT
        self.score = 0
        self.tick_interval_ms = self.config.initial_interval_ms
        self.game_over = False
        self.won = False
        food = self._food.spawn_avoiding(self.snake)
        if food is None:
            raise RuntimeError("no free cell for initial food")
        self.food = food

    def request_direction(self, candidate: Direction) -> bool:
        """Record ``candidate`` for the next tick unless it reverses the snake."""
        if self.game_over:
            return False
        if candidate == self.direction.opposite:
            return False
        self.pending_direction = candidate
        return True

    def tick(self) -> TickOutcome:
        if self.game_over:
            return TickOutcome(moved=False, game_over=True, won=self.won)

        direction = self.pending_direction
        decision = self._collisions.resolve(step(self.head, direction), self.snake)
        if decision.lethal:
            self.game_over = True
            logger.info(
                "snake collided: cause=%s head=%s score=%s",
                decision.cause.value,
                self.head,
                self.score,
            )
            return TickOutcome(moved=False, cause=decision.cause, game_over=True)

        self.direction = direction
        new_head = decision.head
        self.snake.insert(0, new_head)

        if new_head != self.food:
            self.snake.pop()
            return TickOutcome(moved=True)

        self.score += self.config.points_per_food
        self.tick_interval_ms = max(
            self.config.floor_interval_ms,
            self.tick_interval_ms * self.config.decay_factor,
        )
        food = self._food.spawn(self.snake)
        if food is None:
            self.game_over = True
            self.won = True
            logger.info("board filled: score=%s", self.score)
            return TickOutcome(moved=True, ate=True, game_over=True, won=True)
        self.food = food
        return TickOutcome(moved=True, ate=True)

    def move_food(self) -> Position:
        """Random-walk the food by one cell; a no-op once the game is over."""
        if not self.game_over and self.config.food_motion == FoodMotion.RANDOM_WALK:
            self.food = self._food.walk(self.food)
        return self.food

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            grid_size=self.grid_size,
            snake=tuple(self.snake),
            food=self.food,
            direction=self.direction,
            score=self.score,
            tick_interval_ms=self.tick_interval_ms,
            game_over=self.game_over,
            won=self.won,
        )
