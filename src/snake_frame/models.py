from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

Position = tuple[int, int]


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class BoundaryPolicy(StrEnum):
    WRAP = "wrap"
    LETHAL = "lethal"


class FoodPolicy(StrEnum):
    AVOID_ON_EAT = "avoid-on-eat"
    NO_AVOID_ON_EAT = "no-avoid-on-eat"


class FoodMotion(StrEnum):
    STATIC = "static"
    RANDOM_WALK = "random-walk"


class CollisionCause(StrEnum):
    BOUNDARY = "boundary"
    SELF = "self"


@dataclass(slots=True, frozen=True)
class TickOutcome:
    moved: bool
    ate: bool = False
    cause: CollisionCause | None = None
    game_over: bool = False
    won: bool = False


@dataclass(slots=True, frozen=True)
class GameSnapshot:
    grid_size: int
    snake: tuple[Position, ...]
    food: Position
    direction: Direction
    score: int
    tick_interval_ms: float
    game_over: bool
    won: bool = False

    @property
    def head(self) -> Position:
        return self.snake[0]

    @property
    def length(self) -> int:
        return len(self.snake)
