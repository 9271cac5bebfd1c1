from __future__ import annotations

from .models import Direction, Position

UNIT_VECTORS: dict[Direction, Position] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


def unit_vector(direction: Direction) -> Position:
    return UNIT_VECTORS[direction]


def add_vectors(a: Position, b: Position) -> Position:
    return (a[0] + b[0], a[1] + b[1])


def step(position: Position, direction: Direction) -> Position:
    return add_vectors(position, unit_vector(direction))


def wrap(position: Position, size: int) -> Position:
    # Python's % is already non-negative for a positive modulus.
    x, y = position
    return (x % size, y % size)


def clamp(position: Position, size: int) -> Position:
    x, y = position
    return (min(max(x, 0), size - 1), min(max(y, 0), size - 1))


def in_bounds(position: Position, size: int) -> bool:
    x, y = position
    return 0 <= x < size and 0 <= y < size


def all_cells(size: int) -> list[Position]:
    """Every cell of a size x size grid in row-major order."""
    return [(x, y) for y in range(size) for x in range(size)]
