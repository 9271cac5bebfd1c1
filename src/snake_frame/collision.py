from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .models import BoundaryPolicy, CollisionCause, Position
from .positions import in_bounds, wrap


@dataclass(slots=True, frozen=True)
class CollisionDecision:
    head: Position
    cause: CollisionCause | None

    @property
    def lethal(self) -> bool:
        return self.cause is not None


class CollisionPolicy:
    """Decides whether a candidate head position ends the game.

    The boundary policy is chosen once per game. Under ``wrap`` the head is
    folded back onto the grid and only self overlap kills; under ``lethal``
    leaving ``[0, N)`` on either axis kills as well.
    """

    def __init__(self, boundary_policy: BoundaryPolicy, grid_size: int) -> None:
        self._boundary_policy = boundary_policy
        self._grid_size = grid_size

    def resolve(self, candidate: Position, snake: Sequence[Position]) -> CollisionDecision:
        if self._boundary_policy == BoundaryPolicy.WRAP:
            candidate = wrap(candidate, self._grid_size)
        elif not in_bounds(candidate, self._grid_size):
            return CollisionDecision(candidate, CollisionCause.BOUNDARY)

        # Index 0 is the head that is about to leave its cell.
        if any(segment == candidate for segment in snake[1:]):
            return CollisionDecision(candidate, CollisionCause.SELF)
        return CollisionDecision(candidate, None)
