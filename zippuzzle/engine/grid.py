"""Square grid bounds and orthogonal adjacency."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterator, List

from ..core.constants import ORTHOGONAL_STEPS
from ..core.models import Position


@dataclass(frozen=True)
class GridModel:
    """Bounds and 4-neighbour adjacency of an ``size`` x ``size`` grid."""

    size: int

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Grid size must be at least 1, got {self.size}")

    @property
    def total_cells(self) -> int:
        return self.size * self.size

    def is_in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def neighbors4(self, pos: Position) -> List[Position]:
        neighbors: List[Position] = []
        for dx, dy in ORTHOGONAL_STEPS:
            candidate = Position(pos.x + dx, pos.y + dy)
            if self.is_in_bounds(candidate):
                neighbors.append(candidate)
        return neighbors

    def unvisited_neighbors(
        self, pos: Position, visited: AbstractSet[Position]
    ) -> List[Position]:
        return [n for n in self.neighbors4(pos) if n not in visited]

    def count_unvisited_neighbors(
        self, pos: Position, visited: AbstractSet[Position]
    ) -> int:
        return sum(1 for n in self.neighbors4(pos) if n not in visited)

    def corners(self) -> List[Position]:
        last = self.size - 1
        return [
            Position(0, 0),
            Position(0, last),
            Position(last, 0),
            Position(last, last),
        ]

    def cells(self) -> Iterator[Position]:
        for y in range(self.size):
            for x in range(self.size):
                yield Position(x, y)
