"""Data models shared by the generator, validator and play session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass(frozen=True, order=True)
class Position:
    """A grid cell addressed by column ``x`` and row ``y``."""

    x: int
    y: int

    def manhattan(self, other: Position) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def is_adjacent(self, other: Position) -> bool:
        return self.manhattan(other) == 1

    def to_jsonable(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_jsonable(cls, payload: Any) -> Position:
        if isinstance(payload, dict):
            return cls(int(payload["x"]), int(payload["y"]))
        x, y = payload
        return cls(int(x), int(y))


Path = List[Position]


@dataclass(frozen=True)
class Checkpoint:
    """A numbered waypoint the solution must pass in ascending order."""

    position: Position
    number: int

    def to_jsonable(self) -> Dict[str, Any]:
        return {"position": self.position.to_jsonable(), "number": self.number}

    @classmethod
    def from_jsonable(cls, payload: Dict[str, Any]) -> Checkpoint:
        return cls(
            position=Position.from_jsonable(payload["position"]),
            number=int(payload["number"]),
        )


@dataclass(frozen=True)
class Puzzle:
    """An immutable generated puzzle together with its solution path."""

    id: str
    grid_size: int
    checkpoints: Tuple[Checkpoint, ...]
    solution_path: Tuple[Position, ...]
    _by_position: Dict[Position, Checkpoint] = field(
        default=None, init=False, repr=False, compare=False  # type: ignore[assignment]
    )

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so the instance stays immutable.
        checkpoints = tuple(sorted(self.checkpoints, key=lambda cp: cp.number))
        object.__setattr__(self, "checkpoints", checkpoints)
        object.__setattr__(self, "solution_path", tuple(self.solution_path))
        object.__setattr__(
            self, "_by_position", {cp.position: cp for cp in checkpoints}
        )

    @property
    def total_cells(self) -> int:
        return self.grid_size * self.grid_size

    @property
    def final_checkpoint(self) -> Optional[Checkpoint]:
        return self.checkpoints[-1] if self.checkpoints else None

    def checkpoint_at(self, position: Position) -> Optional[Checkpoint]:
        return self._by_position.get(position)

    def checkpoint_by_number(self, number: int) -> Optional[Checkpoint]:
        if 1 <= number <= len(self.checkpoints):
            checkpoint = self.checkpoints[number - 1]
            if checkpoint.number == number:
                return checkpoint
        for checkpoint in self.checkpoints:
            if checkpoint.number == number:
                return checkpoint
        return None

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "gridSize": self.grid_size,
            "checkpoints": [cp.to_jsonable() for cp in self.checkpoints],
            "solutionPath": [pos.to_jsonable() for pos in self.solution_path],
        }

    @classmethod
    def from_jsonable(cls, payload: Dict[str, Any]) -> Puzzle:
        return cls(
            id=str(payload["id"]),
            grid_size=int(payload["gridSize"]),
            checkpoints=tuple(
                Checkpoint.from_jsonable(entry) for entry in payload["checkpoints"]
            ),
            solution_path=tuple(
                Position.from_jsonable(entry) for entry in payload.get("solutionPath", [])
            ),
        )


def path_from_jsonable(payload: Sequence[Any]) -> Path:
    return [Position.from_jsonable(entry) for entry in payload]
