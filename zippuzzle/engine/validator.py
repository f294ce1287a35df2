"""Structural validation of generated puzzles and player solutions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.exceptions import ValidationError
from ..core.models import Checkpoint, Position, Puzzle
from ..utils.logger import get_logger
from .grid import GridModel


LOGGER = get_logger(__name__)


@dataclass
class SolutionReport:
    is_valid: bool
    is_complete: bool
    errors: List[str] = field(default_factory=list)

    @property
    def solved(self) -> bool:
        return self.is_valid and self.is_complete


def index_path(path: Sequence[Position]) -> Dict[Position, int]:
    """Map each cell to its first index on ``path``."""

    indices: Dict[Position, int] = {}
    for index, pos in enumerate(path):
        indices.setdefault(pos, index)
    return indices


def is_continuous(path: Sequence[Position]) -> bool:
    return all(path[i - 1].is_adjacent(path[i]) for i in range(1, len(path)))


def has_unique_cells(path: Sequence[Position]) -> bool:
    return len(set(path)) == len(path)


class PuzzleValidator:
    """Runs deterministic checks over candidate puzzles and drawn paths."""

    def __init__(self, grid: GridModel) -> None:
        self.grid = grid

    # ------------------------------------------------------------------
    # Generated puzzles
    # ------------------------------------------------------------------
    def validate_generated_puzzle(
        self, path: Sequence[Position], checkpoints: Sequence[Checkpoint]
    ) -> bool:
        try:
            self.check_generated_puzzle(path, checkpoints)
        except ValidationError as exc:
            LOGGER.debug("Candidate puzzle rejected: %s", exc)
            return False
        return True

    def check_generated_puzzle(
        self, path: Sequence[Position], checkpoints: Sequence[Checkpoint]
    ) -> None:
        """Raise :class:`ValidationError` describing the first broken rule."""

        self._check_checkpoint_order(path, checkpoints)
        self._check_unique_checkpoints(checkpoints)
        self._check_coverage(path)
        self._check_continuity(path)

    def _check_checkpoint_order(
        self, path: Sequence[Position], checkpoints: Sequence[Checkpoint]
    ) -> None:
        indices = index_path(path)
        last_index = -1
        for checkpoint in sorted(checkpoints, key=lambda cp: cp.number):
            index = indices.get(checkpoint.position)
            if index is None:
                raise ValidationError(f"Checkpoint {checkpoint.number} is not on the path")
            if index <= last_index:
                raise ValidationError(
                    f"Checkpoint {checkpoint.number} at index {index} does not follow index {last_index}"
                )
            last_index = index

    @staticmethod
    def _check_unique_checkpoints(checkpoints: Sequence[Checkpoint]) -> None:
        positions = {cp.position for cp in checkpoints}
        if len(positions) != len(checkpoints):
            raise ValidationError("Two checkpoints share a position")

    def _check_coverage(self, path: Sequence[Position]) -> None:
        if len(path) != self.grid.total_cells:
            raise ValidationError(
                f"Path covers {len(path)} of {self.grid.total_cells} cells"
            )

    @staticmethod
    def _check_continuity(path: Sequence[Position]) -> None:
        for i in range(1, len(path)):
            if not path[i - 1].is_adjacent(path[i]):
                raise ValidationError(f"Cells {path[i - 1]} and {path[i]} are not adjacent")

    # ------------------------------------------------------------------
    # Player solutions
    # ------------------------------------------------------------------
    def validate_solution(self, path: Sequence[Position], puzzle: Puzzle) -> SolutionReport:
        errors: List[str] = []
        total = puzzle.total_cells
        is_complete = len(path) == total

        if not is_complete:
            errors.append(f"Path incomplete: {len(path)}/{total} cells filled")
        if not is_continuous(path):
            errors.append("Path contains gaps or invalid moves")
        if not self._checkpoints_in_order(path, puzzle.checkpoints):
            errors.append("Checkpoints are not connected in ascending order")
        if not self._ends_on_final_checkpoint(path, puzzle):
            errors.append("Path must end on the highest numbered checkpoint")
        if not has_unique_cells(path):
            errors.append("Path contains overlapping cells")
        if not all(self.grid.is_in_bounds(pos) for pos in path):
            errors.append("Path goes outside grid boundaries")

        return SolutionReport(is_valid=not errors, is_complete=is_complete, errors=errors)

    @staticmethod
    def _checkpoints_in_order(path: Sequence[Position], checkpoints: Sequence[Checkpoint]) -> bool:
        indices = index_path(path)
        last_index = -1
        for checkpoint in checkpoints:
            index = indices.get(checkpoint.position)
            if index is None or index <= last_index:
                return False
            last_index = index
        return True

    @staticmethod
    def _ends_on_final_checkpoint(path: Sequence[Position], puzzle: Puzzle) -> bool:
        final = puzzle.final_checkpoint
        if not path or final is None:
            return False
        return path[-1] == final.position


def validate_solution(path: Sequence[Position], puzzle: Puzzle) -> SolutionReport:
    return PuzzleValidator(GridModel(puzzle.grid_size)).validate_solution(path, puzzle)


def is_puzzle_solved(path: Sequence[Position], puzzle: Puzzle) -> bool:
    return validate_solution(path, puzzle).solved


# ----------------------------------------------------------------------
# Hint helpers
# ----------------------------------------------------------------------
def satisfied_checkpoints(path: Sequence[Position], puzzle: Puzzle) -> List[Tuple[Checkpoint, int]]:
    """Checkpoints reached in order, each paired with its path index.

    The scan stops at the first checkpoint that is missing or that appears
    before its predecessor, so a later checkpoint crossed early counts as an
    ordinary cell.
    """

    indices = index_path(path)
    satisfied: List[Tuple[Checkpoint, int]] = []
    last_index = -1
    for checkpoint in puzzle.checkpoints:
        index = indices.get(checkpoint.position)
        if index is None or index <= last_index:
            break
        satisfied.append((checkpoint, index))
        last_index = index
    return satisfied


def last_satisfied_checkpoint(
    path: Sequence[Position], puzzle: Puzzle
) -> Tuple[Optional[Checkpoint], int]:
    satisfied = satisfied_checkpoints(path, puzzle)
    if not satisfied:
        return None, -1
    return satisfied[-1]


def next_expected_checkpoint(path: Sequence[Position], puzzle: Puzzle) -> Optional[Checkpoint]:
    if not path:
        return puzzle.checkpoint_by_number(1)
    return puzzle.checkpoint_by_number(len(satisfied_checkpoints(path, puzzle)) + 1)


def completion_percentage(path: Sequence[Position], puzzle: Puzzle) -> int:
    total = puzzle.total_cells
    if total == 0:
        return 0
    return max(0, min(100, (len(path) * 100) // total))
