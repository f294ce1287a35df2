"""Interactive path drawing with checkpoint-scoped undo.

A session moves through ``EMPTY -> DRAWING -> WON``; ``reset`` returns to
``EMPTY`` from any state. Moves never raise: an illegal move is rejected as a
whole, the path is left untouched and the returned :class:`MoveResult`
carries the reason.

Undo is scoped by checkpoints. While the head of the path sits on a
checkpoint reached in order, the player may cut back as far as the previous
checkpoint. Anywhere else, the cut may not go past the last checkpoint
reached in order. A checkpoint crossed before its predecessor is treated as
an ordinary cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from ..core.constants import SessionState
from ..core.exceptions import IllegalMoveError
from ..core.models import Checkpoint, Position, Puzzle
from ..utils.logger import get_logger
from .grid import GridModel
from .validator import (
    PuzzleValidator,
    SolutionReport,
    completion_percentage,
    next_expected_checkpoint,
    satisfied_checkpoints,
)


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    path: Tuple[Position, ...]
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.accepted

    def raise_for_status(self) -> None:
        if not self.accepted:
            raise IllegalMoveError(self.reason or "Illegal move")


class InteractiveSession:
    """Single-writer state machine over the player's current path."""

    def __init__(self, puzzle: Puzzle) -> None:
        self.puzzle = puzzle
        self.grid = GridModel(puzzle.grid_size)
        self.validator = PuzzleValidator(self.grid)
        self._path: List[Position] = []
        self._members: Set[Position] = set()
        self._state = SessionState.EMPTY
        self.last_report: Optional[SolutionReport] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_path(self) -> Tuple[Position, ...]:
        return tuple(self._path)

    @property
    def head(self) -> Optional[Position]:
        return self._path[-1] if self._path else None

    @property
    def is_won(self) -> bool:
        return self._state == SessionState.WON

    @property
    def next_expected_checkpoint(self) -> Optional[Checkpoint]:
        return next_expected_checkpoint(self._path, self.puzzle)

    @property
    def completion_percentage(self) -> int:
        return completion_percentage(self._path, self.puzzle)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------
    def start(self, pos: Position) -> MoveResult:
        if self._state != SessionState.EMPTY:
            return self._reject(f"Cannot start while {self._state.value}")
        first = self.puzzle.checkpoint_by_number(1)
        if first is None or pos != first.position:
            return self._reject(f"Path must start on checkpoint 1, not {pos}")
        self._path = [pos]
        self._members = {pos}
        self._state = SessionState.DRAWING
        return self._accept()

    def extend(self, pos: Position) -> MoveResult:
        if self._state != SessionState.DRAWING:
            return self._reject(f"Cannot extend while {self._state.value}")
        if not self.grid.is_in_bounds(pos):
            return self._reject(f"{pos} is outside the grid")
        if pos in self._members:
            return self._reject(f"{pos} is already on the path")
        if not self._path[-1].is_adjacent(pos):
            return self._reject(f"{pos} is not adjacent to {self._path[-1]}")
        self._path.append(pos)
        self._members.add(pos)
        return self._accept()

    def backtrack_floor(self) -> int:
        """Lowest path index a backtrack may currently cut back to."""

        satisfied = satisfied_checkpoints(self._path, self.puzzle)
        if not satisfied:
            return 0
        _, last_index = satisfied[-1]
        if last_index == len(self._path) - 1:
            # Head is on a checkpoint reached in order: allow reaching back to
            # its predecessor, or anywhere when it is checkpoint 1.
            if len(satisfied) == 1:
                return 0
            return satisfied[-2][1]
        return last_index

    def can_backtrack(self, target: Position) -> bool:
        return self._backtrack_error(target) is None

    def backtrack(self, target: Position) -> MoveResult:
        error = self._backtrack_error(target)
        if error is not None:
            return self._reject(error)
        index = self._path.index(target)
        for pos in self._path[index + 1:]:
            self._members.discard(pos)
        del self._path[index + 1:]
        return self._accept()

    def _backtrack_error(self, target: Position) -> Optional[str]:
        if self._state != SessionState.DRAWING:
            return f"Cannot backtrack while {self._state.value}"
        if target not in self._members:
            return f"{target} is not on the path"
        floor = self.backtrack_floor()
        if self._path.index(target) < floor:
            return f"{target} lies before the last reached checkpoint"
        return None

    def complete(self) -> SolutionReport:
        """Validate the path and enter ``WON`` when it solves the puzzle."""

        report = self.validator.validate_solution(self._path, self.puzzle)
        self.last_report = report
        if report.solved and self._state == SessionState.DRAWING:
            self._state = SessionState.WON
            LOGGER.info("Puzzle %s solved", self.puzzle.id)
        return report

    def reset(self) -> None:
        self._path = []
        self._members = set()
        self._state = SessionState.EMPTY
        self.last_report = None

    def drag_to(self, pos: Position) -> MoveResult:
        """Map a pointer moving onto ``pos`` to the matching move."""

        if self._state == SessionState.EMPTY:
            return self.start(pos)
        if pos in self._members:
            if pos == self._path[-1]:
                return self._accept()
            return self.backtrack(pos)
        result = self.extend(pos)
        if result.accepted and len(self._path) == self.puzzle.total_cells:
            self.complete()
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _accept(self) -> MoveResult:
        return MoveResult(accepted=True, path=tuple(self._path))

    def _reject(self, reason: str) -> MoveResult:
        LOGGER.debug("Rejected move: %s", reason)
        return MoveResult(accepted=False, path=tuple(self._path), reason=reason)
