"""Deadline-bounded backtracking search for Hamiltonian paths."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Set

from ..core.constants import Strategy
from ..core.models import Position
from ..utils.logger import get_logger
from .grid import GridModel
from .strategies import OrderingContext, OrderingFn, get_strategy


LOGGER = get_logger(__name__)

Clock = Callable[[], float]


@dataclass
class SearchStats:
    """Counters describing the last search run."""

    cells_entered: int = 0
    backtracks: int = 0
    timed_out: bool = False
    elapsed: float = 0.0


@dataclass
class SearchState:
    """Mutable per-attempt state: visited set plus the path stack."""

    deadline: float
    rng: random.Random
    order: OrderingFn
    visited: Set[Position] = field(default_factory=set)
    path: List[Position] = field(default_factory=list)

    def enter(self, pos: Position) -> None:
        self.visited.add(pos)
        self.path.append(pos)

    def leave(self) -> Position:
        pos = self.path.pop()
        self.visited.discard(pos)
        return pos


class PathSearchEngine:
    """Depth-first search that fills the whole grid with one path.

    The search keeps an explicit stack of candidate iterators instead of
    recursing, so its depth is bounded by the number of cells. The deadline is
    consulted before every cell is entered; once it has passed the search
    unwinds without exploring further and reports failure.
    """

    def __init__(
        self,
        grid: GridModel,
        rng: Optional[random.Random] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.grid = grid
        self.rng = rng or random.Random()
        self.clock = clock
        self.last_stats = SearchStats()

    def generate(
        self,
        start: Position,
        strategy: Strategy | str | OrderingFn,
        deadline: float,
    ) -> Optional[List[Position]]:
        """Return a Hamiltonian path beginning at ``start`` or ``None``.

        ``deadline`` is an absolute time on the engine's clock. ``None`` covers
        both an exhausted search space and an expired deadline.
        """

        if not self.grid.is_in_bounds(start):
            raise ValueError(f"Start {start} outside {self.grid.size}x{self.grid.size} grid")

        order = strategy if callable(strategy) else get_strategy(strategy)
        state = SearchState(deadline=deadline, rng=self.rng, order=order)
        stats = SearchStats()
        self.last_stats = stats
        began = self.clock()
        try:
            path = self._run(start, state, stats)
        finally:
            stats.elapsed = self.clock() - began

        if path is None:
            LOGGER.debug(
                "Search from %s failed after %d cells (%d backtracks, timed_out=%s)",
                start,
                stats.cells_entered,
                stats.backtracks,
                stats.timed_out,
            )
        return path

    def _run(
        self, start: Position, state: SearchState, stats: SearchStats
    ) -> Optional[List[Position]]:
        total = self.grid.total_cells
        if self._expired(state, stats):
            return None
        self._enter(start, state, stats)
        if len(state.path) == total:
            return list(state.path)

        frames: List[Iterator[Position]] = [self._candidates(start, state)]
        while frames:
            candidate = next(frames[-1], None)
            if candidate is None:
                frames.pop()
                state.leave()
                if frames:
                    stats.backtracks += 1
                continue
            if candidate in state.visited:
                continue
            if self._expired(state, stats):
                return None
            self._enter(candidate, state, stats)
            if len(state.path) == total:
                return list(state.path)
            frames.append(self._candidates(candidate, state))
        return None

    def _enter(self, pos: Position, state: SearchState, stats: SearchStats) -> None:
        state.enter(pos)
        stats.cells_entered += 1

    def _expired(self, state: SearchState, stats: SearchStats) -> bool:
        if self.clock() > state.deadline:
            stats.timed_out = True
            return True
        return False

    def _candidates(self, pos: Position, state: SearchState) -> Iterator[Position]:
        candidates = self.grid.unvisited_neighbors(pos, state.visited)
        if not candidates:
            return iter(())
        context = OrderingContext(
            accessibility=[
                self.grid.count_unvisited_neighbors(c, state.visited) for c in candidates
            ],
            filled_fraction=len(state.path) / self.grid.total_cells,
            rng=state.rng,
        )
        return iter(state.order(candidates, context))
