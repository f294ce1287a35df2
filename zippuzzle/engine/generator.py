"""Puzzle generation orchestration.

Each attempt searches for a Hamiltonian path from a random grid corner,
places checkpoints on it and validates the result. Attempts share nothing but
the parent random source; the first candidate that validates is returned.
When every attempt fails the caller may fall back to a serpentine
construction that is valid by design.
"""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass
from typing import List, Optional

from ..core.constants import (
    DEFAULT_ATTEMPT_TIMEOUT,
    DEFAULT_MAX_ATTEMPTS,
    FAST_ATTEMPT_TIMEOUT,
    FAST_MAX_ATTEMPTS,
    MIN_GRID_SIZE,
    Strategy,
)
from ..core.exceptions import GenerationExhaustedError, ValidationError
from ..core.models import Checkpoint, Position, Puzzle
from ..utils.logger import get_logger
from .checkpoints import (
    default_dot_count,
    evenly_spaced_checkpoints,
    select_checkpoints,
    validate_dot_count,
)
from .grid import GridModel
from .search import Clock, PathSearchEngine
from .strategies import resolve_strategy
from .validator import PuzzleValidator


LOGGER = get_logger(__name__)

ID_ALPHABET = string.digits + string.ascii_lowercase


@dataclass
class GeneratorConfig:
    grid_size: int
    dot_count: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    per_attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT
    strategy: Strategy = Strategy.WARNSDORFF
    seed: Optional[int] = None
    id_prefix: str = "puzzle"

    def __post_init__(self) -> None:
        if self.grid_size < MIN_GRID_SIZE:
            raise ValueError(f"Grid size must be at least {MIN_GRID_SIZE}, got {self.grid_size}")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        if self.per_attempt_timeout <= 0:
            raise ValueError("per_attempt_timeout must be positive")
        self.strategy = Strategy(self.strategy)

    @property
    def resolved_dot_count(self) -> int:
        if self.dot_count is not None:
            return self.dot_count
        return default_dot_count(self.grid_size)

    @classmethod
    def fast(cls, grid_size: int, **overrides) -> GeneratorConfig:
        """Configuration for interactive use: fewer, shorter attempts."""

        timeout = min(overrides.pop("per_attempt_timeout", FAST_ATTEMPT_TIMEOUT), FAST_ATTEMPT_TIMEOUT)
        overrides.setdefault("max_attempts", FAST_MAX_ATTEMPTS)
        return cls(grid_size=grid_size, per_attempt_timeout=timeout, **overrides)


def make_puzzle_id(prefix: str, rng: random.Random) -> str:
    suffix = "".join(rng.choice(ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


class PuzzleGenerator:
    """Bounded retry loop around path search, checkpoint placement and validation."""

    def __init__(
        self,
        config: GeneratorConfig,
        rng: Optional[random.Random] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.clock = clock
        self.grid = GridModel(config.grid_size)
        self.validator = PuzzleValidator(self.grid)

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate_puzzle(self) -> Puzzle:
        """Return the first candidate that passes validation.

        Raises:
            GenerationExhaustedError: when all ``max_attempts`` attempts fail.
            InvalidDotCountError: when the configured checkpoint count cannot
                fit the grid.
        """

        dot_count = self.config.resolved_dot_count
        validate_dot_count(dot_count, self.grid.total_cells)
        attempts = self.config.max_attempts
        for attempt in range(1, attempts + 1):
            LOGGER.info(
                "Generation attempt %s/%s (%sx%s, %s checkpoints)",
                attempt,
                attempts,
                self.config.grid_size,
                self.config.grid_size,
                dot_count,
            )
            try:
                puzzle = self._attempt(dot_count, final=attempt == attempts)
            except ValidationError as exc:
                LOGGER.warning("Generation attempt %s rejected: %s", attempt, exc)
                continue
            if puzzle is None:
                continue
            LOGGER.info("Puzzle %s generated on attempt %s", puzzle.id, attempt)
            return puzzle
        raise GenerationExhaustedError(
            f"Failed to generate valid puzzle after {attempts} attempts"
        )

    def _attempt(self, dot_count: int, final: bool = False) -> Optional[Puzzle]:
        attempt_rng = random.Random(self.rng.getrandbits(64))
        if final and self.config.strategy == Strategy.ADAPTIVE:
            # Final attempt always falls back to Warnsdorff.
            strategy = Strategy.WARNSDORFF
        else:
            strategy = resolve_strategy(self.config.strategy, self.config.grid_size, attempt_rng)
        start = attempt_rng.choice(self.grid.corners())
        engine = PathSearchEngine(self.grid, rng=attempt_rng, clock=self.clock)
        deadline = self.clock() + self.config.per_attempt_timeout

        path = engine.generate(start, strategy, deadline)
        stats = engine.last_stats
        if path is None:
            LOGGER.warning(
                "No path from %s with %s strategy (%s, %d cells entered, %.3fs)",
                start,
                strategy.value,
                "timed out" if stats.timed_out else "exhausted",
                stats.cells_entered,
                stats.elapsed,
            )
            return None
        LOGGER.debug(
            "Path found from %s with %s strategy in %.3fs (%d backtracks)",
            start,
            strategy.value,
            stats.elapsed,
            stats.backtracks,
        )

        checkpoints = select_checkpoints(path, dot_count, rng=attempt_rng)
        self.validator.check_generated_puzzle(path, checkpoints)
        return Puzzle(
            id=make_puzzle_id(self.config.id_prefix, attempt_rng),
            grid_size=self.config.grid_size,
            checkpoints=tuple(checkpoints),
            solution_path=tuple(path),
        )


# ----------------------------------------------------------------------
# Deterministic constructions
# ----------------------------------------------------------------------
def serpentine_path(grid_size: int) -> List[Position]:
    """Row-by-row sweep, alternating direction on each row."""

    path: List[Position] = []
    for y in range(grid_size):
        xs = range(grid_size) if y % 2 == 0 else range(grid_size - 1, -1, -1)
        path.extend(Position(x, y) for x in xs)
    return path


def spiral_path(grid_size: int) -> List[Position]:
    """Clockwise inward spiral from the top-left corner."""

    path: List[Position] = []
    top, left, bottom, right = 0, 0, grid_size - 1, grid_size - 1
    while top <= bottom and left <= right:
        path.extend(Position(x, top) for x in range(left, right + 1))
        path.extend(Position(right, y) for y in range(top + 1, bottom + 1))
        if top < bottom:
            path.extend(Position(x, bottom) for x in range(right - 1, left - 1, -1))
        if left < right:
            path.extend(Position(left, y) for y in range(bottom - 1, top, -1))
        top, left, bottom, right = top + 1, left + 1, bottom - 1, right - 1
    return path


def _build_constructed_puzzle(
    path: List[Position], grid_size: int, dot_count: Optional[int], prefix: str
) -> Puzzle:
    count = dot_count if dot_count is not None else default_dot_count(grid_size)
    checkpoints: List[Checkpoint] = evenly_spaced_checkpoints(path, count)
    PuzzleValidator(GridModel(grid_size)).check_generated_puzzle(path, checkpoints)
    return Puzzle(
        id=f"{prefix}-{int(time.time() * 1000)}",
        grid_size=grid_size,
        checkpoints=tuple(checkpoints),
        solution_path=tuple(path),
    )


def build_serpentine_puzzle(grid_size: int, dot_count: Optional[int] = None) -> Puzzle:
    return _build_constructed_puzzle(serpentine_path(grid_size), grid_size, dot_count, "fallback")


def build_spiral_puzzle(grid_size: int, dot_count: Optional[int] = None) -> Puzzle:
    return _build_constructed_puzzle(spiral_path(grid_size), grid_size, dot_count, "simple-puzzle")


# ----------------------------------------------------------------------
# Convenience wrappers
# ----------------------------------------------------------------------
def generate_puzzle(
    grid_size: int,
    dot_count: Optional[int] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    per_attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT,
    strategy: Strategy = Strategy.WARNSDORFF,
    rng: Optional[random.Random] = None,
) -> Puzzle:
    config = GeneratorConfig(
        grid_size=grid_size,
        dot_count=dot_count,
        max_attempts=max_attempts,
        per_attempt_timeout=per_attempt_timeout,
        strategy=strategy,
    )
    return PuzzleGenerator(config, rng=rng).generate_puzzle()


def generate_with_fallback(
    config: GeneratorConfig, rng: Optional[random.Random] = None
) -> Puzzle:
    """Fast attempts, then the serpentine sweep.

    Attempts and per-attempt timeout come from ``config`` but are capped at
    the fast-path limits, so the whole call is bounded by
    ``FAST_MAX_ATTEMPTS * FAST_ATTEMPT_TIMEOUT`` seconds of search.
    """

    rng = rng or random.Random(config.seed)
    fast = GeneratorConfig.fast(
        config.grid_size,
        dot_count=config.dot_count,
        max_attempts=min(config.max_attempts, FAST_MAX_ATTEMPTS),
        per_attempt_timeout=config.per_attempt_timeout,
        strategy=config.strategy,
        id_prefix=config.id_prefix,
    )
    try:
        return PuzzleGenerator(fast, rng=rng).generate_puzzle()
    except GenerationExhaustedError as exc:
        LOGGER.warning("%s; using serpentine fallback for %sx%s grid", exc, config.grid_size, config.grid_size)
    return build_serpentine_puzzle(config.grid_size, config.dot_count)
