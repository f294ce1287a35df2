"""Generation benchmarks across grid sizes and ordering strategies."""

from __future__ import annotations

import random
import sys
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from ..core.constants import SUPPORTED_GRID_SIZES, Strategy
from ..core.exceptions import GenerationExhaustedError
from ..core.models import Position
from ..engine.generator import GeneratorConfig, PuzzleGenerator
from .logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class BenchmarkConfig:
    grid_sizes: Sequence[int] = SUPPORTED_GRID_SIZES
    strategies: Sequence[Strategy] = (Strategy.WARNSDORFF,)
    trials: int = 20
    timeout: float = 10.0
    seed: Optional[int] = None


@dataclass
class BenchmarkResult:
    grid_size: int
    strategy: Strategy
    trials: int
    successful: int = 0
    times: List[float] = field(default_factory=list)
    distinct_paths: int = 0

    @property
    def failed(self) -> int:
        return self.trials - self.successful

    @property
    def success_rate(self) -> float:
        return self.successful / self.trials if self.trials else 0.0

    @property
    def average_time(self) -> float:
        return sum(self.times) / len(self.times) if self.times else 0.0

    @property
    def min_time(self) -> float:
        return min(self.times) if self.times else 0.0

    @property
    def max_time(self) -> float:
        return max(self.times) if self.times else 0.0

    @property
    def variety(self) -> float:
        """Share of successful runs that produced a path not seen before."""

        return self.distinct_paths / self.successful if self.successful else 0.0


def benchmark_grid_size(
    grid_size: int, strategy: Strategy, trials: int, timeout: float, rng: random.Random
) -> BenchmarkResult:
    result = BenchmarkResult(grid_size=grid_size, strategy=strategy, trials=trials)
    seen: Set[Tuple[Position, ...]] = set()
    config = GeneratorConfig(
        grid_size=grid_size,
        max_attempts=1,
        per_attempt_timeout=timeout,
        strategy=strategy,
    )
    for _ in range(trials):
        generator = PuzzleGenerator(config, rng=random.Random(rng.getrandbits(64)))
        began = time.perf_counter()
        try:
            puzzle = generator.generate_puzzle()
        except GenerationExhaustedError:
            continue
        result.times.append(time.perf_counter() - began)
        result.successful += 1
        seen.add(puzzle.solution_path)
    result.distinct_paths = len(seen)
    return result


def run_benchmark(config: BenchmarkConfig) -> List[BenchmarkResult]:
    rng = random.Random(config.seed)
    results: List[BenchmarkResult] = []
    for strategy in config.strategies:
        for grid_size in config.grid_sizes:
            LOGGER.info("Benchmarking %sx%s with %s", grid_size, grid_size, Strategy(strategy).value)
            results.append(
                benchmark_grid_size(grid_size, Strategy(strategy), config.trials, config.timeout, rng)
            )
    return results


def print_benchmark(results: Sequence[BenchmarkResult], *, stream=None) -> None:
    stream = stream or sys.stdout
    header = f"{'size':>5} {'strategy':>15} {'success':>8} {'avg ms':>9} {'min ms':>9} {'max ms':>9} {'variety':>8}"
    print(header, file=stream)
    print("-" * len(header), file=stream)
    for r in results:
        print(
            f"{r.grid_size:>5} {r.strategy.value:>15} {r.success_rate * 100:>7.0f}% "
            f"{r.average_time * 1000:>9.1f} {r.min_time * 1000:>9.1f} {r.max_time * 1000:>9.1f} "
            f"{r.variety * 100:>7.0f}%",
            file=stream,
        )
