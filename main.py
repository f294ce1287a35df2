"""CLI entrypoint for the Zip path puzzle generator."""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from zippuzzle.core.constants import (
    DEFAULT_ATTEMPT_TIMEOUT,
    DEFAULT_GRID_SIZE,
    DEFAULT_MAX_ATTEMPTS,
    SUPPORTED_GRID_SIZES,
    Strategy,
)
from zippuzzle.core.exceptions import GenerationExhaustedError, ZipPuzzleError
from zippuzzle.core.models import Puzzle, path_from_jsonable
from zippuzzle.engine.generator import GeneratorConfig, PuzzleGenerator, generate_with_fallback
from zippuzzle.engine.validator import validate_solution
from zippuzzle.utils.benchmark import BenchmarkConfig, print_benchmark, run_benchmark
from zippuzzle.utils.logger import configure_logging
from zippuzzle.utils.pretty import pretty_print_puzzle, print_puzzle_stats


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def parse_int_list(raw: str) -> List[int]:
    """Parse ``"3,4,5"`` into ``[3, 4, 5]``."""
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected comma separated integers, got {raw!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate and check Zip path puzzles",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a puzzle")
    generate.add_argument("--size", type=int, default=DEFAULT_GRID_SIZE, help="Grid size N (N x N cells)")
    generate.add_argument("--dots", type=int, default=None, help="Number of checkpoints")
    generate.add_argument(
        "--attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Maximum generation attempts",
    )
    generate.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_ATTEMPT_TIMEOUT,
        help="Per-attempt search timeout in seconds",
    )
    generate.add_argument(
        "--strategy",
        type=str,
        choices=[s.value for s in Strategy],
        default=Strategy.WARNSDORFF.value,
        help="Neighbor ordering strategy",
    )
    generate.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    generate.add_argument(
        "--fallback",
        action="store_true",
        help="Fall back to a serpentine puzzle instead of failing",
    )
    generate.add_argument(
        "--verify",
        action="store_true",
        help="Count solutions with the CP-SAT solver (stops at 2)",
    )
    generate.add_argument("--pretty", action="store_true", help="Print the grid instead of JSON")
    generate.add_argument("--output", type=Path, help="Optional path to JSON output")

    check = subparsers.add_parser("check", help="Validate a drawn path against a puzzle")
    check.add_argument("puzzle", type=Path, help="Puzzle JSON file")
    check.add_argument("path", type=Path, help="JSON list of {x, y} cells")

    bench = subparsers.add_parser("bench", help="Benchmark generation")
    bench.add_argument(
        "--sizes",
        type=parse_int_list,
        default=list(SUPPORTED_GRID_SIZES),
        help="Comma separated grid sizes",
    )
    bench.add_argument(
        "--strategies",
        nargs="+",
        choices=[s.value for s in Strategy],
        default=[Strategy.WARNSDORFF.value],
        help="Strategies to compare",
    )
    bench.add_argument("--trials", type=int, default=20, help="Runs per size and strategy")
    bench.add_argument("--timeout", type=float, default=10.0, help="Per-run timeout in seconds")
    bench.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser


def run_generate(args: argparse.Namespace) -> int:
    config = GeneratorConfig(
        grid_size=args.size,
        dot_count=args.dots,
        max_attempts=args.attempts,
        per_attempt_timeout=args.timeout,
        strategy=Strategy(args.strategy),
        seed=args.seed,
    )
    rng = random.Random(args.seed)
    if args.fallback:
        puzzle = generate_with_fallback(config, rng=rng)
    else:
        puzzle = PuzzleGenerator(config, rng=rng).generate_puzzle()

    solutions: Optional[int] = None
    if args.verify:
        from zippuzzle.engine.solver import count_solutions

        solutions = count_solutions(puzzle, limit=2)

    if args.pretty:
        print_puzzle_stats(puzzle, solutions=solutions)
        return 0

    payload: Dict[str, Any] = puzzle.to_jsonable()
    if solutions is not None:
        payload["solutionCount"] = solutions
    output_text = json.dumps(payload, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0


def run_check(args: argparse.Namespace) -> int:
    puzzle = Puzzle.from_jsonable(read_json(args.puzzle))
    path = path_from_jsonable(read_json(args.path))
    report = validate_solution(path, puzzle)
    pretty_print_puzzle(puzzle, path)
    print(json.dumps(
        {"isValid": report.is_valid, "isComplete": report.is_complete, "errors": report.errors},
        indent=2,
    ))
    return 0 if report.solved else 1


def run_bench(args: argparse.Namespace) -> int:
    config = BenchmarkConfig(
        grid_sizes=args.sizes,
        strategies=[Strategy(value) for value in args.strategies],
        trials=args.trials,
        timeout=args.timeout,
        seed=args.seed,
    )
    print_benchmark(run_benchmark(config))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    handlers = {"generate": run_generate, "check": run_check, "bench": run_bench}
    try:
        return handlers[args.command](args)
    except GenerationExhaustedError as exc:
        print(f"error: {exc} (use --fallback for a serpentine puzzle)", file=sys.stderr)
        return 2
    except (ZipPuzzleError, ValueError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
