"""Pretty-print helpers for puzzles and drawn paths."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Dict, Optional, Sequence

from ..core.models import Position

if TYPE_CHECKING:
    from ..core.models import Puzzle


def format_puzzle(puzzle: Puzzle, path: Optional[Sequence[Position]] = None) -> str:
    """Render the grid with checkpoint numbers and, optionally, path order.

    Checkpoints show as ``(n)``; other cells on ``path`` show their 1-based
    step number and untouched cells a dot.
    """

    steps: Dict[Position, int] = {}
    for index, pos in enumerate(path or ()):
        steps.setdefault(pos, index + 1)

    size = puzzle.grid_size
    width = max(4, len(str(size * size)) + 2)
    header_cells = [f"{x:>{width}}" for x in range(size)]
    lines = ["    " + "".join(header_cells)]
    lines.append("    " + "-" * (width * size))
    for y in range(size):
        row = []
        for x in range(size):
            symbol = _cell_symbol(puzzle, steps, x, y)
            row.append(f"{symbol:>{width}}")
        lines.append(f"{y:>2} |" + "".join(row))
    return "\n".join(lines)


def _cell_symbol(puzzle: Puzzle, steps: Dict[Position, int], x: int, y: int) -> str:
    pos = Position(x, y)
    checkpoint = puzzle.checkpoint_at(pos)
    if checkpoint is not None:
        return f"({checkpoint.number})"
    if pos in steps:
        return str(steps[pos])
    return "."


def pretty_print_puzzle(
    puzzle: Puzzle,
    path: Optional[Sequence[Position]] = None,
    *,
    label: str | None = None,
    stream=None,
) -> None:
    """Print the puzzle grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_puzzle(puzzle, path), file=stream)


def print_puzzle_stats(puzzle: Puzzle, *, stream=None, solutions: Optional[int] = None) -> None:
    """Print the solution grid plus a short summary."""

    stream = stream or sys.stdout
    print(format_puzzle(puzzle, puzzle.solution_path), file=stream)

    print(file=stream)
    print("--- Puzzle ---", file=stream)
    print(f"  Id:            {puzzle.id}", file=stream)
    print(f"  Size:          {puzzle.grid_size} x {puzzle.grid_size} ({puzzle.total_cells} cells)", file=stream)
    print(f"  Checkpoints:   {len(puzzle.checkpoints)}", file=stream)
    if puzzle.solution_path:
        start = puzzle.solution_path[0]
        end = puzzle.solution_path[-1]
        print(f"  Start / end:   ({start.x},{start.y}) -> ({end.x},{end.y})", file=stream)

    if solutions is not None:
        print(file=stream)
        print("--- Verification ---", file=stream)
        if solutions == 0:
            print("  Solver found no solution", file=stream)
        elif solutions == 1:
            print("  Unique solution", file=stream)
        else:
            print(f"  At least {solutions} solutions", file=stream)
