"""CP-SAT solver for checkpoint path puzzles using OR-Tools.

The grid becomes a graph with one node per cell plus a dummy node. A circuit
through every node that enters the grid at checkpoint 1 and leaves it at the
final checkpoint is exactly a Hamiltonian path between the two. Order
variables then force the checkpoints to appear in ascending sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ortools.sat.python import cp_model

from ..core.models import Position, Puzzle
from ..utils.logger import get_logger
from .grid import GridModel

LOGGER = get_logger(__name__)


@dataclass
class _PathModel:
    model: cp_model.CpModel
    cells: List[Position]
    arcs: Dict[Tuple[int, int], cp_model.IntVar]
    start: int


def _build_model(puzzle: Puzzle) -> _PathModel:
    grid = GridModel(puzzle.grid_size)
    cells = list(grid.cells())
    node_of = {pos: index for index, pos in enumerate(cells)}
    dummy = len(cells)
    first = puzzle.checkpoints[0]
    final = puzzle.checkpoints[-1]

    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Arc literals and the circuit
    # ------------------------------------------------------------------
    arcs: Dict[Tuple[int, int], cp_model.IntVar] = {}
    for pos in cells:
        u = node_of[pos]
        for neighbor in grid.neighbors4(pos):
            v = node_of[neighbor]
            arcs[(u, v)] = model.new_bool_var(f"arc_{u}_{v}")
    start = node_of[first.position]
    end = node_of[final.position]
    enter = model.new_bool_var("enter")
    leave = model.new_bool_var("leave")
    model.add(enter == 1)
    model.add(leave == 1)

    circuit = [(u, v, lit) for (u, v), lit in arcs.items()]
    circuit.append((dummy, start, enter))
    circuit.append((end, dummy, leave))
    model.add_circuit(circuit)

    # ------------------------------------------------------------------
    # Step 2: Visit order and checkpoint sequence
    # ------------------------------------------------------------------
    total = len(cells)
    order = [model.new_int_var(0, total - 1, f"order_{i}") for i in range(total)]
    model.add(order[start] == 0)
    model.add(order[end] == total - 1)
    for (u, v), lit in arcs.items():
        model.add(order[v] == order[u] + 1).only_enforce_if(lit)

    for previous, current in zip(puzzle.checkpoints, puzzle.checkpoints[1:]):
        model.add(order[node_of[previous.position]] < order[node_of[current.position]])

    return _PathModel(model=model, cells=cells, arcs=arcs, start=start)


def _extract_path(solver, built: _PathModel) -> List[Position]:
    successor = {
        u: v for (u, v), lit in built.arcs.items() if solver.boolean_value(lit)
    }
    path = [built.cells[built.start]]
    node = built.start
    while node in successor:
        node = successor[node]
        path.append(built.cells[node])
    return path


def solve_puzzle(puzzle: Puzzle, timeout: float = 10.0) -> Optional[List[Position]]:
    """Find a path satisfying the puzzle's checkpoints, or ``None``.

    Only the checkpoints and grid size are consulted; the stored solution
    path is ignored.
    """

    if not puzzle.checkpoints:
        return None
    built = _build_model(puzzle)
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = 4

    LOGGER.info(
        "CP-SAT: %dx%d grid, %d checkpoints, solving (timeout=%0.1fs)...",
        puzzle.grid_size,
        puzzle.grid_size,
        len(puzzle.checkpoints),
        timeout,
    )
    status = solver.solve(built.model)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
        return None

    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)
    return _extract_path(solver, built)


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit
        self.count = 0

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.count >= self.limit:
            self.stop_search()


def count_solutions(puzzle: Puzzle, limit: int = 2, timeout: float = 10.0) -> int:
    """Count distinct solution paths, stopping once ``limit`` are found.

    ``count_solutions(puzzle) == 1`` means the checkpoints pin down a unique
    solution.
    """

    if limit < 1:
        raise ValueError("limit must be positive")
    if not puzzle.checkpoints:
        return 0
    built = _build_model(puzzle)
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1

    counter = _SolutionCounter(limit)
    status = solver.solve(built.model, counter)
    LOGGER.debug(
        "CP-SAT enumeration: %d solution(s), status=%s",
        counter.count,
        solver.status_name(status),
    )
    return counter.count
