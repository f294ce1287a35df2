import itertools
import random
import time
import unittest

from zippuzzle.core.constants import Strategy
from zippuzzle.core.models import Position
from zippuzzle.engine.grid import GridModel
from zippuzzle.engine.search import PathSearchEngine


def assert_hamiltonian(test: unittest.TestCase, path, size: int) -> None:
    test.assertEqual(len(path), size * size)
    test.assertEqual(len(set(path)), size * size)
    grid = GridModel(size)
    for pos in path:
        test.assertTrue(grid.is_in_bounds(pos))
    for a, b in zip(path, path[1:]):
        test.assertTrue(a.is_adjacent(b), f"{a} -> {b}")


class PathSearchTests(unittest.TestCase):
    def far_deadline(self) -> float:
        return time.monotonic() + 10.0

    def test_finds_hamiltonian_path_with_each_strategy(self) -> None:
        concrete = [s for s in Strategy if s != Strategy.ADAPTIVE]
        for strategy in concrete:
            for size in (3, 4, 5):
                with self.subTest(strategy=strategy.value, size=size):
                    engine = PathSearchEngine(GridModel(size), rng=random.Random(size))
                    path = engine.generate(Position(0, 0), strategy, self.far_deadline())
                    self.assertIsNotNone(path)
                    assert path is not None
                    self.assertEqual(path[0], Position(0, 0))
                    assert_hamiltonian(self, path, size)

    def test_warnsdorff_handles_larger_grid(self) -> None:
        engine = PathSearchEngine(GridModel(8), rng=random.Random(3))
        path = engine.generate(Position(7, 7), Strategy.WARNSDORFF, self.far_deadline())
        self.assertIsNotNone(path)
        assert path is not None
        assert_hamiltonian(self, path, 8)

    def test_single_cell_grid(self) -> None:
        engine = PathSearchEngine(GridModel(1))
        path = engine.generate(Position(0, 0), Strategy.RANDOM, self.far_deadline())
        self.assertEqual(path, [Position(0, 0)])

    def test_two_by_two_grid_terminates(self) -> None:
        engine = PathSearchEngine(GridModel(2), rng=random.Random(0))
        path = engine.generate(Position(1, 0), Strategy.RANDOM, self.far_deadline())
        self.assertIsNotNone(path)
        assert path is not None
        assert_hamiltonian(self, path, 2)

    def test_exhausted_search_returns_none(self) -> None:
        # On a 3x3 board a path from an edge midpoint cannot cover the
        # five cells of the opposite colour.
        engine = PathSearchEngine(GridModel(3), rng=random.Random(5))
        path = engine.generate(Position(1, 0), Strategy.RANDOM, self.far_deadline())
        self.assertIsNone(path)
        self.assertFalse(engine.last_stats.timed_out)
        self.assertGreater(engine.last_stats.backtracks, 0)

    def test_leaving_the_start_is_not_a_backtrack(self) -> None:
        engine = PathSearchEngine(GridModel(3))
        path = engine.generate(Position(0, 0), lambda candidates, context: [], self.far_deadline())
        self.assertIsNone(path)
        self.assertEqual(engine.last_stats.cells_entered, 1)
        self.assertEqual(engine.last_stats.backtracks, 0)

    def test_backtracks_count_returns_to_a_parent_cell(self) -> None:
        def first_step_only(candidates, context):
            # Offer moves from the start cell only, so each child is a dead end.
            return list(candidates) if context.filled_fraction <= 0.25 else []

        engine = PathSearchEngine(GridModel(2))
        path = engine.generate(Position(0, 0), first_step_only, self.far_deadline())
        self.assertIsNone(path)
        self.assertEqual(engine.last_stats.cells_entered, 3)
        self.assertEqual(engine.last_stats.backtracks, 2)

    def test_past_deadline_explores_nothing(self) -> None:
        engine = PathSearchEngine(GridModel(5), clock=lambda: 100.0)
        path = engine.generate(Position(0, 0), Strategy.WARNSDORFF, deadline=50.0)
        self.assertIsNone(path)
        self.assertEqual(engine.last_stats.cells_entered, 0)
        self.assertTrue(engine.last_stats.timed_out)

    def test_deadline_checked_inside_search(self) -> None:
        ticks = itertools.count()
        engine = PathSearchEngine(GridModel(6), rng=random.Random(2), clock=lambda: next(ticks))
        path = engine.generate(Position(0, 0), Strategy.RANDOM, deadline=5)
        self.assertIsNone(path)
        self.assertTrue(engine.last_stats.timed_out)
        self.assertLess(engine.last_stats.cells_entered, 36)

    def test_accepts_custom_ordering_function(self) -> None:
        calls = []

        def in_given_order(candidates, context):
            calls.append(len(candidates))
            return list(candidates)

        engine = PathSearchEngine(GridModel(3))
        path = engine.generate(Position(0, 0), in_given_order, self.far_deadline())
        self.assertIsNotNone(path)
        self.assertTrue(calls)

    def test_rejects_start_outside_grid(self) -> None:
        engine = PathSearchEngine(GridModel(3))
        with self.assertRaises(ValueError):
            engine.generate(Position(3, 3), Strategy.RANDOM, self.far_deadline())


if __name__ == "__main__":
    unittest.main()
