import random
import unittest

from zippuzzle.core.exceptions import InvalidDotCountError
from zippuzzle.core.models import Position
from zippuzzle.engine.checkpoints import (
    base_indices,
    default_dot_count,
    evenly_spaced_checkpoints,
    jitter_indices,
    select_checkpoints,
)
from zippuzzle.engine.generator import serpentine_path


class DotCountTests(unittest.TestCase):
    def test_table_values(self) -> None:
        self.assertEqual(default_dot_count(3), 4)
        self.assertEqual(default_dot_count(6), 10)
        self.assertEqual(default_dot_count(8), 15)

    def test_sizes_outside_table(self) -> None:
        self.assertEqual(default_dot_count(9), 14)
        self.assertEqual(default_dot_count(10), 15)
        self.assertEqual(default_dot_count(2), 3)


class BaseIndexTests(unittest.TestCase):
    def test_nine_cell_path_with_four_checkpoints(self) -> None:
        self.assertEqual(base_indices(9, 4), [0, 2, 4, 8])

    def test_two_checkpoints_pin_endpoints(self) -> None:
        self.assertEqual(base_indices(16, 2), [0, 15])

    def test_checkpoint_on_every_cell(self) -> None:
        self.assertEqual(base_indices(4, 4), [0, 1, 2, 3])

    def test_invalid_counts(self) -> None:
        for count in (0, 1, 10):
            with self.subTest(count=count):
                with self.assertRaises(InvalidDotCountError):
                    base_indices(9, count)


class JitterTests(unittest.TestCase):
    def test_jitter_only_moves_forward_within_gap(self) -> None:
        base = base_indices(36, 10)
        for seed in range(50):
            jittered = jitter_indices(base, random.Random(seed))
            self.assertEqual(jittered[0], 0)
            self.assertEqual(jittered[-1], 35)
            for original, moved in zip(base, jittered):
                self.assertGreaterEqual(moved, original)
                self.assertLessEqual(moved - original, 3)
            self.assertEqual(jittered, sorted(set(jittered)))

    def test_narrow_gaps_are_left_alone(self) -> None:
        self.assertEqual(jitter_indices([0, 1, 2, 3], random.Random(1)), [0, 1, 2, 3])
        self.assertEqual(jitter_indices([0, 2, 4, 8], random.Random(1))[1], 2)


class SelectCheckpointsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.path = serpentine_path(6)

    def test_rejects_single_checkpoint(self) -> None:
        with self.assertRaises(InvalidDotCountError):
            select_checkpoints(self.path, 1)

    def test_rejects_more_checkpoints_than_cells(self) -> None:
        with self.assertRaises(InvalidDotCountError):
            select_checkpoints(self.path, len(self.path) + 1)

    def test_endpoints_are_pinned(self) -> None:
        checkpoints = select_checkpoints(self.path, 10, rng=random.Random(4))
        self.assertEqual(checkpoints[0].position, self.path[0])
        self.assertEqual(checkpoints[0].number, 1)
        self.assertEqual(checkpoints[-1].position, self.path[-1])
        self.assertEqual(checkpoints[-1].number, 10)

    def test_invariants_hold_across_runs(self) -> None:
        index_of = {pos: i for i, pos in enumerate(self.path)}
        for seed in range(30):
            checkpoints = select_checkpoints(self.path, 10, rng=random.Random(seed))
            self.assertEqual([cp.number for cp in checkpoints], list(range(1, 11)))
            indices = [index_of[cp.position] for cp in checkpoints]
            self.assertEqual(indices, sorted(set(indices)))
            self.assertEqual(len({cp.position for cp in checkpoints}), 10)

    def test_three_by_three_scenario(self) -> None:
        path = serpentine_path(3)
        checkpoints = select_checkpoints(path, 4, rng=random.Random(0))
        self.assertEqual(checkpoints[0].position, path[0])
        self.assertEqual(checkpoints[3].position, path[8])
        self.assertIn(checkpoints[2].position, {path[4], path[5]})


class EvenlySpacedTests(unittest.TestCase):
    def test_positions(self) -> None:
        path = serpentine_path(3)
        checkpoints = evenly_spaced_checkpoints(path, 4)
        self.assertEqual(
            [cp.position for cp in checkpoints],
            [Position(0, 0), Position(2, 0), Position(0, 1), Position(2, 2)],
        )


if __name__ == "__main__":
    unittest.main()
