import unittest

from zippuzzle.core.constants import SessionState
from zippuzzle.core.exceptions import IllegalMoveError
from zippuzzle.core.models import Checkpoint, Position, Puzzle
from zippuzzle.engine.session import InteractiveSession


P = Position

# 1 -> A -> B -> C -> 2 -> D -> E -> F -> 3 on a 3x3 grid.
ONE, A, B, C, TWO, D, E, F, THREE = (
    P(0, 0), P(1, 0), P(2, 0), P(2, 1), P(1, 1), P(0, 1), P(0, 2), P(1, 2), P(2, 2),
)
SOLUTION = [ONE, A, B, C, TWO, D, E, F, THREE]


def scoped_puzzle() -> Puzzle:
    return Puzzle(
        id="scoped",
        grid_size=3,
        checkpoints=(Checkpoint(ONE, 1), Checkpoint(TWO, 2), Checkpoint(THREE, 3)),
        solution_path=tuple(SOLUTION),
    )


def draw(session: InteractiveSession, cells) -> None:
    session.start(cells[0]).raise_for_status()
    for cell in cells[1:]:
        session.extend(cell).raise_for_status()


class StartTests(unittest.TestCase):
    def test_start_on_first_checkpoint(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        result = session.start(ONE)
        self.assertTrue(result.accepted)
        self.assertEqual(session.state, SessionState.DRAWING)
        self.assertEqual(session.current_path, (ONE,))

    def test_start_elsewhere_is_rejected(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        result = session.start(TWO)
        self.assertFalse(result.accepted)
        self.assertEqual(session.state, SessionState.EMPTY)
        self.assertEqual(session.current_path, ())

    def test_start_twice_is_rejected(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        session.start(ONE)
        self.assertFalse(session.start(ONE).accepted)
        self.assertEqual(session.current_path, (ONE,))


class ExtendTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = InteractiveSession(scoped_puzzle())
        self.session.start(ONE)

    def test_extend_to_adjacent_cell(self) -> None:
        self.assertTrue(self.session.extend(A).accepted)
        self.assertEqual(self.session.head, A)

    def test_extend_to_non_adjacent_cell_is_rejected(self) -> None:
        result = self.session.extend(TWO)
        self.assertFalse(result.accepted)
        self.assertIn("not adjacent", result.reason)
        self.assertEqual(self.session.current_path, (ONE,))
        self.assertEqual(result.path, (ONE,))

    def test_extend_onto_path_is_rejected(self) -> None:
        self.session.extend(A)
        self.session.extend(TWO)
        self.assertFalse(self.session.extend(ONE).accepted)
        self.assertEqual(self.session.current_path, (ONE, A, TWO))

    def test_extend_outside_grid_is_rejected(self) -> None:
        self.assertFalse(self.session.extend(P(-1, 0)).accepted)

    def test_extend_before_start_is_rejected(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        self.assertFalse(session.extend(ONE).accepted)

    def test_raise_for_status(self) -> None:
        with self.assertRaises(IllegalMoveError):
            self.session.extend(THREE).raise_for_status()


class BacktrackScopeTests(unittest.TestCase):
    def test_scope_after_second_checkpoint(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, [ONE, A, B, C, TWO, D, E, F])
        self.assertFalse(session.can_backtrack(A))
        self.assertTrue(session.can_backtrack(D))
        self.assertTrue(session.can_backtrack(TWO))

    def test_head_on_checkpoint_reaches_previous_checkpoint(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, [ONE, A, B, C, TWO])
        self.assertTrue(session.can_backtrack(A))
        self.assertTrue(session.can_backtrack(ONE))

    def test_no_checkpoint_beyond_first_allows_anything(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, [ONE, A, B, C])
        self.assertTrue(session.can_backtrack(ONE))
        self.assertTrue(session.can_backtrack(B))

    def test_cell_not_on_path(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, [ONE, A])
        self.assertFalse(session.can_backtrack(THREE))
        self.assertFalse(session.backtrack(THREE).accepted)

    def test_backtrack_truncates_inclusive(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, [ONE, A, B, C, TWO, D, E, F])
        result = session.backtrack(D)
        self.assertTrue(result.accepted)
        self.assertEqual(session.current_path, (ONE, A, B, C, TWO, D))
        self.assertTrue(session.extend(E).accepted)

    def test_rejected_backtrack_leaves_path(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, [ONE, A, B, C, TWO, D, E, F])
        before = session.current_path
        self.assertFalse(session.backtrack(A).accepted)
        self.assertEqual(session.current_path, before)

    def test_checkpoint_reached_out_of_order_is_an_ordinary_cell(self) -> None:
        puzzle = Puzzle(
            id="out-of-order",
            grid_size=3,
            checkpoints=(
                Checkpoint(P(0, 0), 1),
                Checkpoint(P(2, 0), 2),
                Checkpoint(P(2, 2), 3),
                Checkpoint(P(1, 1), 4),
            ),
            solution_path=(
                P(0, 0), P(1, 0), P(2, 0), P(2, 1), P(2, 2),
                P(1, 2), P(0, 2), P(0, 1), P(1, 1),
            ),
        )
        session = InteractiveSession(puzzle)
        draw(session, [P(0, 0), P(1, 0), P(2, 0), P(2, 1), P(1, 1)])
        # Head sits on checkpoint 4 without checkpoint 3, so the scope stays at 2.
        self.assertEqual(session.backtrack_floor(), 2)
        self.assertFalse(session.can_backtrack(P(1, 0)))
        self.assertTrue(session.can_backtrack(P(2, 0)))
        self.assertEqual(session.next_expected_checkpoint.number, 3)


class CompletionTests(unittest.TestCase):
    def test_complete_solution_wins(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, SOLUTION)
        report = session.complete()
        self.assertTrue(report.solved)
        self.assertEqual(session.state, SessionState.WON)
        self.assertEqual(session.completion_percentage, 100)

    def test_incomplete_path_does_not_win(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, SOLUTION[:5])
        report = session.complete()
        self.assertFalse(report.is_complete)
        self.assertEqual(session.state, SessionState.DRAWING)

    def test_won_is_terminal_until_reset(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        draw(session, SOLUTION)
        session.complete()
        self.assertFalse(session.backtrack(F).accepted)
        self.assertFalse(session.extend(P(3, 2)).accepted)
        session.reset()
        self.assertEqual(session.state, SessionState.EMPTY)
        self.assertEqual(session.current_path, ())
        self.assertTrue(session.start(ONE).accepted)


class DragTests(unittest.TestCase):
    def test_drag_draws_backtracks_and_completes(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        for cell in [ONE, A, B, C]:
            self.assertTrue(session.drag_to(cell).accepted)
        self.assertTrue(session.drag_to(A).accepted)
        self.assertEqual(session.current_path, (ONE, A))
        self.assertTrue(session.drag_to(A).accepted)
        for cell in SOLUTION[2:]:
            session.drag_to(cell)
        self.assertTrue(session.is_won)

    def test_drag_to_unrelated_cell_is_rejected(self) -> None:
        session = InteractiveSession(scoped_puzzle())
        self.assertFalse(session.drag_to(B).accepted)
        self.assertEqual(session.state, SessionState.EMPTY)


if __name__ == "__main__":
    unittest.main()
