"""
Taskboard Grouping -- Column Partition Tests

Covers:
  - every column present, empty ones included
  - order ascending inside a column
  - ties keep input order
  - settle renumbers to 0..n-1 and rebuilds in column order
  - settle reuses tasks whose order is already right
"""

from taskboard.kernel.events import make_board, make_task
from taskboard.kernel.grouping import flatten, group_by, is_settled, ordered_ids, settle
from taskboard.kernel.types import COLUMNS

# ============================================================================
# group_by
# ============================================================================


class TestGroupBy:
    def test_empty_input_has_every_column(self):
        groups = group_by(())
        assert list(groups) == list(COLUMNS)
        assert all(seq == () for seq in groups.values())

    def test_sorted_by_order(self):
        tasks = (
            make_task("c", "todo", 2),
            make_task("a", "todo", 0),
            make_task("b", "todo", 1),
        )
        assert ordered_ids(group_by(tasks)["todo"]) == ("a", "b", "c")

    def test_partitions_by_column(self):
        tasks = (make_task("a", "done", 0), make_task("b", "todo", 0), make_task("c", "unsure", 0))
        groups = group_by(tasks)
        assert ordered_ids(groups["todo"]) == ("b",)
        assert ordered_ids(groups["done"]) == ("a",)
        assert ordered_ids(groups["unsure"]) == ("c",)
        assert groups["inprogress"] == ()

    def test_ties_keep_input_order(self):
        tasks = (make_task("x", "todo", 0), make_task("y", "todo", 0), make_task("z", "todo", 0))
        assert ordered_ids(group_by(tasks)["todo"]) == ("x", "y", "z")

    def test_does_not_mutate_input(self):
        tasks = (make_task("b", "todo", 1), make_task("a", "todo", 0))
        group_by(tasks)
        assert ordered_ids(tasks) == ("b", "a")


# ============================================================================
# settle
# ============================================================================


class TestSettle:
    def test_closes_gaps(self):
        tasks = (make_task("a", "todo", 3), make_task("b", "todo", 7), make_task("c", "done", 5))
        settled = settle(tasks)
        assert [(t.id, t.column, t.order) for t in settled] == [
            ("a", "todo", 0),
            ("b", "todo", 1),
            ("c", "done", 0),
        ]
        assert is_settled(settled)

    def test_breaks_ties_by_position(self):
        tasks = (make_task("a", "todo", 0), make_task("b", "todo", 0))
        assert [(t.id, t.order) for t in settle(tasks)] == [("a", 0), ("b", 1)]

    def test_rebuilds_in_column_order(self):
        tasks = (make_task("u", "unsure", 0), make_task("d", "done", 0), make_task("t", "todo", 0))
        assert ordered_ids(settle(tasks)) == ("t", "d", "u")

    def test_reuses_already_ranked_tasks(self, abc_board):
        settled = settle(abc_board)
        assert all(a is b for a, b in zip(settled, abc_board))

    def test_is_settled_detects_duplicates(self):
        assert not is_settled((make_task("a", "todo", 0), make_task("b", "todo", 0)))


class TestFlatten:
    def test_missing_columns_are_skipped(self):
        board = make_board({"done": ["x"], "todo": ["y"]})
        assert ordered_ids(flatten(group_by(board))) == ("y", "x")
