"""
Taskboard Kernel: Column Grouping

Pure helpers that partition a flat task sequence by column and order each
column by rank. Nothing here mutates a task; renumbering returns copies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from taskboard.kernel.types import COLUMNS, Snapshot, Task


def _rank(task: Task) -> tuple[bool, int]:
    return (task.order is None, task.order or 0)


def group_by(tasks: Iterable[Task]) -> dict[str, tuple[Task, ...]]:
    """
    Partition tasks by column, each column sorted by `order` ascending.

    Every column in COLUMNS is present, empty ones included. Equal orders
    keep their input order (sorted() is stable). Tasks without an order go
    last, in input order.
    """
    buckets: dict[str, list[Task]] = {c: [] for c in COLUMNS}
    for task in tasks:
        buckets[task.column].append(task)
    return {c: tuple(sorted(buckets[c], key=_rank)) for c in COLUMNS}


def renumber(column_tasks: Sequence[Task]) -> list[Task]:
    """Assign orders 0..n-1 in sequence order. Unchanged tasks are reused."""
    out: list[Task] = []
    for i, task in enumerate(column_tasks):
        out.append(task if task.order == i else task.model_copy(update={"order": i}))
    return out


def flatten(groups: Mapping[str, Sequence[Task]]) -> Snapshot:
    """Concatenate columns in COLUMNS order."""
    flat: list[Task] = []
    for column in COLUMNS:
        flat.extend(groups.get(column, ()))
    return tuple(flat)


def settle(tasks: Iterable[Task]) -> Snapshot:
    """Group, renumber each column to 0..n-1 and rebuild the flat sequence."""
    groups = group_by(tasks)
    return flatten({c: renumber(seq) for c, seq in groups.items()})


def ordered_ids(tasks: Iterable[Task]) -> tuple[str, ...]:
    return tuple(t.id for t in tasks)


def is_settled(tasks: Iterable[Task]) -> bool:
    """True when every column's orders are exactly 0..n-1."""
    for seq in group_by(tasks).values():
        if [t.order for t in seq] != list(range(len(seq))):
            return False
    return True
