"""
Taskboard Kernel: Reordering

Pure function: (tasks, task_id, source, destination) -> tasks

Computes the board after a card is dragged from one slot to another.
The result is the full flat sequence rebuilt in COLUMNS order, so the
caller can ship it as a single reorder message.

Same column:  remove, renumber the rest, insert at destination, renumber.
Cross column: remove and renumber the source column, switch the card's
              column, insert into the destination column, renumber it.
Columns not involved pass through re-sorted by their existing order.
"""

from __future__ import annotations

from collections.abc import Sequence

from taskboard.errors import ReorderError
from taskboard.kernel.grouping import flatten, group_by, renumber
from taskboard.kernel.types import COLUMNS, Slot, Snapshot, Task


def is_noop(source: Slot, destination: Slot) -> bool:
    return source.column == destination.column and source.index == destination.index


def _clamp(index: int, size: int) -> int:
    return max(0, min(index, size))


def move_task(
    tasks: Sequence[Task],
    task_id: str,
    source: Slot,
    destination: Slot,
) -> Snapshot:
    """
    Move `task_id` from `source` to `destination`.

    A move onto its own slot returns `tasks` untouched (same object when a
    tuple is passed in). `source.index` must point at `task_id` inside the
    order-sorted source column; the destination index is clamped to the
    destination column size measured before insertion.

    Raises ReorderError on unknown columns or a source slot that does not
    hold `task_id`.
    """
    if is_noop(source, destination):
        return tasks if isinstance(tasks, tuple) else tuple(tasks)

    for slot in (source, destination):
        if slot.column not in COLUMNS:
            raise ReorderError(f"UNKNOWN_COLUMN: {slot.column}")

    groups: dict[str, list[Task]] = {c: list(seq) for c, seq in group_by(tasks).items()}

    src = groups[source.column]
    if not 0 <= source.index < len(src):
        raise ReorderError(
            f"BAD_SOURCE: index {source.index} out of range for '{source.column}' ({len(src)} tasks)"
        )
    if src[source.index].id != task_id:
        raise ReorderError(
            f"BAD_SOURCE: '{source.column}'[{source.index}] is {src[source.index].id}, not {task_id}"
        )

    moved = src.pop(source.index)
    src = renumber(src)
    groups[source.column] = src

    if destination.column != source.column:
        moved = moved.model_copy(update={"column": destination.column})

    dst = groups[destination.column]
    dst.insert(_clamp(destination.index, len(dst)), moved)
    groups[destination.column] = renumber(dst)

    return flatten(groups)


def locate(tasks: Sequence[Task], task_id: str) -> Slot | None:
    """Return the current slot of `task_id`, or None if it is not on the board."""
    for column, seq in group_by(tasks).items():
        for index, task in enumerate(seq):
            if task.id == task_id:
                return Slot(column, index)
    return None
