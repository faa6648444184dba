"""
Taskboard Kernel: Message Construction

Factory functions for building well-formed tasks and channel messages.
Used by the dispatcher to stamp outbound messages and by tests to build
boards concisely.
"""

from __future__ import annotations

from collections.abc import Iterable

from taskboard.kernel.messages import (
    InitMessage,
    ReorderMessage,
    TaskCreated,
    TaskDeleted,
    TasksReorder,
    TaskUpdated,
)
from taskboard.kernel.types import Task


def make_task(
    id: str,
    column: str = "todo",
    order: int = 0,
    *,
    title: str | None = None,
    description: str | None = None,
    created_at: int = 0,
    board_id: str | None = None,
) -> Task:
    """
    Build a Task from minimal inputs.

    The title defaults to the id upper-cased, which keeps test boards readable.
    """
    return Task(
        id=id,
        title=title or id.upper(),
        description=description,
        column=column,
        order=order,
        created_at=created_at,
        board_id=board_id,
    )


def make_board(layout: dict[str, Iterable[str]], *, board_id: str | None = None) -> tuple[Task, ...]:
    """
    Build a settled board from a column -> ids mapping.

        make_board({"todo": ["a", "b"], "done": ["c"]})
    """
    tasks: list[Task] = []
    for column, ids in layout.items():
        for order, task_id in enumerate(ids):
            tasks.append(make_task(task_id, column, order, board_id=board_id))
    return tuple(tasks)


def init(tasks: Iterable[Task], board_id: str | None = None) -> InitMessage:
    return InitMessage(tasks=tuple(tasks), board_id=board_id)


def created(task: Task, board_id: str | None = None) -> TaskCreated:
    return TaskCreated(task=task, board_id=board_id)


def updated(task: Task, board_id: str | None = None) -> TaskUpdated:
    return TaskUpdated(task=task, board_id=board_id)


def deleted(task_id: str, board_id: str | None = None) -> TaskDeleted:
    return TaskDeleted(id=task_id, board_id=board_id)


def reordered(tasks: Iterable[Task], board_id: str | None = None) -> TasksReorder:
    return TasksReorder(tasks=tuple(tasks), board_id=board_id)


def reorder_request(tasks: Iterable[Task], board_id: str | None = None) -> ReorderMessage:
    return ReorderMessage(tasks=tuple(tasks), board_id=board_id)
