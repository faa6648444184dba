"""
Taskboard Kernel: Reducer

Pure function: (snapshot, message) -> ReduceResult

Folds one authoritative channel message into the local snapshot.

Merge policy:
    init            replace everything with the snapshot
    task_created    insert when the id is absent (duplicate delivery and the
                    echo of our own create are both no-ops). An unranked
                    task goes to the end of its column
    task_updated    full-object replace; unknown id is discarded, not queued.
                    An unranked update keeps the old rank within its column
    task_deleted    remove; unknown id is a no-op
    tasks_reorder   discard when the incoming per-column id layout equals the
                    local one, otherwise replace everything

Every accepted result is settled: each column ranked 0..n-1 and the flat
sequence rebuilt in COLUMNS order. Ties left by the server (e.g. a created
task sharing an order with an existing one) are broken by previous flat
position.

Rejections return the input snapshot object unchanged, so callers can tell
"nothing happened" by identity. The reducer never raises.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Callable

from taskboard.kernel.grouping import group_by, settle
from taskboard.kernel.messages import (
    InboundMessage,
    InitMessage,
    TaskCreated,
    TaskDeleted,
    TasksReorder,
    TaskUpdated,
    UnknownMessage,
)
from taskboard.kernel.types import ReduceResult, Snapshot, Task


def empty_snapshot() -> Snapshot:
    return ()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _reject(snap: Snapshot, reason: str) -> ReduceResult:
    return ReduceResult(snapshot=snap, accepted=False, reason=reason)


def _ok(snap: Snapshot) -> ReduceResult:
    return ReduceResult(snapshot=snap, accepted=True)


def _index_of(snap: Snapshot, task_id: str) -> int | None:
    for i, task in enumerate(snap):
        if task.id == task_id:
            return i
    return None


def _layout(tasks: Iterable[Task]) -> tuple[tuple[str, tuple[str, ...]], ...]:
    """Per-column ordered ids. Two snapshots with the same layout render the same order."""
    return tuple((column, tuple(t.id for t in seq)) for column, seq in group_by(tasks).items())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def reduce(snapshot: Snapshot, message: InboundMessage, *, board_id: str | None = None) -> ReduceResult:
    """
    Apply one message to the current snapshot.

    When `board_id` is given, messages stamped with a different board are
    discarded. Messages without a board stamp are always considered.
    """
    if board_id is not None and message.board_id is not None and message.board_id != board_id:
        return _reject(snapshot, f"FOREIGN_BOARD: {message.board_id}")

    handler = _HANDLERS.get(type(message))
    if handler is None:
        return _reject(snapshot, f"UNKNOWN_TYPE: {type(message).__name__}")
    return handler(snapshot, message)


def reduce_all(
    snapshot: Snapshot,
    messages: Iterable[InboundMessage],
    *,
    board_id: str | None = None,
) -> Snapshot:
    """
    Apply a sequence of messages in delivery order.
    Rejections are silently skipped. Returns the final snapshot.
    """
    for message in messages:
        result = reduce(snapshot, message, board_id=board_id)
        if result.accepted:
            snapshot = result.snapshot
    return snapshot


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_init(snap: Snapshot, message: InitMessage) -> ReduceResult:
    return _ok(settle(message.tasks))


def _handle_created(snap: Snapshot, message: TaskCreated) -> ReduceResult:
    if _index_of(snap, message.task.id) is not None:
        return _reject(snap, f"ALREADY_EXISTS: '{message.task.id}'")
    return _ok(settle(snap + (message.task,)))


def _handle_updated(snap: Snapshot, message: TaskUpdated) -> ReduceResult:
    i = _index_of(snap, message.task.id)
    if i is None:
        return _reject(snap, f"NOT_FOUND: '{message.task.id}'")
    task = message.task
    previous = snap[i]
    if task.order is None and task.column == previous.column:
        task = task.model_copy(update={"order": previous.order})
    return _ok(settle(snap[:i] + (task,) + snap[i + 1 :]))


def _handle_deleted(snap: Snapshot, message: TaskDeleted) -> ReduceResult:
    i = _index_of(snap, message.id)
    if i is None:
        return _reject(snap, f"NOT_FOUND: '{message.id}'")
    return _ok(settle(snap[:i] + snap[i + 1 :]))


def _handle_reorder(snap: Snapshot, message: TasksReorder) -> ReduceResult:
    if _layout(message.tasks) == _layout(snap):
        return _reject(snap, "UNCHANGED_ORDER")
    return _ok(settle(message.tasks))


def _handle_unknown(snap: Snapshot, message: UnknownMessage) -> ReduceResult:
    return _reject(snap, f"UNKNOWN_TYPE: {message.type}")


_HANDLERS: dict[type, Callable[[Snapshot, Any], ReduceResult]] = {
    InitMessage: _handle_init,
    TaskCreated: _handle_created,
    TaskUpdated: _handle_updated,
    TaskDeleted: _handle_deleted,
    TasksReorder: _handle_reorder,
    UnknownMessage: _handle_unknown,
}
