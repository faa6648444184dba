"""
Local board state and its observers.

The store is the only owner of the client's task snapshot. It is driven
from one event loop: channel messages and user intents both land here as
plain method calls, so no locking is needed.

Observers are notified only when the snapshot object actually changes;
a rejected or redundant message (duplicate create, identical reorder)
produces no notification.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from taskboard.client.channel import ChannelStatus
from taskboard.errors import MalformedMessageError
from taskboard.kernel.grouping import group_by
from taskboard.kernel.messages import InboundMessage, decode_message
from taskboard.kernel.reducer import empty_snapshot, reduce
from taskboard.kernel.types import ReduceResult, Snapshot, Task

logger = logging.getLogger(__name__)

Listener = Callable[["BoardStore"], None]


class BoardStore:
    """Reactive, read-only view of one board for the rendering layer."""

    def __init__(self, board_id: str | None = None):
        self.board_id = board_id
        self.status = ChannelStatus.CLOSED
        self.closed = False
        self._tasks: Snapshot = empty_snapshot()
        self._listeners: list[Listener] = []

    @property
    def tasks(self) -> Snapshot:
        return self._tasks

    @property
    def columns(self) -> dict[str, tuple[Task, ...]]:
        return group_by(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -------------------- writes --------------------

    def apply(self, message: InboundMessage) -> ReduceResult:
        """Fold one authoritative message into the snapshot."""
        if self.closed:
            return ReduceResult(snapshot=self._tasks, accepted=False, reason="CLOSED")

        result = reduce(self._tasks, message, board_id=self.board_id)
        if not result.accepted:
            logger.debug("store: discarded %s: %s", message.type, result.reason)
            return result

        if result.snapshot != self._tasks:
            self._tasks = result.snapshot
            self._notify()
        return result

    def apply_raw(self, data: Any) -> ReduceResult | None:
        """Decode and apply one channel payload. Malformed payloads are logged and dropped."""
        try:
            message = decode_message(data)
        except MalformedMessageError as e:
            logger.warning("store: %s", e)
            return None
        return self.apply(message)

    def write(self, tasks: Snapshot) -> None:
        """Optimistic local write ahead of server confirmation."""
        if self.closed or tasks is self._tasks:
            return
        self._tasks = tasks
        self._notify()

    def set_status(self, status: ChannelStatus) -> None:
        if self.closed or status is self.status:
            return
        self.status = status
        self._notify()

    def close(self) -> None:
        """Discard state and observers. Later writes are ignored."""
        self.closed = True
        self._tasks = empty_snapshot()
        self._listeners.clear()
        self.status = ChannelStatus.CLOSED
