"""
Command dispatcher: user intents -> channel messages or API requests.

    create  request only, no local write; the task appears when the
            server broadcasts task_created
    rename  optimistic local write, then request
    delete  optimistic local removal, then request
    move    optimistic write of the full recomputed board, then a reorder
            message over the channel; when the channel is not open, a
            request that updates only the moved task's column and order

Failed rename/delete requests are logged and NOT rolled back: local state
may diverge until the next full snapshot. A failed move refetches the task
list to resynchronize.

Results that resolve after the store was closed are ignored.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from taskboard.client.api import ApiClient
from taskboard.client.channel import ChannelSession
from taskboard.client.store import BoardStore
from taskboard.errors import ChannelError, InvalidIntentError
from taskboard.kernel.messages import InitMessage, ReorderMessage
from taskboard.kernel.reorder import is_noop, move_task
from taskboard.kernel.types import COLUMNS, Slot

logger = logging.getLogger(__name__)


def clean_title(title: Any) -> str:
    """Strip and validate a title. Blank titles never reach the network."""
    cleaned = title.strip() if isinstance(title, str) else ""
    if not cleaned:
        raise InvalidIntentError("EMPTY_TITLE: task title must not be blank")
    return cleaned


class CommandDispatcher:
    """Issues local intents for one board."""

    def __init__(self, store: BoardStore, api: ApiClient, channel: ChannelSession | None = None):
        self.store = store
        self.api = api
        self.channel = channel

    @property
    def board_id(self) -> str | None:
        return self.store.board_id

    def _require(self, task_id: str):
        task = self.store.get(task_id)
        if task is None:
            raise InvalidIntentError(f"NOT_FOUND: '{task_id}' is not on this board")
        return task

    async def create(self, title: str, *, description: str | None = None, column: str = "todo") -> bool:
        title = clean_title(title)
        if column not in COLUMNS:
            raise InvalidIntentError(f"UNKNOWN_COLUMN: {column}")

        try:
            await self.api.create_task(self.board_id, title, description=description, column=column)
        except httpx.HTTPError as e:
            logger.warning("dispatch: create failed board=%s: %s", self.board_id, e)
            return False
        return True

    async def rename(self, task_id: str, title: str) -> bool:
        title = clean_title(title)
        self._require(task_id)

        self.store.write(
            tuple(t.model_copy(update={"title": title}) if t.id == task_id else t for t in self.store.tasks)
        )
        try:
            await self.api.update_task(task_id, {"title": title})
        except httpx.HTTPError as e:
            logger.warning("dispatch: rename failed task=%s (local edit kept): %s", task_id, e)
            return False
        return True

    async def delete(self, task_id: str) -> bool:
        self._require(task_id)

        self.store.write(tuple(t for t in self.store.tasks if t.id != task_id))
        try:
            await self.api.delete_task(task_id)
        except httpx.HTTPError as e:
            logger.warning("dispatch: delete failed task=%s (local removal kept): %s", task_id, e)
            return False
        return True

    async def move(self, task_id: str, source: Slot, destination: Slot) -> bool:
        """
        Move a task between slots.

        Dropping a card back onto its own slot does nothing: no write, no
        message, no request. Raises ReorderError when `source` does not hold
        `task_id`.
        """
        source, destination = Slot(*source), Slot(*destination)
        if is_noop(source, destination):
            return True

        tasks = move_task(self.store.tasks, task_id, source, destination)
        self.store.write(tasks)
        moved = next(t for t in tasks if t.id == task_id)

        try:
            if self.channel is not None and self.channel.is_open:
                if await self.channel.send(ReorderMessage(tasks=tasks, board_id=self.board_id)):
                    return True
            # Narrower guarantee: siblings are not renumbered server-side.
            await self.api.update_task(task_id, {"column": moved.column, "order": moved.order})
            return True
        except (ChannelError, httpx.HTTPError) as e:
            logger.warning("dispatch: move failed task=%s, refetching: %s", task_id, e)

        if not self.store.closed:
            await self.refresh()
        return False

    async def refresh(self) -> bool:
        """Replace local state with the server's task list."""
        if self.board_id is None:
            logger.warning("dispatch: refresh skipped, no board id")
            return False
        try:
            tasks = await self.api.list_tasks(self.board_id)
        except httpx.HTTPError as e:
            logger.warning("dispatch: refresh failed board=%s: %s", self.board_id, e)
            return False

        if self.store.closed:
            return False
        self.store.apply(InitMessage(tasks=tuple(tasks), board_id=self.board_id))
        return True
