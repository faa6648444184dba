"""
Pytest configuration and fixtures for the client runtime tests.

Fakes stand in for the HTTP API and the channel so dispatcher tests can
assert exactly which network calls an intent produced.
"""

from __future__ import annotations

import httpx
import pytest

from taskboard.client.channel import ChannelStatus
from taskboard.client.store import BoardStore
from taskboard.errors import ChannelClosedError
from taskboard.kernel.events import make_board
from taskboard.kernel.messages import InitMessage

BOARD_ID = "board-1"


class FakeApi:
    """Records calls; `fail` makes every call raise a transport error."""

    def __init__(self, tasks=()):
        self.calls: list[tuple] = []
        self.tasks = list(tasks)
        self.fail = False

    def _record(self, *call):
        self.calls.append(call)
        if self.fail:
            raise httpx.ConnectError("connection refused")

    async def list_tasks(self, board_id):
        self._record("list_tasks", board_id)
        return list(self.tasks)

    async def get_board(self, board_id):
        self._record("get_board", board_id)
        raise httpx.ConnectError("no metadata in fake")

    async def create_task(self, board_id, title, *, description=None, column="todo"):
        self._record("create_task", board_id, title, description, column)
        return {"id": "new"}

    async def update_task(self, task_id, fields):
        self._record("update_task", task_id, fields)
        return {}

    async def delete_task(self, task_id):
        self._record("delete_task", task_id)
        return None

    async def close(self):
        self.calls.append(("close",))


class FakeChannel:
    """Channel double. `drop_on_send` simulates a connection lost mid-send."""

    def __init__(self, open_=True):
        self.status = ChannelStatus.OPEN if open_ else ChannelStatus.CLOSED
        self.sent: list = []
        self.drop_on_send = False
        self.on_message = None
        self.on_status = None

    @property
    def is_open(self):
        return self.status is ChannelStatus.OPEN

    async def send(self, message):
        if not self.is_open:
            return False
        if self.drop_on_send:
            self.status = ChannelStatus.CLOSED
            raise ChannelClosedError("going away")
        self.sent.append(message)
        return True

    async def open(self):
        self.status = ChannelStatus.OPEN
        return self

    async def close(self):
        self.status = ChannelStatus.CLOSED


@pytest.fixture
def board():
    return make_board({"todo": ["a", "b", "c"], "done": ["d"]}, board_id=BOARD_ID)


@pytest.fixture
def store(board):
    s = BoardStore(BOARD_ID)
    s.apply(InitMessage(tasks=board, board_id=BOARD_ID))
    return s


@pytest.fixture
def api(board):
    return FakeApi(board)


@pytest.fixture
def channel():
    return FakeChannel()
