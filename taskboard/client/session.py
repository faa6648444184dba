"""Board session: wires settings, API client, store, channel and dispatcher together."""
from __future__ import annotations

import logging

import httpx

from taskboard.client.api import ApiClient
from taskboard.client.channel import ChannelSession, ChannelStatus
from taskboard.client.dispatcher import CommandDispatcher
from taskboard.client.settings import Settings, ws_url_for
from taskboard.client.settings import settings as default_settings
from taskboard.client.store import BoardStore, Listener
from taskboard.kernel.types import Board, Slot, Task

logger = logging.getLogger(__name__)


class BoardSession:
    """
    Everything one view of one board needs.

    Usage:
        async with BoardSession("board-1", token="...") as session:
            session.subscribe(redraw)
            await session.move("t1", Slot("todo", 0), Slot("done", 0))
    """

    def __init__(
        self,
        board_id: str,
        *,
        token: str | None = None,
        settings: Settings | None = None,
        api_url: str | None = None,
        ws_url: str | None = None,
        api: ApiClient | None = None,
        channel: ChannelSession | None = None,
    ):
        self.settings = settings or default_settings
        self.board_id = board_id
        self.token = token if token is not None else self.settings.TOKEN
        self.board: Board | None = None

        self.store = BoardStore(board_id)
        api_url = api_url or self.settings.API_URL
        if ws_url is None:
            ws_url = ws_url_for(api_url) if api_url != self.settings.API_URL else self.settings.WS_URL

        self.api = api or ApiClient(api_url, self.token, timeout=self.settings.REQUEST_TIMEOUT)
        self.channel = channel or ChannelSession(
            ws_url,
            self.token,
            board_id,
            reconnect_attempts=self.settings.RECONNECT_ATTEMPTS,
            backoff_base=self.settings.RECONNECT_BACKOFF,
            backoff_max=self.settings.RECONNECT_BACKOFF_MAX,
        )
        self.channel.on_message = self.store.apply_raw
        self.channel.on_status = self.store.set_status
        self.dispatcher = CommandDispatcher(self.store, self.api, self.channel)

    # -------------------- lifecycle --------------------

    async def start(self) -> BoardSession:
        """Load metadata and tasks over HTTP, then open the channel (which sends init)."""
        try:
            self.board = await self.api.get_board(self.board_id)
        except httpx.HTTPError as e:
            logger.warning("session: board metadata unavailable board=%s: %s", self.board_id, e)

        await self.dispatcher.refresh()
        await self.channel.open()
        return self

    async def close(self) -> None:
        """Close the channel first so no message lands after the store is gone."""
        await self.channel.close()
        self.store.close()
        await self.api.close()

    async def __aenter__(self) -> BoardSession:
        return await self.start()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # -------------------- view --------------------

    @property
    def columns(self) -> dict[str, tuple[Task, ...]]:
        return self.store.columns

    @property
    def status(self) -> ChannelStatus:
        return self.store.status

    def subscribe(self, listener: Listener):
        return self.store.subscribe(listener)

    # -------------------- intents --------------------

    async def create(self, title: str, *, description: str | None = None, column: str = "todo") -> bool:
        return await self.dispatcher.create(title, description=description, column=column)

    async def rename(self, task_id: str, title: str) -> bool:
        return await self.dispatcher.rename(task_id, title)

    async def delete(self, task_id: str) -> bool:
        return await self.dispatcher.delete(task_id)

    async def move(self, task_id: str, source: Slot, destination: Slot) -> bool:
        return await self.dispatcher.move(task_id, source, destination)

    async def refresh(self) -> bool:
        return await self.dispatcher.refresh()
