"""
Duplex channel session for one board.

Owns a single WebSocket connection scoped to a board. The access token and
board id are passed as query parameters when the connection opens.

Lifecycle:
    connecting -> open -> closed

An unexpected drop moves the session to `closed` and reports it through
`on_status`. Reconnection is off unless `reconnect_attempts` > 0, in which
case the session retries with bounded exponential backoff. `close()` tears
the connection down deterministically and is safe to call more than once.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

import httpx
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from taskboard.errors import ChannelClosedError
from taskboard.kernel.messages import ReorderMessage, encode_message

logger = logging.getLogger(__name__)


class ChannelStatus(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


MessageCallback = Callable[[Any], None]
StatusCallback = Callable[[ChannelStatus], None]


class ChannelSession:
    """One WebSocket connection, one consumer."""

    def __init__(
        self,
        url: str,
        token: str | None,
        board_id: str | None,
        *,
        on_message: MessageCallback | None = None,
        on_status: StatusCallback | None = None,
        reconnect_attempts: int = 0,
        backoff_base: float = 0.5,
        backoff_max: float = 8.0,
    ):
        self.url = url
        self.token = token
        self.board_id = board_id
        self.on_message = on_message
        self.on_status = on_status
        self.reconnect_attempts = reconnect_attempts
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max

        self.status = ChannelStatus.CLOSED
        self._ws: ClientConnection | None = None
        self._reader: asyncio.Task | None = None
        self._closing = False

    @property
    def uri(self) -> str:
        params = {}
        if self.token:
            params["token"] = self.token
        if self.board_id:
            params["boardId"] = self.board_id
        return str(httpx.URL(self.url).copy_merge_params(params))

    @property
    def is_open(self) -> bool:
        return self.status is ChannelStatus.OPEN and self._ws is not None

    def _set_status(self, status: ChannelStatus) -> None:
        if status is self.status:
            return
        self.status = status
        logger.info("channel: board=%s status=%s", self.board_id, status.value)
        if self.on_status:
            self.on_status(status)

    # -------------------- lifecycle --------------------

    async def open(self) -> ChannelSession:
        """Connect. A failed handshake leaves the session closed (logged, not raised)."""
        self._closing = False
        await self._connect()
        return self

    async def _connect(self) -> bool:
        self._set_status(ChannelStatus.CONNECTING)
        try:
            ws = await connect(self.uri)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            logger.warning("channel: connect failed board=%s: %s", self.board_id, e)
            self._set_status(ChannelStatus.CLOSED)
            return False

        if self._closing:
            await ws.close()
            return False

        self._ws = ws
        self._set_status(ChannelStatus.OPEN)
        self._reader = asyncio.create_task(self._read_loop(ws))
        return True

    async def close(self) -> None:
        """Tear down now. Pending frames are dropped."""
        self._closing = True
        reader, self._reader = self._reader, None
        ws, self._ws = self._ws, None

        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader
        if ws is not None:
            await ws.close()
        self._set_status(ChannelStatus.CLOSED)

    async def __aenter__(self) -> ChannelSession:
        return await self.open()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # -------------------- receive --------------------

    async def _read_loop(self, ws: ClientConnection) -> None:
        try:
            async for raw in ws:
                self._deliver(raw)
        except ConnectionClosed as e:
            logger.warning("channel: connection lost board=%s: %s", self.board_id, e)

        # close() already took ownership
        if self._closing or ws is not self._ws:
            return

        self._ws = None
        self._set_status(ChannelStatus.CLOSED)
        if self.reconnect_attempts > 0:
            await self._reconnect()

    def _deliver(self, raw: str | bytes) -> None:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("channel: dropping non-JSON frame (%d bytes)", len(raw))
            return

        if self.on_message is None:
            return
        try:
            self.on_message(data)
        except Exception:
            logger.exception("channel: message handler failed for type=%s", _type_of(data))

    async def _reconnect(self) -> None:
        for attempt in range(self.reconnect_attempts):
            delay = min(self.backoff_max, self.backoff_base * 2**attempt)
            logger.info(
                "channel: reconnect %d/%d in %.2fs board=%s",
                attempt + 1,
                self.reconnect_attempts,
                delay,
                self.board_id,
            )
            await asyncio.sleep(delay)
            if self._closing:
                return
            if await self._connect():
                return
        logger.warning("channel: giving up after %d reconnect attempts", self.reconnect_attempts)

    # -------------------- send --------------------

    async def send(self, message: ReorderMessage | dict[str, Any]) -> bool:
        """
        Send one message.

        Returns False without touching the network when the channel is not
        open. Raises ChannelClosedError if the connection drops mid-send.
        """
        ws = self._ws
        if ws is None or self.status is not ChannelStatus.OPEN:
            logger.debug("channel: send skipped, status=%s", self.status.value)
            return False

        payload = message if isinstance(message, dict) else encode_message(message)
        try:
            await ws.send(json.dumps(payload))
        except ConnectionClosed as e:
            if ws is self._ws:
                self._ws = None
                self._set_status(ChannelStatus.CLOSED)
            raise ChannelClosedError(str(e)) from e
        return True


def _type_of(data: Any) -> str:
    return str(data.get("type")) if isinstance(data, dict) else type(data).__name__
