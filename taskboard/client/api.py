"""HTTP client for the board API (request/response fallback transport)."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from taskboard.kernel.types import Board, Task

logger = logging.getLogger(__name__)


class ApiClient:
    """Async HTTP client for the board API."""

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _headers(self) -> dict:
        """Build request headers."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, data: dict | None = None) -> Any:
        url = f"{self.api_url}{path}"
        logger.debug("api: %s %s", method, url)
        res = await self.client.request(method, url, json=data, headers=self._headers())
        res.raise_for_status()
        if not res.content:
            return None
        return res.json()

    async def get(self, path: str) -> Any:
        """Make GET request."""
        return await self._request("GET", path)

    async def post(self, path: str, data: dict) -> Any:
        """Make POST request."""
        return await self._request("POST", path, data)

    async def put(self, path: str, data: dict) -> Any:
        """Make PUT request."""
        return await self._request("PUT", path, data)

    async def delete(self, path: str) -> Any:
        """Make DELETE request."""
        return await self._request("DELETE", path)

    # -- board surface --

    async def list_tasks(self, board_id: str) -> list[Task]:
        rows = await self.get(f"/boards/{board_id}/tasks")
        return [Task.model_validate(row) for row in rows or []]

    async def get_board(self, board_id: str) -> Board:
        return Board.model_validate(await self.get(f"/boards/{board_id}"))

    async def create_task(
        self,
        board_id: str | None,
        title: str,
        *,
        description: str | None = None,
        column: str = "todo",
    ) -> Any:
        """
        Create a task. The server answers and also broadcasts task_created;
        the caller should wait for the broadcast rather than trust the answer.
        """
        data: dict[str, Any] = {"title": title, "column": column}
        if description is not None:
            data["description"] = description
        if board_id is not None:
            data["boardId"] = board_id
        return await self.post("/tasks", data)

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> Any:
        """Update a subset of title, description, column, order."""
        return await self.put(f"/tasks/{task_id}", fields)

    async def delete_task(self, task_id: str) -> Any:
        return await self.delete(f"/tasks/{task_id}")

    async def close(self):
        """Close client."""
        await self.client.aclose()
