"""
Taskboard client configuration: all environment variables in one place.

Read from environment at runtime. Never hardcode credentials.
"""

from __future__ import annotations

import os

DEFAULT_API_URL = "http://localhost:4000"


def ws_url_for(api_url: str) -> str:
    """http://host -> ws://host, https://host -> wss://host."""
    api_url = api_url.rstrip("/")
    if api_url.startswith("http"):
        return "ws" + api_url[len("http") :]
    return api_url


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    return int(raw) if raw else default


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return float(raw) if raw else default


class Settings:
    """Client settings from environment variables."""

    @property
    def API_URL(self) -> str:
        return os.environ.get("TASKBOARD_API_URL", DEFAULT_API_URL).rstrip("/")

    @property
    def WS_URL(self) -> str:
        """Channel endpoint. Defaults to the API origin with http(s) swapped for ws(s)."""
        url = os.environ.get("TASKBOARD_WS_URL")
        if url:
            return url.rstrip("/")
        return ws_url_for(self.API_URL)

    @property
    def TOKEN(self) -> str | None:
        return os.environ.get("TASKBOARD_TOKEN") or None

    @property
    def BOARD_ID(self) -> str | None:
        return os.environ.get("TASKBOARD_BOARD_ID") or None

    # Channel reconnection. 0 keeps the plain "report closed and stop" behaviour.
    @property
    def RECONNECT_ATTEMPTS(self) -> int:
        return _int_env("TASKBOARD_RECONNECT_ATTEMPTS", 0)

    @property
    def RECONNECT_BACKOFF(self) -> float:
        return _float_env("TASKBOARD_RECONNECT_BACKOFF", 0.5)

    @property
    def RECONNECT_BACKOFF_MAX(self) -> float:
        return _float_env("TASKBOARD_RECONNECT_BACKOFF_MAX", 8.0)

    @property
    def REQUEST_TIMEOUT(self) -> float:
        return _float_env("TASKBOARD_REQUEST_TIMEOUT", 30.0)

    @property
    def LOG_LEVEL(self) -> str:
        return os.environ.get("TASKBOARD_LOG_LEVEL", "WARNING").upper()


# Singleton instance
settings = Settings()
