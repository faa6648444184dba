"""
Configuration management for the taskboard CLI.

Multi-environment support:
  The CLI stores separate credentials per API URL, so one machine can be
  logged into a hosted server and a local dev server at the same time.

  Config structure:
  {
    "environments": {
      "https://boards.example.com": {
        "token": "tb_...",
        "default_board_id": "..."
      },
      "http://localhost:4000": {
        "token": "tb_...",
        "default_board_id": "..."
      }
    },
    "default_url": "http://localhost:4000"
  }

Environment resolution order:
  1. TASKBOARD_API_URL environment variable
  2. --api-url command line flag (passed to Config)
  3. default_url from config file
  4. Fallback: http://localhost:4000
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from taskboard.client.settings import DEFAULT_API_URL

logger = logging.getLogger(__name__)


class Config:
    """Config manager for the taskboard CLI with multi-environment support."""

    def __init__(self, api_url_override: str | None = None, config_dir: Path | None = None):
        """
        Initialize config.

        Args:
            api_url_override: Optional --api-url flag value
            config_dir: Directory holding config.json (default ~/.taskboard)
        """
        self.config_dir = config_dir or Path.home() / ".taskboard"
        self.config_file = self.config_dir / "config.json"
        self._data = {}
        self._api_url_override = api_url_override
        self._load()

    def _load(self):
        """Load config from disk."""
        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    self._data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning("config: ignoring unreadable %s: %s", self.config_file, e)
                self._data = {}

            # Migrate old flat config to new format
            if "token" in self._data and "environments" not in self._data:
                self._migrate_flat_config()

        # Ensure environments dict exists
        if "environments" not in self._data:
            self._data["environments"] = {}

    def _migrate_flat_config(self):
        """Migrate old flat config to multi-environment format."""
        old_api_url = self._data.get("api_url", DEFAULT_API_URL).rstrip("/")
        self._data = {
            "environments": {
                old_api_url: {
                    "token": self._data.get("token"),
                    "default_board_id": self._data.get("default_board_id"),
                }
            },
            "default_url": old_api_url,
        }
        self._save()

    def _save(self):
        """Save config to disk, owner-only read/write."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self._data, f, indent=2)
        self.config_file.chmod(0o600)

    @property
    def api_url(self) -> str:
        """Current API URL (see module docstring for resolution order)."""
        env_url = os.environ.get("TASKBOARD_API_URL")
        if env_url:
            return env_url.rstrip("/")
        if self._api_url_override:
            return self._api_url_override.rstrip("/")
        return self._data.get("default_url", DEFAULT_API_URL).rstrip("/")

    @property
    def default_url(self) -> str:
        return self._data.get("default_url", DEFAULT_API_URL)

    @default_url.setter
    def default_url(self, value: str):
        self._data["default_url"] = value.rstrip("/")
        self._save()

    def _get_env(self) -> dict:
        return self._data["environments"].get(self.api_url, {})

    def _set_env(self, key: str, value):
        self._data["environments"].setdefault(self.api_url, {})[key] = value
        self._save()

    @property
    def token(self) -> str | None:
        """API token for the current environment."""
        return self._get_env().get("token")

    @token.setter
    def token(self, value: str):
        self._set_env("token", value)

    @property
    def default_board_id(self) -> str | None:
        """Board opened when no --board flag is given."""
        return self._get_env().get("default_board_id")

    @default_board_id.setter
    def default_board_id(self, value: str | None):
        self._set_env("default_board_id", value)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def clear_environment(self, url: str | None = None):
        """Clear credentials for one environment (current one by default)."""
        target_url = (url or self.api_url).rstrip("/")
        if target_url in self._data["environments"]:
            del self._data["environments"][target_url]
            self._save()

    def clear_all(self):
        """Clear all credentials and delete config file."""
        self._data = {"environments": {}}
        if self.config_file.exists():
            self.config_file.unlink()

    def list_environments(self) -> list[dict]:
        """Authenticated environments as dicts with url, default_board_id, is_current."""
        current = self.api_url
        return [
            {"url": url, "default_board_id": env.get("default_board_id"), "is_current": url == current}
            for url, env in self._data.get("environments", {}).items()
            if env.get("token")
        ]
