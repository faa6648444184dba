"""
Taskboard exception hierarchy.

The reducer never raises; these cover the edges around it: rejected user
intents, bad move inputs, undecodable channel frames and transport failures.
HTTP failures are left as httpx.HTTPError.
"""

from __future__ import annotations


class TaskboardError(Exception):
    """Base class for all taskboard errors."""


class InvalidIntentError(TaskboardError, ValueError):
    """A user intent failed validation and was never dispatched."""


class ReorderError(TaskboardError, ValueError):
    """A move referenced a column, index or task that does not line up."""


class MalformedMessageError(TaskboardError, ValueError):
    """A channel message had a known type but an invalid payload."""

    def __init__(self, message_type: str, detail: str) -> None:
        super().__init__(f"MALFORMED: {message_type}: {detail}")
        self.message_type = message_type
        self.detail = detail


class ChannelError(TaskboardError):
    """Duplex channel failure."""


class ChannelClosedError(ChannelError):
    """The channel closed while a send was in progress."""
