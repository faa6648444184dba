"""
Taskboard Kernel: Channel Messages

Closed set of message variants, discriminated on the `type` field.

Server -> client:
    init            {tasks}   full snapshot
    task_created    {task}
    task_updated    {task}
    task_deleted    {id}
    tasks_reorder   {tasks}   full flat sequence after someone's move

Client -> server:
    reorder         {tasks, boardId?}

Every inbound variant may carry `boardId`. A `type` outside this set decodes
to UnknownMessage, which the reducer rejects explicitly; a known `type` with
a broken payload raises MalformedMessageError.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from taskboard.errors import MalformedMessageError
from taskboard.kernel.types import Task


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    board_id: str | None = Field(default=None, alias="boardId")


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class InitMessage(_Message):
    type: Literal["init"] = "init"
    tasks: tuple[Task, ...] = ()


class TaskCreated(_Message):
    type: Literal["task_created"] = "task_created"
    task: Task


class TaskUpdated(_Message):
    type: Literal["task_updated"] = "task_updated"
    task: Task


class TaskDeleted(_Message):
    type: Literal["task_deleted"] = "task_deleted"
    id: str


class TasksReorder(_Message):
    type: Literal["tasks_reorder"] = "tasks_reorder"
    tasks: tuple[Task, ...] = ()


class UnknownMessage(_Message):
    """Any message whose `type` is not one of the variants above."""

    type: str


KnownMessage = Annotated[
    Union[InitMessage, TaskCreated, TaskUpdated, TaskDeleted, TasksReorder],
    Field(discriminator="type"),
]

InboundMessage = Union[InitMessage, TaskCreated, TaskUpdated, TaskDeleted, TasksReorder, UnknownMessage]

INBOUND_TYPES: frozenset[str] = frozenset(
    {"init", "task_created", "task_updated", "task_deleted", "tasks_reorder"}
)

_KNOWN_ADAPTER: TypeAdapter = TypeAdapter(KnownMessage)


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


class ReorderMessage(_Message):
    type: Literal["reorder"] = "reorder"
    tasks: tuple[Task, ...]


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def decode_message(data: Any) -> InboundMessage:
    """Turn one decoded JSON object into a message variant."""
    if not isinstance(data, dict):
        raise MalformedMessageError("?", f"expected an object, got {type(data).__name__}")

    message_type = data.get("type")
    if message_type not in INBOUND_TYPES:
        return UnknownMessage(type=str(message_type))

    try:
        return _KNOWN_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise MalformedMessageError(message_type, str(e)) from e


def encode_message(message: _Message) -> dict[str, Any]:
    """Wire form of a message (camelCase keys, None fields dropped)."""
    return message.model_dump(mode="json", by_alias=True, exclude_none=True)
