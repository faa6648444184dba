"""
Taskboard Kernel: Shared Types

Models used across grouping, reorder, messages and the reducer.
These are the contracts that bind the kernel together.

Key points:
- `Task` is immutable. Every state change produces new Task objects via
  `model_copy(update=...)`, so a snapshot (a tuple of tasks) can be shared
  freely and compared by identity to detect "nothing changed".
- Wire names are camelCase (`createdAt`, `boardId`); Python attributes are
  snake_case. Both are accepted on input.
- `order` is the rank inside a column. A settled snapshot has orders 0..n-1
  in every column. The server may omit it; an unranked task sorts after
  the ranked ones in its column.
"""

from __future__ import annotations

from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------

Column = Literal["todo", "inprogress", "done", "unsure"]

# Fixed enumeration. Its order is the order of the flat task sequence.
COLUMNS: tuple[str, ...] = ("todo", "inprogress", "done", "unsure")

COLUMN_TITLES: dict[str, str] = {
    "todo": "To Do",
    "inprogress": "In Progress",
    "done": "Done",
    "unsure": "Unsure",
}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Task(BaseModel):
    """One card on the board."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str | None = None
    column: Column = "todo"
    order: int | None = Field(default=None, ge=0)
    created_at: int = Field(default=0, alias="createdAt")
    board_id: str | None = Field(default=None, alias="boardId")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Board(BaseModel):
    """Board metadata. Read-only context for the sync core."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    name: str
    team_id: str | None = Field(default=None, alias="teamId")
    owner_id: str | None = Field(default=None, alias="ownerId")
    is_personal: bool = Field(default=False, alias="isPersonal")
    created_at: int = Field(default=0, alias="createdAt")


class Slot(NamedTuple):
    """A position on the board: column plus index inside that column."""

    column: str
    index: int


# A snapshot is the full flat task sequence, in COLUMNS order once settled.
Snapshot = tuple[Task, ...]


class ReduceResult:
    """
    Result of folding one message into a snapshot.
    Never throws. On rejection `snapshot` is the input object itself.
    """

    __slots__ = ("snapshot", "accepted", "reason")

    def __init__(self, snapshot: Snapshot, accepted: bool, reason: str | None = None) -> None:
        self.snapshot = snapshot
        self.accepted = accepted
        self.reason = reason

    def __repr__(self) -> str:  # pragma: no cover
        if self.accepted:
            return "ReduceResult(accepted=True)"
        return f"ReduceResult(accepted=False, reason={self.reason!r})"
