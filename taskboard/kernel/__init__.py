"""
Taskboard Kernel: the pure engine.

Four components:
  grouping  - partition a flat task sequence by column, ranked
  reorder   - (tasks, move) -> tasks  (pure, deterministic)
  messages  - closed set of channel message variants + codec
  reducer   - (snapshot, message) -> snapshot  (pure, never raises)
"""

from taskboard.kernel.grouping import group_by, ordered_ids, settle
from taskboard.kernel.messages import decode_message, encode_message
from taskboard.kernel.reducer import empty_snapshot, reduce, reduce_all
from taskboard.kernel.reorder import is_noop, locate, move_task
from taskboard.kernel.types import COLUMNS, Board, ReduceResult, Slot, Task

__all__ = [
    "COLUMNS",
    "Board",
    "ReduceResult",
    "Slot",
    "Task",
    "group_by",
    "ordered_ids",
    "settle",
    "decode_message",
    "encode_message",
    "empty_snapshot",
    "reduce",
    "reduce_all",
    "is_noop",
    "locate",
    "move_task",
]
