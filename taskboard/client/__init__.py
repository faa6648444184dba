"""
Taskboard client runtime.

  settings    - environment configuration
  api         - request/response transport (httpx)
  channel     - duplex WebSocket session (websockets)
  store       - local snapshot + observers
  dispatcher  - user intents -> channel / API
  session     - wires the above for one board
"""

from taskboard.client.channel import ChannelSession, ChannelStatus
from taskboard.client.dispatcher import CommandDispatcher
from taskboard.client.session import BoardSession
from taskboard.client.store import BoardStore

__all__ = ["BoardSession", "BoardStore", "ChannelSession", "ChannelStatus", "CommandDispatcher"]
