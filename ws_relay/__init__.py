"""Origin-checked WebSocket relay that answers each message via a pluggable responder."""

from .config import ConfigError, RelayConfig
from .connection import Connection, ConnectionState
from .gatekeeper import AllowList, Gatekeeper
from .relay import MessageRelay, RelayService

__version__ = "0.1.0"

__all__ = [
    "AllowList",
    "ConfigError",
    "Connection",
    "ConnectionState",
    "Gatekeeper",
    "MessageRelay",
    "RelayConfig",
    "RelayService",
]
