from __future__ import annotations

import enum
import logging
from typing import AsyncIterator, Optional, Protocol, Union

from websockets.exceptions import ConnectionClosed


LOGGER = logging.getLogger("ws_relay.connection")

Frame = Union[str, bytes]


class Transport(Protocol):
    """What a Connection needs from the socket library."""

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...

    def __aiter__(self) -> AsyncIterator[Frame]: ...


class ConnectionState(str, enum.Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    REJECTED = "rejected"
    CLOSED = "closed"


TERMINAL_STATES = frozenset({ConnectionState.REJECTED, ConnectionState.CLOSED})


class Connection:
    """One live transport session.

    The origin is captured once at connect time. Sends are dropped, not raised,
    once the connection has left the OPEN state.
    """

    def __init__(self, transport: Transport, origin: Optional[str], peer: str = "?"):
        self.transport = transport
        self.origin = origin
        self.peer = peer
        self.state = ConnectionState.CONNECTING

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    def open(self) -> None:
        if self.state is not ConnectionState.CONNECTING:
            raise RuntimeError(f"Cannot open a connection in state {self.state.value}")
        self.state = ConnectionState.OPEN

    async def reject(self) -> None:
        if self.state is not ConnectionState.CONNECTING:
            return
        self.state = ConnectionState.REJECTED
        await self._close_transport()

    def mark_closed(self) -> None:
        if self.state not in TERMINAL_STATES:
            self.state = ConnectionState.CLOSED

    async def close(self) -> None:
        if self.state in TERMINAL_STATES:
            return
        self.state = ConnectionState.CLOSED
        await self._close_transport()

    async def send(self, text: str) -> bool:
        if not self.is_open:
            LOGGER.debug("Dropping frame for %s connection %s", self.state.value, self.peer)
            return False
        try:
            await self.transport.send(text)
        except (ConnectionClosed, OSError) as exc:
            LOGGER.info("Client %s went away before a reply could be sent: %s", self.peer, exc)
            self.mark_closed()
            return False
        return True

    async def messages(self) -> AsyncIterator[str]:
        """Inbound text, in arrival order, until the peer disconnects."""
        try:
            async for frame in self.transport:
                if isinstance(frame, bytes):
                    frame = frame.decode("utf-8", errors="replace")
                yield frame
        except ConnectionClosed as exc:
            LOGGER.debug("Connection %s closed: %s", self.peer, exc)
        finally:
            self.mark_closed()

    async def _close_transport(self) -> None:
        try:
            await self.transport.close()
        except (ConnectionClosed, OSError) as exc:
            LOGGER.debug("Transport for %s already gone: %s", self.peer, exc)

    def __repr__(self) -> str:
        return f"Connection(peer={self.peer!r}, origin={self.origin!r}, state={self.state.value})"
