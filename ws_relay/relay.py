from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing

from .config import DEFAULT_FALLBACK_TEXT, DEFAULT_GREETING
from .connection import Connection
from .gatekeeper import Gatekeeper
from .responders import Responder


LOGGER = logging.getLogger("ws_relay.relay")


class MessageRelay:
    """Turns each inbound message into exactly one outbound frame.

    Messages on a connection are handled one at a time, so replies go out in
    the order their messages arrived regardless of responder latency.
    """

    def __init__(
        self,
        responder: Responder,
        fallback_text: str = DEFAULT_FALLBACK_TEXT,
        timeout: float = 30.0,
    ):
        self.responder = responder
        self.fallback_text = fallback_text
        self.timeout = timeout

    async def respond(self, text: str) -> str:
        try:
            return await asyncio.wait_for(self.responder(text), timeout=self.timeout)
        except asyncio.TimeoutError:
            LOGGER.error("Responder gave no reply within %.1fs", self.timeout)
        except Exception:  # noqa: BLE001 - any failure maps to the fallback frame
            LOGGER.exception("Error processing responder reply")
        return self.fallback_text

    async def serve(self, connection: Connection) -> int:
        """Relay until the peer disconnects. Returns the number of replies sent."""
        sent = 0
        async with aclosing(connection.messages()) as messages:
            async for text in messages:
                LOGGER.debug("Received message from %s: %s", connection.peer, text)
                reply = await self.respond(text)
                if not await connection.send(reply):
                    LOGGER.debug("Discarding reply for closed connection %s", connection.peer)
                    break
                sent += 1
        return sent


class RelayService:
    """Per-connection driver: gatekeeper once, greeting, then the relay loop."""

    def __init__(
        self,
        gatekeeper: Gatekeeper,
        relay: MessageRelay,
        greeting: str = DEFAULT_GREETING,
    ):
        self.gatekeeper = gatekeeper
        self.relay = relay
        self.greeting = greeting

    async def handle(self, connection: Connection) -> None:
        if not self.gatekeeper.admit(connection.origin):
            await connection.reject()
            return

        connection.open()
        LOGGER.info("New client connected: %s", connection.peer)
        try:
            if await connection.send(self.greeting):
                await self.relay.serve(connection)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Unexpected error on connection %s", connection.peer)
        finally:
            connection.mark_closed()
            LOGGER.info("Client disconnected: %s", connection.peer)
