"""WebSocket relay server.

One process, one event loop. Every connection gets its own handler task: the
gatekeeper checks the Origin header, an admitted client receives the greeting,
then each text frame is answered by the configured responder.

Usage:
  python -m ws_relay -v
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Awaitable, Callable, Optional

import websockets
from websockets.asyncio.server import ServerConnection

from .config import RelayConfig
from .connection import Connection
from .gatekeeper import AllowList, Gatekeeper
from .relay import MessageRelay, RelayService
from .responders import Responder, build_responder


LOGGER = logging.getLogger("ws_relay.server")

Handler = Callable[[ServerConnection], Awaitable[None]]


def build_ssl_context(config: RelayConfig) -> Optional[ssl.SSLContext]:
    if not config.use_tls:
        return None
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(certfile=config.ssl_cert_path, keyfile=config.ssl_key_path)
    return context


def build_service(config: RelayConfig, responder: Optional[Responder] = None) -> RelayService:
    gatekeeper = Gatekeeper(AllowList(config.allowed_origins), check_origin=config.check_origin)
    relay = MessageRelay(
        responder if responder is not None else build_responder(config),
        fallback_text=config.fallback_text,
        timeout=config.responder_timeout,
    )
    return RelayService(gatekeeper, relay, greeting=config.greeting)


def create_handler(service: RelayService) -> Handler:
    async def handle_client(ws: ServerConnection) -> None:
        peer = getattr(ws, "remote_address", None) or ("?", "?")
        origin = ws.request.headers.get("Origin") if ws.request is not None else None
        connection = Connection(ws, origin, peer=f"{peer[0]}:{peer[1]}")
        await service.handle(connection)

    return handle_client


async def serve(
    config: RelayConfig,
    responder: Optional[Responder] = None,
    stop: Optional[asyncio.Future] = None,
    ready: Optional[asyncio.Future] = None,
) -> None:
    """Listen until ``stop`` resolves (or forever when it is not given).

    ``ready`` receives the bound port once the socket is listening.
    """
    service = build_service(config, responder)
    ssl_context = build_ssl_context(config)

    try:
        async with websockets.serve(
            create_handler(service),
            config.host,
            config.port,
            ssl=ssl_context,
        ) as server:
            port = server.sockets[0].getsockname()[1]
            LOGGER.info(
                "WebSocket server is listening on %s://%s:%s (origin check %s, responder %s)",
                config.scheme,
                config.host,
                port,
                "on" if config.check_origin else "off",
                config.responder,
            )
            if ready is not None and not ready.done():
                ready.set_result(port)
            await (stop if stop is not None else asyncio.Future())
    finally:
        aclose = getattr(service.relay.responder, "aclose", None)
        if aclose is not None:
            await aclose()
        LOGGER.info(
            "Server stopped; %d connections admitted, %d rejected",
            service.gatekeeper.stats.admitted,
            service.gatekeeper.stats.rejected,
        )


def run(config: RelayConfig) -> None:
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        LOGGER.info("Server stopped by user.")
