import asyncio

import pytest
from websockets.exceptions import ConnectionClosed

from ws_relay.config import RelayConfig


EOF_MARK = object()


class FakeTransport:
    """In-memory stand-in for a websockets server connection."""

    def __init__(self, inbound=(), end=True):
        self.inbound: asyncio.Queue = asyncio.Queue()
        for frame in inbound:
            self.inbound.put_nowait(frame)
        if end:
            self.inbound.put_nowait(EOF_MARK)
        self.sent = []
        self.closed = False
        self.close_calls = 0

    async def send(self, message):
        if self.closed:
            raise ConnectionClosed(None, None)
        self.sent.append(message)

    async def close(self):
        self.close_calls += 1
        self.closed = True

    def push(self, frame):
        self.inbound.put_nowait(frame)

    def finish(self):
        self.inbound.put_nowait(EOF_MARK)

    def __aiter__(self):
        return self

    async def __anext__(self):
        frame = await self.inbound.get()
        if frame is EOF_MARK:
            raise StopAsyncIteration
        return frame


APP_ORIGIN = "https://app.example.com"


@pytest.fixture
def config():
    return RelayConfig(allowed_origins=frozenset({APP_ORIGIN}))
