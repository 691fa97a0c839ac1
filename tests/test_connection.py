import pytest

from conftest import FakeTransport
from ws_relay.connection import Connection, ConnectionState


async def test_send_requires_open():
    transport = FakeTransport()
    conn = Connection(transport, "o")
    assert await conn.send("hi") is False
    conn.open()
    assert await conn.send("hi") is True
    assert transport.sent == ["hi"]


async def test_reject_closes_without_frames():
    transport = FakeTransport()
    conn = Connection(transport, None)
    await conn.reject()
    assert conn.state is ConnectionState.REJECTED
    assert transport.closed
    assert transport.sent == []
    assert await conn.send("late") is False


async def test_close_is_idempotent():
    transport = FakeTransport()
    conn = Connection(transport, "o")
    conn.open()
    await conn.close()
    await conn.close()
    assert conn.state is ConnectionState.CLOSED
    assert transport.close_calls == 1
    assert transport.sent == []


async def test_close_after_reject_is_noop():
    transport = FakeTransport()
    conn = Connection(transport, None)
    await conn.reject()
    await conn.close()
    assert conn.state is ConnectionState.REJECTED
    assert transport.close_calls == 1


async def test_cannot_open_twice():
    conn = Connection(FakeTransport(), "o")
    conn.open()
    with pytest.raises(RuntimeError):
        conn.open()


async def test_send_to_vanished_peer_marks_closed():
    transport = FakeTransport()
    conn = Connection(transport, "o")
    conn.open()
    transport.closed = True
    assert await conn.send("reply") is False
    assert conn.state is ConnectionState.CLOSED


async def test_messages_decode_bytes_and_close_at_end():
    conn = Connection(FakeTransport(["one", "two".encode()]), "o")
    conn.open()
    received = [m async for m in conn.messages()]
    assert received == ["one", "two"]
    assert conn.state is ConnectionState.CLOSED
