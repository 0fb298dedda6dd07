"""pytest configuration and fixtures for tcp-pingpong tests.

Provides:
- serving: async context manager running serve() on an ephemeral loopback port
- connection_pair: async context manager yielding (server, client) Connections
- raw_server: async context manager running a scripted asyncio server
- exchange_raw: send raw bytes and read the reply until EOF
- free_port for CLI integration tests
- Markers for unit vs integration tests

Async scenarios are driven with asyncio.run() inside plain test functions.
"""

import asyncio
import contextlib
import socket
from collections.abc import AsyncIterator, Awaitable, Callable

import pytest

from common.connection import Connection, Role
from server.listener import Listener
from server.runner import serve

LOOPBACK = "127.0.0.1"

StreamHandler = Callable[[asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None]]


@contextlib.asynccontextmanager
async def _serving(
    max_handlers: int | None = None,
    receive_timeout_s: float | None = None,
) -> AsyncIterator[Listener]:
    listener = Listener.start(0, host=LOOPBACK)
    task = asyncio.create_task(serve(listener, max_handlers, receive_timeout_s))
    try:
        yield listener
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        listener.close()


@contextlib.asynccontextmanager
async def _connection_pair() -> AsyncIterator[tuple[Connection, Connection]]:
    listener = Listener.start(0, host=LOOPBACK)
    accepted = listener.accept()
    try:
        reader, writer = await asyncio.open_connection(LOOPBACK, listener.port)
        server_conn = await accepted.__anext__()
        client_conn = Connection(reader=reader, writer=writer, role=Role.CLIENT)
        try:
            yield server_conn, client_conn
        finally:
            server_conn.close()
            client_conn.close()
    finally:
        await accepted.aclose()
        listener.close()


@contextlib.asynccontextmanager
async def _raw_server(handler: StreamHandler) -> AsyncIterator[int]:
    server = await asyncio.start_server(handler, LOOPBACK, 0)
    try:
        yield server.sockets[0].getsockname()[1]
    finally:
        server.close()
        await server.wait_closed()


async def _exchange_raw(port: int, payload: bytes) -> bytes:
    reader, writer = await asyncio.open_connection(LOOPBACK, port)
    try:
        writer.write(payload)
        await writer.drain()
        return await reader.read()
    finally:
        writer.close()
        await writer.wait_closed()


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test (real sockets)")


@pytest.fixture
def serving() -> Callable[..., contextlib.AbstractAsyncContextManager[Listener]]:
    """Factory for a running pong server on an ephemeral loopback port."""
    return _serving


@pytest.fixture
def connection_pair() -> Callable[[], contextlib.AbstractAsyncContextManager[tuple[Connection, Connection]]]:
    """Factory for a connected (server, client) Connection pair."""
    return _connection_pair


@pytest.fixture
def raw_server() -> Callable[[StreamHandler], contextlib.AbstractAsyncContextManager[int]]:
    """Factory for a scripted asyncio server; yields its port."""
    return _raw_server


@pytest.fixture
def exchange_raw() -> Callable[[int, bytes], Awaitable[bytes]]:
    """Send raw bytes to a loopback port and read everything until EOF."""
    return _exchange_raw


@pytest.fixture
def free_port() -> int:
    """Return a loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((LOOPBACK, 0))
        return s.getsockname()[1]

