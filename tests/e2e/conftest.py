"""Shared helpers for end-to-end tests: a tiny real HTTP/1.1 upstream."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest

MOCK_BODY = b"hello from mock"


async def _serve_mock(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    # Drain the request head; the mock ignores method, path and body.
    while True:
        line = await reader.readline()
        if line in (b"\r\n", b"\n", b""):
            break
    head = (
        "HTTP/1.1 200 OK\r\n"
        f"Content-Length: {len(MOCK_BODY)}\r\n"
        "Content-Type: text/plain\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    writer.write(head.encode() + MOCK_BODY)
    await writer.drain()
    writer.close()


@pytest.fixture
async def mock_upstream() -> AsyncIterator[str]:
    """Start a local HTTP server and yield its base URL."""
    server = await asyncio.start_server(_serve_mock, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        server.close()
        await server.wait_closed()
