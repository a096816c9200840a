"""Shared fixtures: in-memory stream halves and framing helpers."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import pytest


class BufferWriter:
    """Minimal stand-in for :class:`asyncio.StreamWriter` that records bytes."""

    def __init__(self) -> None:
        self.buffer = bytearray()
        self.drains = 0

    def write(self, data: bytes) -> None:
        self.buffer += data

    async def drain(self) -> None:
        self.drains += 1


def frame(payload: bytes) -> bytes:
    return f"Content-Length: {len(payload)}\r\n\r\n".encode() + payload


def frame_json(message: dict[str, Any]) -> bytes:
    return frame(json.dumps(message).encode())


@pytest.fixture
def make_reader() -> Callable[[bytes], asyncio.StreamReader]:
    def _make(data: bytes, *, eof: bool = True) -> asyncio.StreamReader:
        reader = asyncio.StreamReader()
        reader.feed_data(data)
        if eof:
            reader.feed_eof()
        return reader

    return _make


@pytest.fixture
def writer() -> BufferWriter:
    return BufferWriter()


@pytest.fixture
def framed() -> Callable[[dict[str, Any]], bytes]:
    return frame_json


@pytest.fixture
def raw_framed() -> Callable[[bytes], bytes]:
    return frame
