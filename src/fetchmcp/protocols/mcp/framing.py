"""Content-Length framing for MCP over a raw byte stream.

Each message on the wire is::

    Content-Length: <decimal byte count>\\r\\n
    \\r\\n
    <exactly that many raw bytes>

Only ``Content-Length`` is recognized on read; any other header line is
ignored.  Writes emit ``Content-Length`` and nothing else.
"""

from __future__ import annotations

import asyncio

from fetchmcp.protocols.errors import EndOfStreamError, FramingFormatError

CONTENT_LENGTH = b"content-length"

_BLANK_LINES = (b"\r\n", b"\n")


async def read_message(reader: asyncio.StreamReader) -> bytes:
    """Read one framed message body from *reader*.

    Raises
    ------
    EndOfStreamError
        The stream closed before the headers or body were complete.
    FramingFormatError
        ``Content-Length`` is missing or not a non-negative integer.
    """
    content_length: int | None = None
    seen_any = False

    while True:
        try:
            line = await reader.readline()
        except ValueError as exc:
            # StreamReader raises ValueError when a line overruns its limit.
            msg = f"Header line too long: {exc}"
            raise FramingFormatError(msg) from exc
        if not line:
            if seen_any:
                raise EndOfStreamError("EOF while reading headers", partial=True)
            raise EndOfStreamError()
        seen_any = True
        if not line.endswith(b"\n"):
            raise EndOfStreamError("EOF while reading headers", partial=True)
        if line in _BLANK_LINES:
            break

        name, sep, value = line.partition(b":")
        if not sep or name.strip().lower() != CONTENT_LENGTH:
            continue
        content_length = _parse_length(value)

    if content_length is None:
        msg = "Missing Content-Length"
        raise FramingFormatError(msg)

    try:
        return await reader.readexactly(content_length)
    except asyncio.IncompleteReadError as exc:
        msg = f"EOF after {len(exc.partial)} of {content_length} body bytes"
        raise EndOfStreamError(msg, partial=True) from exc


async def write_message(writer: asyncio.StreamWriter, payload: bytes) -> None:
    """Write *payload* with a ``Content-Length`` header and drain."""
    header = f"Content-Length: {len(payload)}\r\n\r\n".encode("ascii")
    writer.write(header + payload)
    await writer.drain()


def _parse_length(value: bytes) -> int:
    text = value.strip()
    if not text.isdigit():
        msg = "Invalid Content-Length"
        raise FramingFormatError(msg)
    return int(text)
