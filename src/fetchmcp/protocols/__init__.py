"""Protocol layer — MCP framing, JSON-RPC envelope and dispatch."""

from fetchmcp.protocols.errors import (
    EndOfStreamError,
    FramingError,
    FramingFormatError,
    ProtocolError,
)

__all__ = [
    "EndOfStreamError",
    "FramingError",
    "FramingFormatError",
    "ProtocolError",
]
