"""MCP protocol — Content-Length framing and JSON-RPC 2.0 models.

The dispatch loop lives in :mod:`fetchmcp.protocols.mcp.server`.
"""

from fetchmcp.protocols.mcp.framing import read_message, write_message
from fetchmcp.protocols.mcp.models import (
    ErrorCode,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPToolDef,
    ToolCallParams,
)

__all__ = [
    "ErrorCode",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPToolDef",
    "ToolCallParams",
    "read_message",
    "write_message",
]
