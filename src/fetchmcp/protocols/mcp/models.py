"""MCP models — JSON-RPC 2.0 messages and tool definitions.

Implements the message shapes the server speaks for ``initialize``, tool
discovery (``tools/list``) and execution (``tools/call``).
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"

RequestId = StrictInt | StrictStr | None

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class ErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    ``id`` is required (it may be ``null``); messages without one are
    notifications and do not validate.
    """

    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"]
    id: RequestId
    method: StrictStr
    params: Any = None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    result: Any = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: RequestId, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: RequestId,
        code: ErrorCode,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(
            id=request_id,
            error=JsonRpcError(code=int(code), message=message, data=data),
        )

    def to_wire(self) -> dict[str, Any]:
        """Wire form: ``id`` is always present, unset fields are dropped."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.model_dump(exclude_none=True)
        else:
            wire["result"] = self.result
        return wire


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolCallParams(BaseModel):
    """``params`` of a ``tools/call`` request."""

    name: StrictStr
    arguments: Any = None


class MCPToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")
