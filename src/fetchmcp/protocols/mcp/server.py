"""MCPServer — JSON-RPC dispatch loop for the ``fetch`` tool.

Reads one framed message at a time, routes it by method name, writes the
response, and only then reads the next message.  Responses therefore leave in
exactly the order their requests arrived.

Per-message state machine:

1. decode the payload as a :class:`JsonRpcRequest`; anything that does not
   decode (bad JSON, notifications, junk) is dropped without a response;
2. route ``initialize`` / ``tools/list`` / ``tools/call``; any other method
   gets ``MethodNotFound``;
3. encode the :class:`JsonRpcResponse` and frame it back onto the stream.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from fetchmcp import __version__
from fetchmcp.protocols.errors import EndOfStreamError, FramingFormatError
from fetchmcp.protocols.mcp.framing import read_message, write_message
from fetchmcp.protocols.mcp.models import (
    ErrorCode,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolCallParams,
)
from fetchmcp.tools.fetch.errors import FetchError
from fetchmcp.tools.fetch.schema import FETCH_TOOL, FETCH_TOOL_NAME
from fetchmcp.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_ID,
    ATTR_RPC_METHOD,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from fetchmcp.tools.fetch.executor import FetchExecutor

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "fetchmcp"

Handler = Callable[[JsonRpcRequest], Awaitable[JsonRpcResponse]]


def decode_request(payload: bytes) -> JsonRpcRequest | None:
    """Parse *payload* as a request, or return ``None`` if it is not one."""
    try:
        return JsonRpcRequest.model_validate_json(payload)
    except ValidationError as exc:
        logger.debug("Dropping non-request message: %s", exc.errors()[0]["msg"])
        return None


def encode_response(response: JsonRpcResponse) -> bytes:
    return json.dumps(response.to_wire()).encode("utf-8")


class MCPServer:
    """Serves the single ``fetch`` tool over a framed byte stream.

    Usage::

        async with FetchExecutor(config) as executor:
            server = MCPServer(executor)
            await server.serve(reader, writer)
    """

    def __init__(self, executor: FetchExecutor) -> None:
        self._executor = executor
        self._handlers: dict[str, Handler] = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._handlers)

    async def serve(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> bool:
        """Run the request loop until the stream ends.

        Returns ``True`` on a clean end-of-stream, ``False`` when the loop
        stopped on a framing or transport error (already logged).
        """
        while True:
            try:
                payload = await read_message(reader)
            except EndOfStreamError as exc:
                if exc.partial:
                    logger.error("read_message error: %s", exc)
                    return False
                logger.debug("Control stream closed")
                return True
            except (FramingFormatError, OSError) as exc:
                logger.error("read_message error: %s", exc)
                return False

            response = await self.handle_message(payload)
            if response is None:
                continue

            try:
                await write_message(writer, encode_response(response))
            except OSError as exc:
                logger.error("write_message error: %s", exc)
                return False

    async def handle_message(self, payload: bytes) -> JsonRpcResponse | None:
        """Decode and dispatch one raw message; ``None`` means no reply."""
        request = decode_request(payload)
        if request is None:
            return None
        return await self.dispatch(request)

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Route *request* to its handler and return the response."""
        with _tracer.start_as_current_span("rpc.dispatch") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            if request.id is not None:
                span.set_attribute(ATTR_RPC_ID, str(request.id))

            handler = self._handlers.get(request.method)
            if handler is None:
                response = JsonRpcResponse.failure(
                    request.id, ErrorCode.METHOD_NOT_FOUND, "Unknown method"
                )
            else:
                try:
                    response = await handler(request)
                except Exception:
                    logger.exception("Unhandled error in %s", request.method)
                    response = JsonRpcResponse.failure(
                        request.id, ErrorCode.INTERNAL_ERROR, "Internal error"
                    )

            if response.error is not None:
                span.set_attribute(ATTR_RPC_ERROR_CODE, response.error.code)
            return response

    # -- handlers ----------------------------------------------------------

    async def _handle_initialize(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(
            request.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": True},
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
            },
        )

    async def _handle_tools_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(
            request.id,
            {"tools": [FETCH_TOOL.model_dump(by_alias=True)]},
        )

    async def _handle_tools_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            params = ToolCallParams.model_validate(request.params)
        except ValidationError:
            return JsonRpcResponse.failure(request.id, ErrorCode.INVALID_PARAMS, "Invalid params")

        if params.name != FETCH_TOOL_NAME:
            return JsonRpcResponse.failure(request.id, ErrorCode.INVALID_PARAMS, "Unknown tool")

        with _tracer.start_as_current_span("tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, params.name)
            try:
                result: dict[str, Any] = await self._executor.call(params.arguments)
            except FetchError as exc:
                logger.info("fetch failed: %s", exc)
                return JsonRpcResponse.failure(request.id, ErrorCode.INTERNAL_ERROR, str(exc))
        return JsonRpcResponse.success(request.id, result)


async def open_stdio() -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Wrap the process stdin/stdout in asyncio streams."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin.buffer)
    transport, write_protocol = await loop.connect_write_pipe(
        asyncio.streams.FlowControlMixin, sys.stdout.buffer
    )
    writer = asyncio.StreamWriter(transport, write_protocol, reader, loop)
    return reader, writer


async def serve_stdio(executor: FetchExecutor) -> bool:
    """Serve over the process stdin/stdout; see :meth:`MCPServer.serve`."""
    reader, writer = await open_stdio()
    server = MCPServer(executor)
    logger.info("fetchmcp %s serving on stdio", __version__)
    try:
        return await server.serve(reader, writer)
    finally:
        writer.close()
