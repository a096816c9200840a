"""The ``fetch`` tool — allowlisted, time- and size-bounded HTTP requests."""

from fetchmcp.tools.fetch.errors import (
    AllowlistRejectedError,
    FetchError,
    FetchTimeoutError,
    InvalidInputError,
    SchemeRejectedError,
    TransportError,
)
from fetchmcp.tools.fetch.executor import FetchExecutor
from fetchmcp.tools.fetch.models import FetchInput, FetchResult, JsonBody, TextBody
from fetchmcp.tools.fetch.schema import FETCH_TOOL, FETCH_TOOL_NAME

__all__ = [
    "FETCH_TOOL",
    "FETCH_TOOL_NAME",
    "AllowlistRejectedError",
    "FetchError",
    "FetchExecutor",
    "FetchInput",
    "FetchResult",
    "FetchTimeoutError",
    "InvalidInputError",
    "JsonBody",
    "SchemeRejectedError",
    "TextBody",
    "TransportError",
]
