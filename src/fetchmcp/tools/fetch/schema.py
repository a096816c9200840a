"""Tool descriptor advertised by ``tools/list``."""

from __future__ import annotations

from fetchmcp.protocols.mcp.models import MCPToolDef

FETCH_TOOL_NAME = "fetch"

FETCH_INPUT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "url": {"type": "string"},
        "method": {"type": "string", "default": "GET"},
        "headers": {"type": "object", "additionalProperties": {"type": "string"}},
        "body": {"oneOf": [{"type": "string"}, {"type": "object"}]},
        "timeoutMs": {"type": "number"},
        "maxBytes": {"type": "number"},
    },
    "required": ["url"],
    "additionalProperties": False,
}

FETCH_TOOL = MCPToolDef(
    name=FETCH_TOOL_NAME,
    description="Perform HTTP requests with allowlist restrictions",
    input_schema=FETCH_INPUT_SCHEMA,
)
