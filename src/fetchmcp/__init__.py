"""fetchmcp — a single-tool MCP server exposing an allowlisted HTTP fetch."""

from __future__ import annotations

__version__ = "0.1.0"
