"""Shared CLI output formatters and logging setup."""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console()
# stdout belongs to the JSON-RPC stream while serving.
err_console = Console(stderr=True)


def configure_logging(*, verbose: bool = False) -> None:
    """Route ``fetchmcp`` logs to stderr through rich."""
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    pkg_logger = logging.getLogger("fetchmcp")
    pkg_logger.handlers[:] = [handler]
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print ``tools/list`` descriptors as a table."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Required")
    table.add_column("Optional")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        required = list(schema.get("required", []))
        optional = [name for name in schema.get("properties", {}) if name not in required]
        table.add_row(
            tool.get("name", "?"),
            _truncate(tool.get("description", "")),
            ", ".join(required) or "-",
            ", ".join(optional) or "-",
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
