"""``fetchmcp serve`` — run the MCP server on stdin/stdout."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from fetchmcp.cli_commands._options import build_config, config_options
from fetchmcp.cli_commands._output import configure_logging, err_console

logger = logging.getLogger(__name__)


@click.command()
@config_options
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
@click.option("--telemetry", is_flag=True, help="Export trace spans to stderr.")
@click.option("--otlp-endpoint", default=None, help="Also export spans via OTLP/gRPC.")
def serve(
    allowlist: str,
    timeout_ms: int,
    max_bytes: int,
    verbose: bool,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Serve the fetch tool over Content-Length framed JSON-RPC on stdio.

    Exits 0 when stdin closes, 1 when the control stream fails.
    """
    from fetchmcp.protocols.mcp.server import serve_stdio
    from fetchmcp.tools.fetch.executor import FetchExecutor

    configure_logging(verbose=verbose)

    if telemetry or otlp_endpoint:
        from fetchmcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=telemetry, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            err_console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    config = build_config(allowlist, timeout_ms, max_bytes)
    logger.debug(
        "allowlist=%s timeout_ms=%d max_bytes=%d",
        config.allowlist.patterns,
        config.timeout_ms,
        config.max_bytes,
    )

    async def _serve() -> bool:
        async with FetchExecutor(config) as executor:
            return await serve_stdio(executor)

    try:
        clean = asyncio.run(_serve())
    except KeyboardInterrupt:
        clean = True

    if not clean:
        sys.exit(1)
