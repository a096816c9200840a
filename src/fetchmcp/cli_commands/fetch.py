"""``fetchmcp fetch`` — run a single fetch through the tool executor."""

from __future__ import annotations

import asyncio
import base64
import json
import sys
from typing import Any

import click

from fetchmcp.cli_commands._options import build_config, config_options
from fetchmcp.cli_commands._output import configure_logging, console


@click.command()
@click.argument("url")
@click.option("--method", "-X", default=None, help="HTTP method (default GET).")
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help="Request header as 'Name: value'. Repeatable.",
)
@click.option("--data", "-d", default=None, help="Raw text request body.")
@click.option("--json-body", default=None, help="JSON request body (parsed, then re-serialized).")
@click.option("--body-only", is_flag=True, help="Print the decoded body instead of the result JSON.")
@config_options
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
def fetch(
    url: str,
    method: str | None,
    headers: tuple[str, ...],
    data: str | None,
    json_body: str | None,
    body_only: bool,
    allowlist: str,
    timeout_ms: int,
    max_bytes: int,
    verbose: bool,
) -> None:
    """Fetch URL with the same gates the server applies and print the result."""
    from fetchmcp.tools.fetch.errors import FetchError
    from fetchmcp.tools.fetch.executor import FetchExecutor

    configure_logging(verbose=verbose)

    arguments: dict[str, Any] = {"url": url}
    if method:
        arguments["method"] = method
    if headers:
        try:
            arguments["headers"] = _parse_headers(headers)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--header") from exc
    if data is not None and json_body is not None:
        raise click.UsageError("--data and --json-body are mutually exclusive")
    if data is not None:
        arguments["body"] = data
    elif json_body is not None:
        try:
            arguments["body"] = json.loads(json_body)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(str(exc), param_hint="--json-body") from exc

    config = build_config(allowlist, timeout_ms, max_bytes)

    async def _fetch() -> dict[str, Any]:
        async with FetchExecutor(config) as executor:
            return await executor.call(arguments)

    try:
        result = asyncio.run(_fetch())
    except FetchError as exc:
        console.print(f"[red]Fetch error:[/red] {exc}")
        sys.exit(1)

    if body_only:
        sys.stdout.buffer.write(base64.b64decode(result["body"]["data"]))
        sys.stdout.flush()
        return
    console.print_json(json.dumps(result))


def _parse_headers(pairs: tuple[str, ...]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition(":")
        if not sep or not name.strip():
            msg = f"Invalid header {pair!r}. Use 'Name: value'."
            raise ValueError(msg)
        parsed[name.strip()] = value.strip()
    return parsed
