"""fetchmcp CLI entrypoint."""

from __future__ import annotations

import click

from fetchmcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="fetchmcp")
def main() -> None:
    """fetchmcp — allowlisted HTTP fetch tool served over MCP stdio."""


# Register subcommands
from fetchmcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
