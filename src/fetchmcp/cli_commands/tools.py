"""``fetchmcp tools`` — show the tool descriptors the server advertises."""

from __future__ import annotations

import json

import click

from fetchmcp.cli_commands._output import console, print_tools_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output the tools/list result as JSON.")
def tools(as_json: bool) -> None:
    """List the tools advertised by ``tools/list``."""
    from fetchmcp.tools.fetch.schema import FETCH_TOOL

    descriptors = [FETCH_TOOL.model_dump(by_alias=True)]
    if as_json:
        console.print_json(json.dumps({"tools": descriptors}))
        return
    print_tools_table(descriptors)
