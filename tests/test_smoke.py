"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import fetchmcp

    assert fetchmcp.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from fetchmcp.cli import main

    assert callable(main)


def test_package_exports() -> None:
    from fetchmcp.protocols.mcp import ErrorCode, JsonRpcRequest, read_message, write_message
    from fetchmcp.runtime import AllowlistMatcher
    from fetchmcp.tools.fetch import FETCH_TOOL, FetchExecutor, FetchInput

    assert FETCH_TOOL.name == "fetch"
    assert FetchExecutor is not None
    assert FetchInput is not None
    assert AllowlistMatcher is not None
    assert ErrorCode.METHOD_NOT_FOUND == -32601
    assert JsonRpcRequest is not None
    assert callable(read_message)
    assert callable(write_message)
