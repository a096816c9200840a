"""Tests for the ``fetchmcp`` CLI commands."""

from __future__ import annotations

import base64
import json
from typing import Any
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from fetchmcp import __version__
from fetchmcp.cli import main
from fetchmcp.tools.fetch.errors import AllowlistRejectedError

RESULT = {
    "status": 200,
    "headers": [["content-type", "text/plain"]],
    "body": {"type": "base64", "data": base64.b64encode(b"hi there").decode(), "truncated": False},
}


def _patched_executor(**call_kwargs: Any) -> Any:
    patcher = patch("fetchmcp.tools.fetch.executor.FetchExecutor")
    mock_cls = patcher.start()
    instance = mock_cls.return_value
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    instance.call = AsyncMock(**call_kwargs)
    return patcher, mock_cls, instance


class TestVersion:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestToolsCommand:
    def test_table(self) -> None:
        result = CliRunner().invoke(main, ["tools"])
        assert result.exit_code == 0
        assert "fetch" in result.output

    def test_json(self) -> None:
        result = CliRunner().invoke(main, ["tools", "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert [t["name"] for t in payload["tools"]] == ["fetch"]
        assert payload["tools"][0]["inputSchema"]["required"] == ["url"]


class TestFetchCommand:
    def test_prints_result(self) -> None:
        patcher, mock_cls, instance = _patched_executor(return_value=RESULT)
        try:
            result = CliRunner().invoke(
                main,
                [
                    "fetch",
                    "https://example.com/",
                    "-X",
                    "POST",
                    "-H",
                    "Accept: text/plain",
                    "--json-body",
                    '{"a": 1}',
                    "--allowlist",
                    "example.com/*",
                    "--max-bytes",
                    "10",
                ],
            )
        finally:
            patcher.stop()

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["status"] == 200
        instance.call.assert_awaited_once_with(
            {
                "url": "https://example.com/",
                "method": "POST",
                "headers": {"Accept": "text/plain"},
                "body": {"a": 1},
            }
        )
        config = mock_cls.call_args.args[0]
        assert config.max_bytes == 10
        assert config.allowlist.patterns == ["https://example.com/*"]

    def test_body_only(self) -> None:
        patcher, _, _ = _patched_executor(return_value=RESULT)
        try:
            result = CliRunner().invoke(main, ["fetch", "https://example.com/", "--body-only"])
        finally:
            patcher.stop()
        assert result.exit_code == 0
        assert result.output == "hi there"

    def test_fetch_error_exits_nonzero(self) -> None:
        patcher, _, _ = _patched_executor(side_effect=AllowlistRejectedError())
        try:
            result = CliRunner().invoke(main, ["fetch", "https://evil.com/"])
        finally:
            patcher.stop()
        assert result.exit_code == 1
        assert "not allowed by allowlist" in result.output

    def test_env_config(self) -> None:
        patcher, mock_cls, _ = _patched_executor(return_value=RESULT)
        try:
            result = CliRunner().invoke(
                main,
                ["fetch", "https://example.com/"],
                env={"FETCH_TIMEOUT_MS": "1234", "FETCH_ALLOWLIST": "https://example.com/*"},
            )
        finally:
            patcher.stop()
        assert result.exit_code == 0
        config = mock_cls.call_args.args[0]
        assert config.timeout_ms == 1234

    def test_bad_header(self) -> None:
        result = CliRunner().invoke(main, ["fetch", "https://example.com/", "-H", "no-colon"])
        assert result.exit_code == 2
        assert "Invalid header" in result.output

    def test_data_and_json_body_exclusive(self) -> None:
        result = CliRunner().invoke(
            main, ["fetch", "https://example.com/", "-d", "x", "--json-body", "{}"]
        )
        assert result.exit_code == 2


class TestServeCommand:
    def test_clean_exit(self) -> None:
        with (
            patch("fetchmcp.protocols.mcp.server.serve_stdio", new=AsyncMock(return_value=True)),
            patch("fetchmcp.tools.fetch.executor.FetchExecutor") as mock_cls,
        ):
            instance = mock_cls.return_value
            instance.__aenter__ = AsyncMock(return_value=instance)
            instance.__aexit__ = AsyncMock(return_value=False)
            result = CliRunner().invoke(main, ["serve", "--timeout-ms", "500"])

        assert result.exit_code == 0
        assert mock_cls.call_args.args[0].timeout_ms == 500

    def test_transport_error_exit(self) -> None:
        with (
            patch("fetchmcp.protocols.mcp.server.serve_stdio", new=AsyncMock(return_value=False)),
            patch("fetchmcp.tools.fetch.executor.FetchExecutor") as mock_cls,
        ):
            instance = mock_cls.return_value
            instance.__aenter__ = AsyncMock(return_value=instance)
            instance.__aexit__ = AsyncMock(return_value=False)
            result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code == 1
