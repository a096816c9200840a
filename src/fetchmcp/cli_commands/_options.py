"""Configuration options shared by ``serve`` and ``fetch``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

from fetchmcp.config import (
    DEFAULT_MAX_BYTES,
    DEFAULT_TIMEOUT_MS,
    ENV_ALLOWLIST,
    ENV_MAX_BYTES,
    ENV_TIMEOUT_MS,
    FetchConfig,
)
from fetchmcp.runtime.allowlist import DEFAULT_ALLOWLIST

F = TypeVar("F", bound=Callable[..., Any])


def config_options(func: F) -> F:
    """Attach ``--allowlist``, ``--timeout-ms`` and ``--max-bytes``."""
    func = click.option(
        "--max-bytes",
        type=click.IntRange(min=0),
        default=DEFAULT_MAX_BYTES,
        envvar=ENV_MAX_BYTES,
        show_default=True,
        help="Default cap on collected response body bytes.",
    )(func)
    func = click.option(
        "--timeout-ms",
        type=click.IntRange(min=0),
        default=DEFAULT_TIMEOUT_MS,
        envvar=ENV_TIMEOUT_MS,
        show_default=True,
        help="Default request timeout in milliseconds.",
    )(func)
    func = click.option(
        "--allowlist",
        default=DEFAULT_ALLOWLIST,
        envvar=ENV_ALLOWLIST,
        show_default=True,
        help="Comma-separated URL glob patterns; bare hosts get https:// prepended.",
    )(func)
    return func


def build_config(allowlist: str, timeout_ms: int, max_bytes: int) -> FetchConfig:
    return FetchConfig.from_settings(
        allowlist=allowlist,
        timeout_ms=timeout_ms,
        max_bytes=max_bytes,
    )
