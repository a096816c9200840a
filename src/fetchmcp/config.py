"""Server configuration — allowlist, default timeout, default body cap.

Built once at startup (from the environment or CLI options) and shared
read-only by every component afterwards.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from fetchmcp import __version__
from fetchmcp.runtime.allowlist import DEFAULT_ALLOWLIST, AllowlistMatcher

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 15_000
DEFAULT_MAX_BYTES = 5 * 1024 * 1024

ENV_ALLOWLIST = "FETCH_ALLOWLIST"
ENV_TIMEOUT_MS = "FETCH_TIMEOUT_MS"
ENV_MAX_BYTES = "FETCH_MAX_BYTES"


class FetchConfig(BaseModel):
    """Immutable configuration snapshot for the fetch server."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    allowlist: AllowlistMatcher = Field(
        default_factory=lambda: AllowlistMatcher.from_string(DEFAULT_ALLOWLIST),
        description="Compiled URL glob patterns a fetch must match.",
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=0,
        description="Default request timeout in milliseconds.",
    )
    max_bytes: int = Field(
        default=DEFAULT_MAX_BYTES,
        ge=0,
        description="Default cap on collected response body bytes.",
    )
    user_agent: str = Field(default=f"fetchmcp/{__version__}")

    @property
    def timeout(self) -> float:
        """Default timeout in seconds."""
        return self.timeout_ms / 1000

    @classmethod
    def from_settings(
        cls,
        *,
        allowlist: str | None = None,
        timeout_ms: int | None = None,
        max_bytes: int | None = None,
    ) -> FetchConfig:
        """Build a config from optional raw settings, defaulting what is unset."""
        return cls(
            allowlist=AllowlistMatcher.from_string(
                DEFAULT_ALLOWLIST if allowlist is None else allowlist
            ),
            timeout_ms=DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms,
            max_bytes=DEFAULT_MAX_BYTES if max_bytes is None else max_bytes,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FetchConfig:
        """Read ``FETCH_ALLOWLIST``, ``FETCH_TIMEOUT_MS`` and ``FETCH_MAX_BYTES``.

        Numeric values that do not parse fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        return cls.from_settings(
            allowlist=env.get(ENV_ALLOWLIST),
            timeout_ms=_parse_int(env, ENV_TIMEOUT_MS),
            max_bytes=_parse_int(env, ENV_MAX_BYTES),
        )


def _parse_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name)
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None
    if value < 0:
        logger.warning("Ignoring %s=%r: must not be negative", name, raw)
        return None
    return value
