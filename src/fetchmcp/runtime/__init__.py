"""Runtime safety layer — URL allowlist."""

from fetchmcp.runtime.allowlist import DEFAULT_ALLOWLIST, FALLBACK_PATTERN, AllowlistMatcher
from fetchmcp.runtime.errors import InvalidPatternError, RuntimeSafetyError

__all__ = [
    "DEFAULT_ALLOWLIST",
    "FALLBACK_PATTERN",
    "AllowlistMatcher",
    "InvalidPatternError",
    "RuntimeSafetyError",
]
