"""AllowlistMatcher — decides whether a URL may be fetched.

Pure logic, no I/O.  Patterns are Unix-style globs (``fnmatch``) evaluated
against the *full* serialized URL, so ``*`` also crosses ``/`` boundaries::

    matcher = AllowlistMatcher.from_string("example.com/*, http://localhost:*")
    matcher.is_allowed("https://example.com/a/b?q=1")  # True
    matcher.is_allowed("https://evil.com/")            # False

Patterns without an ``http://``/``https://`` prefix are normalized to
``https://<pattern>``.  A pattern that does not compile is replaced by
:data:`FALLBACK_PATTERN` instead of failing configuration.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from typing import TYPE_CHECKING

from fetchmcp.runtime.errors import InvalidPatternError

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

logger = logging.getLogger(__name__)

DEFAULT_ALLOWLIST = "https://*"
FALLBACK_PATTERN = "https://*"

_SCHEME_PREFIXES = ("http://", "https://")


class AllowlistMatcher:
    """Compiled set of URL glob patterns.

    An empty set matches nothing.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self._patterns: list[str] = []
        self._compiled: list[re.Pattern[str]] = []
        for raw in patterns:
            pattern = raw.strip()
            if not pattern:
                continue
            pattern = normalize_pattern(pattern)
            try:
                compiled = compile_pattern(pattern)
            except InvalidPatternError as exc:
                logger.warning("%s; falling back to %s", exc, FALLBACK_PATTERN)
                pattern = FALLBACK_PATTERN
                compiled = compile_pattern(pattern)
            self._patterns.append(pattern)
            self._compiled.append(compiled)

    @classmethod
    def from_string(cls, value: str) -> AllowlistMatcher:
        """Build a matcher from a comma-separated pattern list."""
        return cls(value.split(","))

    @property
    def patterns(self) -> list[str]:
        """Normalized pattern strings, in configuration order."""
        return list(self._patterns)

    def is_allowed(self, url: str | httpx.URL) -> bool:
        """Return ``True`` if *url* matches at least one pattern."""
        candidate = str(url)
        return any(regex.match(candidate) for regex in self._compiled)

    def __repr__(self) -> str:
        return f"AllowlistMatcher({self._patterns!r})"


def normalize_pattern(pattern: str) -> str:
    """Prefix ``https://`` unless the pattern already names http(s)."""
    if pattern.startswith(_SCHEME_PREFIXES):
        return pattern
    return f"https://{pattern}"


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a glob into a case-sensitive, full-string regex.

    Raises :class:`InvalidPatternError` for an unterminated ``[...]`` class,
    which ``fnmatch`` would otherwise silently treat as a literal.
    """
    _check_brackets(pattern)
    try:
        return re.compile(fnmatch.translate(pattern))
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


def _check_brackets(pattern: str) -> None:
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] != "[":
            i += 1
            continue
        j = i + 1
        if j < n and pattern[j] == "!":
            j += 1
        # A leading "]" is part of the class.
        if j < n and pattern[j] == "]":
            j += 1
        end = pattern.find("]", j)
        if end == -1:
            raise InvalidPatternError(pattern, "unclosed character class")
        i = end + 1
