"""Failure taxonomy for the fetch tool.

Every subclass carries a plain, user-facing message; the RPC layer reports
them all as ``InternalError`` and only the message text differs.
"""


class FetchError(Exception):
    """Base error for a failed fetch call."""


class InvalidInputError(FetchError):
    """Arguments or URL could not be parsed."""


class SchemeRejectedError(FetchError):
    """URL scheme is not ``http`` or ``https``."""

    def __init__(self) -> None:
        super().__init__("Only http and https are allowed")


class AllowlistRejectedError(FetchError):
    """URL does not match the configured allowlist."""

    def __init__(self) -> None:
        super().__init__("URL not allowed by allowlist")


class FetchTimeoutError(FetchError):
    """The upstream did not respond within the effective timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__("request timed out")


class TransportError(FetchError):
    """Connection, DNS, TLS or HTTP protocol failure talking to the upstream."""
