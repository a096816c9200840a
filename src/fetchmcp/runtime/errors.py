"""Shared error types for the runtime safety layer."""


class RuntimeSafetyError(Exception):
    """Base error for all runtime safety failures."""


class InvalidPatternError(RuntimeSafetyError):
    """An allowlist glob pattern could not be compiled."""

    def __init__(self, pattern: str, detail: str = "") -> None:
        self.pattern = pattern
        self.detail = detail
        msg = f"Invalid allowlist pattern: {pattern!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
