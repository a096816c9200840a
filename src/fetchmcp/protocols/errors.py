"""Shared error types for the protocol layer."""


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""


class FramingError(ProtocolError):
    """A message could not be framed on the control stream."""


class EndOfStreamError(FramingError):
    """The stream closed before a complete message was read.

    ``partial`` is ``False`` when the stream ended cleanly between messages.
    """

    def __init__(self, detail: str = "", *, partial: bool = False) -> None:
        self.partial = partial
        super().__init__(detail or "End of stream")


class FramingFormatError(FramingError):
    """The header block was malformed (missing or bad ``Content-Length``)."""
