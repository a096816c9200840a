"""Bounded Content-Encoding decoders for capped body reads.

httpx's own decoders expand each network chunk in full before handing it
over, so a few kilobytes of gzip can turn into hundreds of megabytes before a
byte cap is ever checked.  The decoders here take an output limit on every
call and never produce more than that, so memory stays proportional to the
cap rather than to the compression ratio.

Only ``gzip`` and ``deflate`` are decoded (the client advertises exactly
those).  Any other single coding is passed through untouched, as httpx does
for codings it does not know; the caller still sees ``Content-Encoding`` in
the returned headers.
"""

from __future__ import annotations

import zlib

import httpx

ACCEPT_ENCODING = "gzip, deflate"


class PassthroughDecoder:
    """Identity coding: raw bytes are the body."""

    def decode(self, data: bytes, limit: int) -> bytes:
        return data[:limit]

    def flush(self, limit: int) -> bytes:
        return b""


class ZlibDecoder:
    """``gzip`` or ``deflate`` with a per-call output limit.

    ``deflate`` is tried as zlib-wrapped first and falls back to raw deflate
    if the first chunk does not parse, matching what servers actually send.
    """

    def __init__(self, encoding: str) -> None:
        self._encoding = encoding
        self._first_attempt = encoding == "deflate"
        wbits = zlib.MAX_WBITS | 16 if encoding == "gzip" else zlib.MAX_WBITS
        self._decompressor = zlib.decompressobj(wbits)

    def decode(self, data: bytes, limit: int) -> bytes:
        """Decode *data*, returning at most *limit* bytes (``limit >= 1``).

        Input beyond what *limit* needs is left unconsumed; callers stop
        reading once the limit is hit, so it is simply dropped.
        """
        was_first_attempt = self._first_attempt
        self._first_attempt = False
        try:
            return self._decompressor.decompress(data, limit)
        except zlib.error as exc:
            if was_first_attempt:
                self._decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
                return self.decode(data, limit)
            raise httpx.DecodingError(f"invalid {self._encoding} body: {exc}") from exc

    def flush(self, limit: int) -> bytes:
        try:
            return self._decompressor.flush()[:limit]
        except zlib.error as exc:
            raise httpx.DecodingError(f"invalid {self._encoding} body: {exc}") from exc


BodyDecoder = PassthroughDecoder | ZlibDecoder


def decoder_for(response: httpx.Response) -> BodyDecoder:
    """Pick the decoder for *response*'s ``Content-Encoding``.

    Raises :class:`httpx.DecodingError` for stacked codings such as
    ``gzip, gzip``, which cannot be decoded under a bound.
    """
    codings = [
        value.strip().lower()
        for value in response.headers.get_list("content-encoding", split_commas=True)
        if value.strip().lower() not in ("", "identity")
    ]
    if not codings:
        return PassthroughDecoder()
    if len(codings) > 1:
        raise httpx.DecodingError(f"unsupported content-encoding: {', '.join(codings)}")
    if codings[0] in ("gzip", "x-gzip"):
        return ZlibDecoder("gzip")
    if codings[0] == "deflate":
        return ZlibDecoder("deflate")
    return PassthroughDecoder()
