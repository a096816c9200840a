"""FetchExecutor — bounded, allowlisted HTTP fetch for the ``fetch`` tool.

A call goes through these gates before any network I/O:

1. argument validation (:class:`FetchInput`),
2. URL parsing,
3. scheme restriction (``http``/``https`` only),
4. allowlist match on the full URL.

The request is then sent with a streaming response and raced against the
effective timeout.  The raw body is decoded chunk by chunk with a bounded
decoder (:mod:`fetchmcp.tools.fetch.decoding`) under a hard byte cap; once
the cap is hit the rest of the transfer is abandoned.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import re
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError

from fetchmcp.tools.fetch.decoding import ACCEPT_ENCODING, decoder_for
from fetchmcp.tools.fetch.errors import (
    AllowlistRejectedError,
    FetchTimeoutError,
    InvalidInputError,
    SchemeRejectedError,
    TransportError,
)
from fetchmcp.tools.fetch.models import FetchBody, FetchInput, FetchResult, JsonBody, TextBody
from fetchmcp.utils.telemetry import (
    ATTR_BODY_BYTES,
    ATTR_BODY_TRUNCATED,
    ATTR_HTTP_METHOD,
    ATTR_HTTP_STATUS,
    ATTR_HTTP_URL,
    get_tracer,
)

if TYPE_CHECKING:
    from fetchmcp.config import FetchConfig

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_METHOD = "GET"
ALLOWED_SCHEMES = frozenset({"http", "https"})

# RFC 9110 token characters.
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class FetchExecutor:
    """Executes ``fetch`` tool calls against a shared :class:`httpx.AsyncClient`.

    Usage::

        async with FetchExecutor(FetchConfig.from_env()) as executor:
            result = await executor.call({"url": "https://example.com/"})

    *transport* is handed to the client as-is (tests pass an
    :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        config: FetchConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            headers={"User-Agent": config.user_agent, "Accept-Encoding": ACCEPT_ENCODING},
            follow_redirects=True,
            limits=httpx.Limits(max_keepalive_connections=2),
            event_hooks={"request": [self._check_hop]},
            transport=transport,
        )

    async def __aenter__(self) -> FetchExecutor:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    @property
    def config(self) -> FetchConfig:
        return self._config

    async def aclose(self) -> None:
        """Close pooled upstream connections."""
        await self._client.aclose()

    async def call(self, arguments: Any) -> dict[str, Any]:
        """Run one fetch and return the result in wire form.

        Raises a :class:`~fetchmcp.tools.fetch.errors.FetchError` subclass on
        any violation or upstream failure.
        """
        fetch_input = self._parse_input(arguments)
        url = self._parse_url(fetch_input.url)
        self._check_target(url)

        method = resolve_method(fetch_input.method)
        timeout = (
            fetch_input.timeout_ms / 1000
            if fetch_input.timeout_ms is not None
            else self._config.timeout
        )
        max_bytes = (
            fetch_input.max_bytes
            if fetch_input.max_bytes is not None
            else self._config.max_bytes
        )
        request = self._build_request(method, url, fetch_input, timeout)

        with _tracer.start_as_current_span("fetch.request") as span:
            span.set_attribute(ATTR_HTTP_METHOD, method)
            span.set_attribute(ATTR_HTTP_URL, str(url))
            logger.debug("fetch %s %s (timeout=%ss, max_bytes=%d)", method, url, timeout, max_bytes)

            response = await self._send(request, timeout)
            try:
                headers = collect_headers(response)
                body, truncated = await read_limited(response, max_bytes)
            except httpx.TimeoutException as exc:
                raise FetchTimeoutError(timeout) from exc
            except httpx.HTTPError as exc:
                raise TransportError(f"request failed: {exc}") from exc
            finally:
                await response.aclose()

            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
            span.set_attribute(ATTR_BODY_BYTES, len(body))
            span.set_attribute(ATTR_BODY_TRUNCATED, truncated)

        logger.debug(
            "fetch %s %s -> %d (%d bytes%s)",
            method,
            url,
            response.status_code,
            len(body),
            ", truncated" if truncated else "",
        )
        result = FetchResult(
            status=response.status_code,
            headers=headers,
            body=FetchBody(data=base64.b64encode(body).decode("ascii"), truncated=truncated),
        )
        return result.to_wire()

    # -- gates -------------------------------------------------------------

    @staticmethod
    def _parse_input(arguments: Any) -> FetchInput:
        try:
            return FetchInput.model_validate(arguments)
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
                for err in exc.errors()
            )
            raise InvalidInputError(f"Invalid fetch args: {details}") from exc

    @staticmethod
    def _parse_url(raw: str) -> httpx.URL:
        try:
            url = httpx.URL(raw)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise InvalidInputError("Invalid URL") from exc
        if url.is_relative_url:
            raise InvalidInputError("Invalid URL")
        return normalize_url(url)

    def _check_target(self, url: httpx.URL) -> None:
        if url.scheme not in ALLOWED_SCHEMES:
            raise SchemeRejectedError()
        if not url.host:
            raise InvalidInputError("Invalid URL")
        if not self._config.allowlist.is_allowed(url):
            raise AllowlistRejectedError()

    async def _check_hop(self, request: httpx.Request) -> None:
        """Request hook: every hop, redirects included, must pass the gates."""
        self._check_target(normalize_url(request.url))

    # -- transfer ----------------------------------------------------------

    def _build_request(
        self,
        method: str,
        url: httpx.URL,
        fetch_input: FetchInput,
        timeout: float,
    ) -> httpx.Request:
        headers = httpx.Headers()
        for name, value in (fetch_input.headers or {}).items():
            headers[name] = value

        content: str | None = None
        json_value: Any = None
        if isinstance(fetch_input.body, TextBody):
            content = fetch_input.body.text
        elif isinstance(fetch_input.body, JsonBody):
            json_value = fetch_input.body.value

        try:
            return self._client.build_request(
                method,
                url,
                headers=headers,
                content=content,
                json=json_value,
                timeout=httpx.Timeout(timeout),
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise InvalidInputError(f"Invalid request: {exc}") from exc

    async def _send(self, request: httpx.Request, timeout: float) -> httpx.Response:
        """Send *request*, giving up once *timeout* elapses before the headers arrive.

        ``wait_for`` cancels the pending send on expiry, which tears down the
        in-flight connection.
        """
        try:
            return await asyncio.wait_for(self._client.send(request, stream=True), timeout)
        except TimeoutError as exc:
            raise FetchTimeoutError(timeout) from exc
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError(timeout) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}") from exc


def resolve_method(method: str | None) -> str:
    """Upper-case *method*, falling back to ``GET`` when it is not a valid token."""
    if method is None or not _METHOD_TOKEN.fullmatch(method):
        return DEFAULT_METHOD
    return method.upper()


def normalize_url(url: httpx.URL) -> httpx.URL:
    """Spell an empty path as ``/``.

    ``str(httpx.URL("https://example.com"))`` has no trailing slash (even
    though ``.path`` reports ``/``), so ``example.com/*`` would not match it.
    """
    if urlsplit(str(url)).path == "":
        return url.copy_with(path="/")
    return url


def collect_headers(response: httpx.Response) -> list[tuple[str, str]]:
    """Ordered ``(name, value)`` pairs as received.

    Values that are not visible ASCII degrade to ``""``.
    """
    return [(name.decode("latin-1"), _header_text(value)) for name, value in response.headers.raw]


def _header_text(value: bytes) -> str:
    if all(byte == 0x09 or 0x20 <= byte <= 0x7E for byte in value):
        return value.decode("ascii")
    return ""


async def read_limited(response: httpx.Response, max_bytes: int) -> tuple[bytes, bool]:
    """Collect at most *max_bytes* of the decoded body.

    Returns the collected bytes and whether the transfer was cut short.  Raw
    chunks are decoded with an output limit of one byte past what is still
    wanted, so a compressed body never expands beyond the cap.  Stops pulling
    chunks as soon as the cap is reached; the caller closes the response
    without draining it.
    """
    if response.is_stream_consumed:
        # In-memory responses are decoded on construction.
        content = response.content
        return content[:max_bytes], len(content) > max_bytes

    decoder = decoder_for(response)
    collected = bytearray()
    total = 0
    truncated = False
    async for raw in response.aiter_raw():
        remaining = max_bytes - total
        chunk = decoder.decode(raw, remaining + 1)
        if len(chunk) > remaining:
            collected += chunk[:remaining]
            total = max_bytes
            truncated = True
            break
        collected += chunk
        total += len(chunk)
    else:
        remaining = max_bytes - total
        tail = decoder.flush(remaining + 1)
        collected += tail[:remaining]
        truncated = len(tail) > remaining
    return bytes(collected), truncated
