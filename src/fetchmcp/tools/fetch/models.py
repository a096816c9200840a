"""Fetch tool models — call arguments, request body variants, result shape."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, field_validator


class TextBody(BaseModel):
    """Raw text sent verbatim, with no content type inferred."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class JsonBody(BaseModel):
    """Structured value serialized as JSON."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["json"] = "json"
    value: Any


RequestBody = TextBody | JsonBody


class FetchInput(BaseModel):
    """Arguments of a ``fetch`` tool call.

    ``body`` is classified by the type of the decoded JSON value: a string is
    always :class:`TextBody` (never re-parsed, even if it looks like JSON),
    any other non-null value is :class:`JsonBody`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: StrictStr
    method: StrictStr | None = None
    headers: dict[StrictStr, StrictStr] | None = None
    body: RequestBody | None = None
    timeout_ms: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("timeoutMs", "timeout_ms"),
    )
    max_bytes: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("maxBytes", "max_bytes"),
    )

    @field_validator("body", mode="before")
    @classmethod
    def _classify_body(cls, value: Any) -> Any:
        if value is None or isinstance(value, TextBody | JsonBody):
            return value
        if isinstance(value, str):
            return TextBody(text=value)
        return JsonBody(value=value)


class FetchBody(BaseModel):
    """Body descriptor of a fetch result."""

    type: Literal["base64"] = "base64"
    data: str
    truncated: bool


class FetchResult(BaseModel):
    """Result of a completed fetch, as returned in the RPC ``result``."""

    status: int
    headers: list[tuple[str, str]]
    body: FetchBody

    def to_wire(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "headers": [[name, value] for name, value in self.headers],
            "body": self.body.model_dump(),
        }
