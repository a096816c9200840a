"""Tests for fetch tool input/result models."""

import pytest
from pydantic import ValidationError

from fetchmcp.tools.fetch.models import FetchBody, FetchInput, FetchResult, JsonBody, TextBody


class TestFetchInput:
    def test_minimal(self) -> None:
        fi = FetchInput.model_validate({"url": "https://example.com/"})
        assert fi.url == "https://example.com/"
        assert fi.method is None
        assert fi.headers is None
        assert fi.body is None
        assert fi.timeout_ms is None
        assert fi.max_bytes is None

    def test_camel_case_overrides(self) -> None:
        fi = FetchInput.model_validate({"url": "u", "timeoutMs": 250, "maxBytes": 10})
        assert fi.timeout_ms == 250
        assert fi.max_bytes == 10

    def test_snake_case_overrides(self) -> None:
        fi = FetchInput.model_validate({"url": "u", "timeout_ms": 250, "max_bytes": 10})
        assert fi.timeout_ms == 250
        assert fi.max_bytes == 10

    def test_headers_keep_order(self) -> None:
        fi = FetchInput.model_validate({"url": "u", "headers": {"B": "2", "A": "1"}})
        assert list(fi.headers or {}) == ["B", "A"]

    @pytest.mark.parametrize(
        "args",
        [
            {},
            {"url": 42},
            {"url": "u", "headers": {"X": 1}},
            {"url": "u", "timeoutMs": -1},
            {"url": "u", "maxBytes": 1.5},
            None,
            "https://example.com/",
        ],
    )
    def test_invalid(self, args: object) -> None:
        with pytest.raises(ValidationError):
            FetchInput.model_validate(args)


class TestBodyPrecedence:
    def test_string_is_text(self) -> None:
        fi = FetchInput.model_validate({"url": "u", "body": "plain"})
        assert fi.body == TextBody(text="plain")

    def test_json_looking_string_stays_text(self) -> None:
        fi = FetchInput.model_validate({"url": "u", "body": '{"a": 1}'})
        assert isinstance(fi.body, TextBody)
        assert fi.body.text == '{"a": 1}'

    def test_object_is_json(self) -> None:
        fi = FetchInput.model_validate({"url": "u", "body": {"a": [1, 2]}})
        assert fi.body == JsonBody(value={"a": [1, 2]})

    @pytest.mark.parametrize("value", [[1, 2], 3, 2.5, True, False])
    def test_other_values_are_json(self, value: object) -> None:
        fi = FetchInput.model_validate({"url": "u", "body": value})
        assert isinstance(fi.body, JsonBody)
        assert fi.body.value == value

    def test_null_is_no_body(self) -> None:
        fi = FetchInput.model_validate({"url": "u", "body": None})
        assert fi.body is None

    def test_tagged_lookalike_object_is_json(self) -> None:
        lookalike = {"kind": "text", "text": "x"}
        fi = FetchInput.model_validate({"url": "u", "body": lookalike})
        assert fi.body == JsonBody(value=lookalike)


class TestFetchResult:
    def test_wire_shape(self) -> None:
        result = FetchResult(
            status=201,
            headers=[("content-type", "text/plain"), ("set-cookie", "a=1")],
            body=FetchBody(data="aGk=", truncated=True),
        )
        assert result.to_wire() == {
            "status": 201,
            "headers": [["content-type", "text/plain"], ["set-cookie", "a=1"]],
            "body": {"type": "base64", "data": "aGk=", "truncated": True},
        }
