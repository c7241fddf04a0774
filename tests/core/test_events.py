"""Tests for API Gateway event helpers."""

import base64
import json
from typing import Any

import pytest
from urllib3 import encode_multipart_formdata

from core.models.errors import ValidationError
from core.utils.events import (
    UploadedFile,
    get_body_bytes,
    get_header,
    parse_body,
    parse_params,
    request_log_extra,
    resolve_base_url,
)


def _event(**overrides: Any) -> dict[str, Any]:
    event: dict[str, Any] = {
        "httpMethod": "PUT",
        "path": "/images/img_1/resize",
        "headers": {},
        "queryStringParameters": None,
        "body": None,
        "isBase64Encoded": False,
    }
    event.update(overrides)
    return event


def _multipart_event(fields: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    body, content_type = encode_multipart_formdata(fields)
    return _event(
        headers={"content-type": content_type},
        body=base64.b64encode(body).decode("utf-8"),
        isBase64Encoded=True,
        **overrides,
    )


class TestHeaders:
    def test_case_insensitive(self) -> None:
        event = _event(headers={"accept": "image/png"})

        assert get_header(event, "Accept") == "image/png"

    def test_missing_headers(self) -> None:
        assert get_header(_event(headers=None), "Accept") is None


class TestBody:
    def test_plain_body(self) -> None:
        assert get_body_bytes(_event(body="hello")) == b"hello"

    def test_base64_body(self) -> None:
        event = _event(body=base64.b64encode(b"\x00\x01").decode(), isBase64Encoded=True)

        assert get_body_bytes(event) == b"\x00\x01"

    def test_invalid_base64_body(self) -> None:
        with pytest.raises(ValidationError):
            get_body_bytes(_event(body="!!!", isBase64Encoded=True))

    def test_multipart_fields_and_files(self) -> None:
        event = _multipart_event(
            {
                "file": ("logo.png", b"\x89PNG-data", "image/png"),
                "position": "center",
            }
        )

        parsed = parse_body(event)

        assert parsed["position"] == "center"
        assert parsed["file"] == UploadedFile(filename="logo.png", content=b"\x89PNG-data")
        assert parsed["file"].size == len(b"\x89PNG-data")

    def test_multipart_large_file_stays_in_memory(self) -> None:
        payload = b"x" * (2 * 1024 * 1024)

        parsed = parse_body(_multipart_event({"file": ("big.bin", payload, "application/octet-stream")}))

        assert parsed["file"].content == payload

    def test_urlencoded(self) -> None:
        event = _event(
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            body="width=50&height=40",
        )

        assert parse_body(event) == {"width": "50", "height": "40"}

    def test_json_object(self) -> None:
        event = _event(
            headers={"Content-Type": "application/json; charset=utf-8"},
            body=json.dumps({"angle": 90}),
        )

        assert parse_body(event) == {"angle": 90}

    def test_json_must_be_object(self) -> None:
        event = _event(headers={"Content-Type": "application/json"}, body="[1, 2]")

        with pytest.raises(ValidationError):
            parse_body(event)

    def test_invalid_json(self) -> None:
        event = _event(headers={"Content-Type": "application/json"}, body="{nope")

        with pytest.raises(ValidationError):
            parse_body(event)

    def test_unknown_content_type_ignored(self) -> None:
        event = _event(headers={"Content-Type": "text/plain"}, body="width=1")

        assert parse_body(event) == {}


class TestParams:
    def test_body_overrides_query(self) -> None:
        event = _event(
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            queryStringParameters={"width": "10", "height": "20"},
            body="width=50",
        )

        assert parse_params(event) == {"width": "50", "height": "20"}

    def test_empty_values_are_absent(self) -> None:
        event = _event(queryStringParameters={"width": "", "greyscale": "1"})

        assert parse_params(event) == {"greyscale": "1"}


class TestBaseUrl:
    def test_configured_base_url(self, monkeypatch) -> None:
        monkeypatch.setenv("IMAGE_API_BASE_URL", "https://images.example.com/")

        assert resolve_base_url(_event()) == "https://images.example.com"

    def test_host_and_stage(self, monkeypatch) -> None:
        monkeypatch.delenv("IMAGE_API_BASE_URL", raising=False)
        event = _event(headers={"Host": "abc.execute-api.aws"}, requestContext={"stage": "prod"})

        assert resolve_base_url(event) == "https://abc.execute-api.aws/prod"

    def test_forwarded_proto(self, monkeypatch) -> None:
        monkeypatch.delenv("IMAGE_API_BASE_URL", raising=False)
        event = _event(headers={"host": "localhost:3000", "X-Forwarded-Proto": "http"})

        assert resolve_base_url(event) == "http://localhost:3000"

    def test_relative_without_host(self, monkeypatch) -> None:
        monkeypatch.delenv("IMAGE_API_BASE_URL", raising=False)

        assert resolve_base_url(_event()) == ""


def test_request_log_extra() -> None:
    class Context:
        aws_request_id = "req-1"
        function_name = "fn"

        def get_remaining_time_in_millis(self) -> int:
            return 1000

    extra = request_log_extra(_event(pathParameters={"image_id": "img_1"}), Context())

    assert extra["request_id"] == "req-1"
    assert extra["path_params"] == {"image_id": "img_1"}
    assert extra["remaining_time_ms"] == 1000
