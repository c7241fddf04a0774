import base64
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest
from urllib3 import encode_multipart_formdata


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event.

    Usage:
        event = api_event("GET", "/images/img_1", path_params={"image_id": "img_1"})
    """

    def _event(
        method: str,
        path: str,
        *,
        path_params: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "httpMethod": method,
            "path": path,
            "pathParameters": path_params,
            "queryStringParameters": query,
            "headers": {"Host": "api.example.com", **(headers or {})},
            "requestContext": {"stage": "v1"},
            "body": None,
            "isBase64Encoded": False,
        }

        if isinstance(body, bytes):
            event["body"] = base64.b64encode(body).decode("utf-8")
            event["isBase64Encoded"] = True
        elif body is not None:
            event["body"] = body

        return event

    return _event


@pytest.fixture
def multipart() -> Callable[..., tuple[bytes, dict[str, str]]]:
    """
    Encode a multipart/form-data body.

    Usage:
        body, headers = multipart(file=("cat.png", png_bytes, "image/png"), position="center")
    """

    def _encode(**fields: Any) -> tuple[bytes, dict[str, str]]:
        body, content_type = encode_multipart_formdata(fields)
        return body, {"Content-Type": content_type}

    return _encode
