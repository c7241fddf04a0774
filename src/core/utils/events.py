"""Helpers for reading API Gateway proxy events.

Request parameters are merged from the query string and the body. Body
values win over query values of the same name and empty strings count as
absent, so ``?width=`` behaves exactly like leaving ``width`` out.
"""

import base64
import binascii
import io
import json
import os
from dataclasses import dataclass
from typing import Any

from aws_lambda_powertools import Logger
from python_multipart import create_form_parser
from python_multipart.exceptions import FormParserError

from core.models.errors import ValidationError
from core.utils.constants import ENV_IMAGE_API_BASE_URL, MAX_FILE_SIZE

logger = Logger(UTC=True)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

# Keep uploads in memory; Lambda's /tmp is not worth a round trip for 4MB.
_PARSER_CONFIG: dict[str, Any] = {"MAX_MEMORY_FILE_SIZE": MAX_FILE_SIZE + 1}


@dataclass(frozen=True)
class UploadedFile:
    """A file part of a multipart request."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return value

    return None


def get_path_parameter(event: dict[str, Any], name: str) -> str | None:
    return (event.get("pathParameters") or {}).get(name)


def get_body_bytes(event: dict[str, Any]) -> bytes:
    """Raw request body, decoding API Gateway's base64 envelope if present."""
    body = event.get("body")

    if body is None:
        return b""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(
                message="Request body is not valid base64",
                details={"field": "body"},
            ) from exc

    return body.encode("utf-8") if isinstance(body, str) else body


def parse_body(event: dict[str, Any]) -> dict[str, Any]:
    """Parse a form, multipart or JSON body into a flat mapping.

    File parts are returned as :class:`UploadedFile`; every other value is a
    string (or the JSON value as sent).
    """
    raw = get_body_bytes(event)
    if not raw:
        return {}

    content_type = get_header(event, "Content-Type") or ""
    media_type = content_type.split(";", 1)[0].strip().lower()

    if media_type in FORM_CONTENT_TYPES:
        return _parse_form(content_type, raw)

    if media_type == "application/json":
        return _parse_json(raw)

    logger.debug("Ignoring body with unsupported content type", extra={"content_type": content_type})
    return {}


def parse_params(event: dict[str, Any]) -> dict[str, Any]:
    """Query string parameters overlaid with body parameters, empties removed."""
    params: dict[str, Any] = dict(event.get("queryStringParameters") or {})
    params.update(parse_body(event))

    return {key: value for key, value in params.items() if value is not None and value != ""}


def resolve_base_url(event: dict[str, Any]) -> str:
    """Base URL used to build image links.

    ``IMAGE_API_BASE_URL`` wins; otherwise the request's host and stage are
    used, and with no host at all the links are relative.
    """
    configured = os.getenv(ENV_IMAGE_API_BASE_URL)
    if configured:
        return configured.rstrip("/")

    host = get_header(event, "Host")
    if not host:
        return ""

    scheme = get_header(event, "X-Forwarded-Proto") or "https"
    stage = (event.get("requestContext") or {}).get("stage")

    if stage and stage != "$default":
        return f"{scheme}://{host}/{stage}"

    return f"{scheme}://{host}"


def request_log_extra(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Structured request context logged by every handler on entry."""
    return {
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
        "path_params": event.get("pathParameters"),
        "query_params": event.get("queryStringParameters"),
        "request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
        "remaining_time_ms": context.get_remaining_time_in_millis()
        if hasattr(context, "get_remaining_time_in_millis")
        else None,
    }


def _parse_form(content_type: str, raw: bytes) -> dict[str, Any]:
    fields: dict[str, Any] = {}

    def on_field(field: Any) -> None:
        name = field.field_name.decode("utf-8")
        value = field.value
        fields[name] = value.decode("utf-8") if value is not None else None

    def on_file(file: Any) -> None:
        name = file.field_name.decode("utf-8")
        file_object = file.file_object
        file_object.seek(0)
        fields[name] = UploadedFile(
            filename=(file.file_name or b"").decode("utf-8"),
            content=file_object.read(),
        )

    headers = {"Content-Type": content_type, "Content-Length": str(len(raw))}

    try:
        parser = create_form_parser(headers, on_field, on_file, config=_PARSER_CONFIG)
        stream = io.BytesIO(raw)
        while chunk := stream.read(1024 * 1024):
            parser.write(chunk)
        parser.finalize()

    except (FormParserError, ValueError) as exc:
        logger.warning("Malformed form body", extra={"content_type": content_type})
        raise ValidationError(
            message="Request body could not be parsed",
            details={"field": "body"},
        ) from exc

    return fields


def _parse_json(raw: bytes) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.warning("Invalid JSON body received")
        raise ValidationError(
            message="Invalid JSON body",
            details={"field": "body"},
        ) from exc

    if not isinstance(data, dict):
        raise ValidationError(
            message="JSON body must be an object",
            details={"field": "body"},
        )

    return data
