"""
Single-function entrypoint dispatching every image route.

Used when the whole API is deployed as one Lambda behind a ``{proxy+}``
resource. Each route is served by the same handler that backs it when
deployed per endpoint; this module only matches ``(method, path)`` and
fills in ``pathParameters``.
"""

from collections.abc import Callable
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.constants import IMAGES_PATH
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from handlers.delete_image.handler import handler as delete_image
from handlers.download_image.handler import handler as download_image
from handlers.get_image.handler import handler as get_image
from handlers.get_image_representation.handler import handler as get_image_representation
from handlers.list_images.handler import handler as list_images
from handlers.replace_image.handler import handler as replace_image
from handlers.transform_image.handler import handler as transform_image
from handlers.upload_image.handler import handler as upload_image

logger = Logger(UTC=True)

Handler = Callable[..., dict[str, Any]]

# Literal segments must match exactly; "{name}" segments capture a path parameter.
ROUTES: tuple[tuple[str, tuple[str, ...], Handler], ...] = (
    ("GET", (IMAGES_PATH,), list_images),
    ("POST", (IMAGES_PATH,), upload_image),
    ("GET", (IMAGES_PATH, "{image_id}"), get_image),
    ("PUT", (IMAGES_PATH, "{image_id}"), replace_image),
    ("DELETE", (IMAGES_PATH, "{image_id}"), delete_image),
    ("GET", (IMAGES_PATH, "{image_id}", "representation"), get_image_representation),
    ("GET", (IMAGES_PATH, "{image_id}", "download"), download_image),
    ("PUT", (IMAGES_PATH, "{image_id}", "{operation}"), transform_image),
)


def match_path(pattern: tuple[str, ...], segments: list[str]) -> dict[str, str] | None:
    """Return captured path parameters, or ``None`` if ``segments`` do not match."""
    if len(pattern) != len(segments):
        return None

    params: dict[str, str] = {}

    for expected, actual in zip(pattern, segments):
        if expected.startswith("{") and expected.endswith("}"):
            if not actual:
                return None
            params[expected[1:-1]] = actual
        elif expected != actual:
            return None

    return params


def resolve_route(method: str, path: str) -> tuple[Handler | None, dict[str, str], list[str]]:
    """Find the handler for ``method`` and ``path``.

    Returns:
        (handler, path_params, allowed_methods); the handler is ``None`` when
        nothing matches, and ``allowed_methods`` lists the methods that would
        have matched the path.
    """
    segments = path.strip("/").split("/")
    allowed: list[str] = []

    for route_method, pattern, route_handler in ROUTES:
        params = match_path(pattern, segments)
        if params is None:
            continue

        if route_method == method:
            return route_handler, params, allowed

        allowed.append(route_method)

    return None, {}, allowed


@api_gateway_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Dispatch an API Gateway proxy event to the matching image handler."""
    method = (event.get("httpMethod") or "").upper()
    path = event.get("path") or ""

    route_handler, path_params, allowed = resolve_route(method, path)

    if route_handler is None:
        if allowed:
            logger.warning("Method not allowed", extra={"method": method, "path": path})
            response = ResponseBuilder.error(
                status=HTTPStatus.METHOD_NOT_ALLOWED,
                message=f"Method {method} not allowed",
            )
            response["headers"]["Allow"] = ",".join(sorted(set(allowed)))
            return response

        logger.warning("No route matched", extra={"method": method, "path": path})
        return ResponseBuilder.not_found(f"No route for {method} {path}")

    logger.debug(
        "Routing request",
        extra={"method": method, "path": path, "handler": route_handler.__module__},
    )

    routed_event = dict(event)
    routed_event["pathParameters"] = path_params
    return route_handler(routed_event, context)
