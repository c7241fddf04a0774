"""
Lambda handler responsible for listing images.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import StorageError
from core.utils.decorators import api_gateway_handler
from core.utils.events import request_log_extra, resolve_base_url
from core.utils.response import ResponseBuilder

from .service import ListService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests to list images.

    Returns a JSON array with the representation (metadata plus ``url``) of
    every stored image.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info("Received image list request", extra=request_log_extra(event, context))

    service = ListService()

    try:
        images = service.list_images(base_url=resolve_base_url(event))

    except StorageError as exc:
        logger.exception("Listing images failed")
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.ok(images)
