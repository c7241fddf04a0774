"""
Lambda handler returning the JSON representation of an image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import NotFoundError, StorageError
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_parameter, request_log_extra, resolve_base_url
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import RepresentationRequest
from .service import RepresentationService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image representation requests.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response with the image metadata and ``url``.
    """
    logger.info(
        "Received image representation request",
        extra=request_log_extra(event, context),
    )

    try:
        request = validate_request(
            RepresentationRequest,
            {"image_id": get_path_parameter(event, "image_id")},
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details=sanitize_validation_errors(exc.errors()),
        )

    service = RepresentationService()

    try:
        representation = service.get_representation(
            request.image_id,
            base_url=resolve_base_url(event),
        )

    except NotFoundError:
        logger.warning("Image not found", extra={"image_id": request.image_id})
        return ResponseBuilder.not_found(f"Image not found: {request.image_id}")

    except StorageError as exc:
        logger.exception(
            "Get image representation failed",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.ok(representation)
