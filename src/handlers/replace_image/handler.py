"""
Lambda handler responsible for replacing the content of an existing image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import NotFoundError, StorageError, ValidationError
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_parameter, parse_body, request_log_extra, resolve_base_url
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import ReplaceImageBody, ReplaceImageRequest
from .service import ReplaceService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image replace requests.

    Args:
        event: API Gateway Lambda proxy event with a multipart ``file`` part
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing the updated image
    """
    logger.info("Received image replace request", extra=request_log_extra(event, context))

    try:
        request = validate_request(
            ReplaceImageRequest,
            {"image_id": get_path_parameter(event, "image_id")},
        )
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details=sanitize_validation_errors(exc.errors()),
        )

    service = ReplaceService()

    try:
        image = service.find_image(request.image_id)
    except NotFoundError:
        logger.warning("Image not found", extra={"image_id": request.image_id})
        return ResponseBuilder.not_found(f"Image not found: {request.image_id}")

    try:
        body = validate_request(ReplaceImageBody, parse_body(event))
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors(), "image_id": request.image_id},
        )
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
        )

    try:
        updated = service.replace_image(image, body.file)

    except ValidationError as exc:
        logger.warning(
            "Replacement file rejected",
            extra={"image_id": request.image_id, "reason": exc.message},
        )
        return ResponseBuilder.validation_error(
            message=exc.message,
            details=[{"field": "file", "message": exc.message}],
        )

    except StorageError as exc:
        logger.exception(
            "Infrastructure error during image replace",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.ok(updated.to_representation(resolve_base_url(event)))
