"""
Lambda handler for persisted transforms: ``PUT /images/{image_id}/{operation}``.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import DecodeError, NotFoundError, StorageError, ValidationError
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_parameter, parse_params, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import OPERATION_PARAMS, TransformImageRequest
from .service import TransformService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle persisted transform requests.

    This function:
    - Validates the image id and resolves the operation from the path
    - Confirms the image exists before looking at any parameter
    - Validates the operation's parameters (all of them are required)
    - Applies the operation, stores the result and returns the rendered bytes

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible binary response with the new image content
    """
    logger.info("Received image transform request", extra=request_log_extra(event, context))

    try:
        request = validate_request(
            TransformImageRequest,
            {
                "image_id": get_path_parameter(event, "image_id"),
                "operation": get_path_parameter(event, "operation"),
            },
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

    operation = request.operation_name
    if operation is None:
        logger.warning("Unknown transform operation", extra={"operation": request.operation})
        return ResponseBuilder.not_found(f"Unknown operation: {request.operation}")

    service = TransformService()

    try:
        image = service.find_image(request.image_id)
    except NotFoundError:
        logger.warning("Image not found", extra={"image_id": request.image_id})
        return ResponseBuilder.not_found(f"Image not found: {request.image_id}")

    try:
        params = validate_request(OPERATION_PARAMS[operation], parse_params(event))
    except PydanticValidationError as exc:
        logger.error(
            "Transform parameter validation failed",
            extra={"errors": exc.errors(), "image_id": request.image_id, "operation": operation},
        )
        return ResponseBuilder.validation_error(
            message="Invalid transform parameters",
            details=sanitize_validation_errors(exc.errors()),
        )

    try:
        rendered, _ = service.transform_image(image, params)

    except ValidationError as exc:
        logger.warning(
            "Transform input rejected",
            extra={"image_id": request.image_id, "reason": exc.message},
        )
        return ResponseBuilder.validation_error(
            message=exc.message,
            details=[{"field": str(exc.details.get("field", "body")), "message": exc.message}],
        )

    except (DecodeError, StorageError) as exc:
        logger.exception(
            "Persisted transform failed",
            extra={"image_id": request.image_id, "operation": operation},
        )
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.binary_response(
        rendered.content,
        content_type=rendered.mime_type,
    )
