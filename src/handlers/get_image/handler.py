"""
Lambda handler responsible for rendering an image on read.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import DecodeError, NotFoundError, StorageError
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_header, get_path_parameter, parse_params, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetImageRequest, ShowImageQuery
from .service import GetService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image render requests.

    This function:
     - Default: returns the stored image re-encoded in its own format
        - width & height (& x_coordinate & y_coordinate): resize (crop)
        - greyscale / transparency / brightness / angle: the first one present
        - Accept: image/gif|image/jpeg|image/png re-encodes when nothing else applies
    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible binary response.
    """
    logger.info("Received image render request", extra=request_log_extra(event, context))

    try:
        request = validate_request(
            GetImageRequest,
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

    service = GetService()

    try:
        image = service.find_image(request.image_id)
    except NotFoundError:
        logger.warning("Image not found", extra={"image_id": request.image_id})
        return ResponseBuilder.not_found(f"Image not found: {request.image_id}")

    try:
        query = validate_request(ShowImageQuery, parse_params(event))
    except ValidationError as exc:
        logger.error(
            "Transform parameter validation failed",
            extra={"errors": exc.errors(), "image_id": request.image_id},
        )
        return ResponseBuilder.validation_error(
            message="Invalid transform parameters",
            details=sanitize_validation_errors(exc.errors()),
        )

    try:
        rendered = service.render_image(
            image,
            query,
            accept=get_header(event, "Accept"),
        )

    except (DecodeError, StorageError) as exc:
        logger.exception(
            "Render image failed",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.binary_response(
        rendered.content,
        content_type=rendered.mime_type,
    )
