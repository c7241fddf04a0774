"""
Lambda handler responsible for deleting an image resource.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import NotFoundError, StorageError
from core.utils.constants import DELETE_FAILED_MESSAGE
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_parameter, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import DeleteImageRequest
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Extracts the image identifier from API Gateway path parameters
    - Validates the incoming request payload
    - Delegates deletion to the service layer
    - Translates domain and runtime errors into HTTP responses

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        204 with an empty body, or 500 with ``{"message": "File could not be deleted."}``
    """
    logger.info("Received image delete request", extra=request_log_extra(event, context))

    try:
        request = validate_request(
            DeleteImageRequest,
            {"image_id": get_path_parameter(event, "image_id")},
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
        )

    service = DeleteService()

    try:
        service.delete_image(request.image_id)

    except NotFoundError:
        logger.warning(
            "Image not found during delete",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.not_found(f"Image not found: {request.image_id}")

    except StorageError:
        logger.exception(
            "Deletion failed",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.message(HTTPStatus.INTERNAL_SERVER_ERROR, DELETE_FAILED_MESSAGE)

    return ResponseBuilder.no_content()
