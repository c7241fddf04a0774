"""
Lambda handler responsible for image upload and metadata creation.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import StorageError, ValidationError
from core.utils.decorators import api_gateway_handler
from core.utils.events import parse_body, request_log_extra, resolve_base_url
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import ImageUploadRequest
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler parses the multipart body, validates the ``file`` part,
    stores the image and returns the representation of the new resource.

    Expected API Gateway event structure:
    {
        "headers": {"Content-Type": "multipart/form-data; boundary=..."},
        "body": "<base64 multipart payload>",
        "isBase64Encoded": true
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing the created image
    """
    logger.info("Received image upload request", extra=request_log_extra(event, context))

    try:
        request = validate_request(ImageUploadRequest, parse_body(event))
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
        )

    service = UploadService()

    try:
        metadata = service.upload_image(request.file)

    except ValidationError as exc:
        logger.warning(
            "Uploaded file rejected",
            extra={"original_name": request.file.filename, "reason": exc.message},
        )
        return ResponseBuilder.validation_error(
            message=exc.message,
            details=[{"field": "file", "message": exc.message}],
        )

    except StorageError as exc:
        logger.exception(
            "Infrastructure error during image upload",
            extra={"original_name": request.file.filename},
        )
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.created(metadata.to_representation(resolve_base_url(event)))
