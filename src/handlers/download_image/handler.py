"""
Lambda handler responsible for downloading an image as an attachment.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import NotFoundError, StorageError
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_parameter, request_log_extra
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import DownloadImageRequest
from .service import DownloadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image download requests.

    The stored bytes are returned untransformed, with
    ``Content-Disposition: attachment`` naming the original file.
    """
    logger.info("Received image download request", extra=request_log_extra(event, context))

    try:
        request = validate_request(
            DownloadImageRequest,
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

    service = DownloadService()

    try:
        download = service.download_image(request.image_id)

    except NotFoundError:
        logger.warning("Image not found", extra={"image_id": request.image_id})
        return ResponseBuilder.not_found(f"Image not found: {request.image_id}")

    except StorageError as exc:
        logger.exception(
            "Download image failed",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.binary_response(
        download.content,
        content_type=download.content_type,
        headers={"Content-Disposition": download.content_disposition},
    )
