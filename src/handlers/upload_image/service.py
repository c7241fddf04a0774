"""Business logic for image upload operations.

This module creates a new image from uploaded bytes: the content is checked
to be an image, an id is minted, the bytes are stored and the metadata record
is created.
"""

from aws_lambda_powertools import Logger

from core.models.image import ImageMetadata
from core.services.image_resource import ImageResource
from core.utils.events import UploadedFile

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for image uploads."""

    def __init__(self, resource: ImageResource | None = None) -> None:
        """Initialize the upload service with required infrastructure dependencies."""
        self.resource = resource or ImageResource()

    def upload_image(self, file: UploadedFile) -> ImageMetadata:
        """Upload an image and persist its metadata.

        Args:
            file: The uploaded multipart file

        Returns:
            Persisted image metadata

        Raises:
            ValidationError: If the file is not a supported image
            StorageError: If storing the bytes or the metadata fails
        """
        logger.debug(
            "Starting image upload",
            extra={"original_name": file.filename, "size": file.size},
        )

        metadata = self.resource.create(
            original_name=file.filename,
            file_data=file.content,
        )

        logger.info(
            "Image uploaded successfully",
            extra={"image_id": metadata.id, "extension": metadata.extension},
        )
        return metadata
