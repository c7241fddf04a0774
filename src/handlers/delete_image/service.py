"""Business logic for image deletion.

This module removes an image's whole storage directory, bytes and
metadata together. Any failure is reported as a failure of the whole
deletion; nothing is restored.
"""

from aws_lambda_powertools import Logger

from core.services.image_resource import ImageResource

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting images.

    This service orchestrates:
    - Validation that the image exists
    - Deletion of every object stored for the image
    """

    def __init__(self, resource: ImageResource | None = None) -> None:
        """Initialize the delete service with required infrastructure dependencies."""
        self.resource = resource or ImageResource()

    def delete_image(self, image_id: str) -> None:
        """Delete an image and its metadata.

        Args:
            image_id: Unique identifier of the image to delete

        Raises:
            NotFoundError: If the image metadata does not exist
            StorageError: If any object could not be deleted
        """
        logger.debug("Starting image deletion", extra={"image_id": image_id})

        image = self.resource.find_or_fail(image_id)
        self.resource.destroy(image)

        logger.info("Image deleted successfully", extra={"image_id": image_id})
