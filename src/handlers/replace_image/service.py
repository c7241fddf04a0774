"""Business logic for replacing the content of an existing image.

The id is kept; the old blob is removed, the new one written and the
metadata record saved, in that order.
"""

from aws_lambda_powertools import Logger

from core.models.image import ImageMetadata
from core.services.image_resource import ImageResource
from core.utils.events import UploadedFile

logger = Logger(UTC=True)


class ReplaceService:
    """Application service responsible for replacing stored image bytes."""

    def __init__(self, resource: ImageResource | None = None) -> None:
        self.resource = resource or ImageResource()

    def find_image(self, image_id: str) -> ImageMetadata:
        return self.resource.find_or_fail(image_id)

    def replace_image(self, image: ImageMetadata, file: UploadedFile) -> ImageMetadata:
        """
        Raises:
            ValidationError: If the file is not a supported image
            StorageError: If removing, writing or saving fails
        """
        updated = self.resource.replace(
            image,
            original_name=file.filename,
            file_data=file.content,
        )

        logger.info(
            "Image replaced",
            extra={
                "image_id": image.id,
                "old_extension": image.extension,
                "new_extension": updated.extension,
            },
        )
        return updated
