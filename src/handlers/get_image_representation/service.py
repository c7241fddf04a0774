"""Business logic for reading a single image's representation."""

from typing import Any

from aws_lambda_powertools import Logger

from core.services.image_resource import ImageResource

logger = Logger(UTC=True)


class RepresentationService:
    """Application service returning the JSON view of one image."""

    def __init__(self, resource: ImageResource | None = None) -> None:
        self.resource = resource or ImageResource()

    def get_representation(self, image_id: str, *, base_url: str) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: If the image does not exist
        """
        image = self.resource.find_or_fail(image_id)

        logger.debug("Image representation built", extra={"image_id": image_id})

        return image.to_representation(base_url)
