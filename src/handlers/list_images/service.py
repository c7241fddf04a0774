"""Business logic for listing images."""

from typing import Any

from aws_lambda_powertools import Logger

from core.services.image_resource import ImageResource

logger = Logger(UTC=True)


class ListService:
    """Application service responsible for listing image representations."""

    def __init__(self, resource: ImageResource | None = None) -> None:
        self.resource = resource or ImageResource()

    def list_images(self, *, base_url: str) -> list[dict[str, Any]]:
        """Return the representation of every stored image, ordered by id."""
        images = self.resource.all()

        logger.info("Images listed", extra={"count": len(images)})

        return [image.to_representation(base_url) for image in images]
