"""
Business logic for rendering an image on read.

The render is ephemeral: at most one transform is applied to the decoded
stored bytes and the result is returned without touching storage.
"""

from aws_lambda_powertools import Logger

from core.imaging.processor import EncodedImage
from core.imaging.selector import TransformQuery, TransformSelector
from core.models.image import ImageMetadata
from core.services.image_resource import ImageResource

logger = Logger(UTC=True)


class GetService:
    """Application service responsible for rendering stored images.

    This service orchestrates:
    - Fetching image metadata
    - Decoding the stored bytes
    - Selecting and applying a single transform
    - Encoding the result
    """

    def __init__(
        self,
        resource: ImageResource | None = None,
        selector: TransformSelector | None = None,
    ) -> None:
        self.resource = resource or ImageResource()
        self.selector = selector or TransformSelector()

    def find_image(self, image_id: str) -> ImageMetadata:
        return self.resource.find_or_fail(image_id)

    def render_image(
        self,
        image: ImageMetadata,
        query: TransformQuery,
        *,
        accept: str | None = None,
    ) -> EncodedImage:
        """
        Render ``image`` according to ``query`` and the ``Accept`` header.

        Raises:
            DecodeError: If the stored bytes are corrupt
            StorageError: If the stored bytes cannot be read
        """
        pipeline = self.resource.load_pipeline(image)
        transform = self.selector.select(query, accept)

        logger.info(
            "Rendering image",
            extra={"image_id": image.id, "operation": transform.operation},
        )

        return self.selector.apply(pipeline, transform).render()
