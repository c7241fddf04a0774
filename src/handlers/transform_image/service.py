"""Business logic for persisted transforms.

A persisted transform decodes the stored image, applies exactly one
operation, renders the result and writes it back in place of the old
bytes. ``encode`` additionally changes the stored extension and rebuilds
``original_name`` around it.
"""

from aws_lambda_powertools import Logger

from core.imaging.processor import EncodedImage
from core.imaging.selector import TransformSelector
from core.models.errors import DecodeError, ValidationError
from core.models.image import ImageMetadata
from core.services.image_resource import ImageResource
from core.utils.constants import OPERATION_ENCODE, OPERATION_INSERT, UPLOAD_FIELD_NAME

from .models import TransformParams

logger = Logger(UTC=True)


def rebuild_name(original_name: str, extension: str) -> str:
    """Swap everything after the first dot for ``extension``: ``a.b.png`` -> ``a.gif``."""
    stem = original_name.split(".", 1)[0]
    return f"{stem}.{extension}"


class TransformService:
    """Application service applying one persisted transform to an image.

    This service orchestrates:
    - Fetching image metadata
    - Decoding the stored bytes
    - Applying the requested operation and rendering it
    - Replacing the stored bytes and saving the metadata
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

    def transform_image(
        self,
        image: ImageMetadata,
        params: TransformParams,
    ) -> tuple[EncodedImage, ImageMetadata]:
        """Apply ``params`` to the stored image and persist the result.

        Returns:
            The rendered bytes and the saved metadata

        Raises:
            ValidationError: If an inserted image cannot be decoded
            DecodeError: If the stored bytes are corrupt
            StorageError: If reading or writing storage fails
        """
        transform = params.to_transform()
        pipeline = self.resource.load_pipeline(image)

        logger.debug(
            "Applying persisted transform",
            extra={"image_id": image.id, "operation": transform.operation},
        )

        try:
            rendered = self.selector.apply(pipeline, transform).render()
        except DecodeError as exc:
            if transform.operation != OPERATION_INSERT:
                raise
            raise ValidationError(
                message="The file must be an image",
                details={"field": UPLOAD_FIELD_NAME},
            ) from exc

        if transform.operation == OPERATION_ENCODE:
            saved = self.resource.persist(
                image,
                rendered,
                original_name=rebuild_name(image.original_name, rendered.extension),
                extension=rendered.extension,
            )
        else:
            saved = self.resource.persist(image, rendered)

        logger.info(
            "Persisted transform applied",
            extra={
                "image_id": image.id,
                "operation": transform.operation,
                "extension": saved.extension,
            },
        )
        return rendered, saved
