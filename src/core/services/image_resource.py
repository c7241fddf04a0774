"""Orchestration of the blob store, the metadata store and the image pipeline.

Every write follows the same order: the blob is replaced first and the
metadata record is saved second, so an interrupted request leaves stale but
valid metadata rather than metadata pointing at missing bytes. A failure
between the two steps is reported, not rolled back.
"""

import uuid

from aws_lambda_powertools import Logger

from core.imaging.processor import EncodedImage, ImagePipeline
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.infrastructure.aws.s3_metadata import S3ImageMetadata
from core.models.errors import DecodeError, NotFoundError, ValidationError
from core.models.image import ImageMetadata
from core.repositories.metadata_repository import ImageMetadataRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import UPLOAD_FIELD_NAME
from core.utils.mime import extension_for_format, mime_for_extension

logger = Logger(UTC=True)


class ImageResource:
    """Application service shared by every image endpoint.

    This service orchestrates:
    - Looking up metadata (failing fast when the image does not exist)
    - Loading and decoding stored bytes
    - Replacing stored bytes and saving the matching metadata
    - Creating and destroying whole image directories
    """

    def __init__(
        self,
        storage: ImageStorageRepository | None = None,
        metadata: ImageMetadataRepository | None = None,
    ) -> None:
        self.storage: ImageStorageRepository = storage or S3ImageStorage()
        self.metadata: ImageMetadataRepository = metadata or S3ImageMetadata()

    @staticmethod
    def generate_image_id() -> str:
        """Generate a unique image identifier."""
        return f"img_{uuid.uuid4().hex}"

    def all(self) -> list[ImageMetadata]:
        return self.metadata.list_metadata()

    def find_or_fail(self, image_id: str) -> ImageMetadata:
        """Return the metadata record for ``image_id``.

        Raises:
            NotFoundError: If no record exists
        """
        metadata = self.metadata.fetch_metadata(image_id=image_id)

        if metadata is None:
            logger.warning("Image metadata not found", extra={"image_id": image_id})
            raise NotFoundError(
                message="Image not found",
                details={"image_id": image_id},
            )

        return metadata

    def read_content(self, image: ImageMetadata) -> bytes:
        return self.storage.read_image(image_id=image.id, extension=image.extension)

    def load_pipeline(self, image: ImageMetadata) -> ImagePipeline:
        """Read and decode the stored bytes of an image.

        Raises:
            DecodeError: If the stored bytes are corrupt
        """
        content = self.read_content(image)

        try:
            return ImagePipeline.decode(content)
        except DecodeError as exc:
            logger.error(
                "Stored image could not be decoded",
                extra={"image_id": image.id, "extension": image.extension},
            )
            raise DecodeError(
                message="Stored image could not be decoded",
                details={"image_id": image.id},
            ) from exc

    def create(self, *, original_name: str, file_data: bytes) -> ImageMetadata:
        """Store a newly uploaded image under a freshly minted id.

        Raises:
            ValidationError: If the upload is not a decodable image
        """
        extension = self.guess_extension(file_data)
        image_id = self.generate_image_id()

        logger.debug(
            "Creating image",
            extra={"image_id": image_id, "extension": extension, "size": len(file_data)},
        )

        self.storage.write_image(
            image_id=image_id,
            extension=extension,
            file_data=file_data,
            mime_type=mime_for_extension(extension),
        )
        metadata = self.metadata.create_metadata(
            image_id=image_id,
            original_name=original_name,
            extension=extension,
        )

        logger.info("Image created", extra={"image_id": image_id})
        return metadata

    def replace(
        self,
        image: ImageMetadata,
        *,
        original_name: str,
        file_data: bytes,
    ) -> ImageMetadata:
        """Replace the stored bytes of an existing image, keeping its id.

        Raises:
            ValidationError: If the upload is not a decodable image
        """
        extension = self.guess_extension(file_data)

        return self._replace_blob(
            image,
            image.fill(original_name=original_name, extension=extension),
            file_data=file_data,
            mime_type=mime_for_extension(extension),
        )

    def persist(
        self,
        image: ImageMetadata,
        rendered: EncodedImage,
        *,
        original_name: str | None = None,
        extension: str | None = None,
    ) -> ImageMetadata:
        """Write rendered bytes back as the image's content."""
        return self._replace_blob(
            image,
            image.fill(original_name=original_name, extension=extension),
            file_data=rendered.content,
            mime_type=rendered.mime_type,
        )

    def destroy(self, image: ImageMetadata) -> None:
        """Delete the whole storage directory (bytes and metadata) of an image."""
        self.storage.remove_directory(image_id=image.id)
        logger.info("Image destroyed", extra={"image_id": image.id})

    @staticmethod
    def guess_extension(file_data: bytes) -> str:
        """Derive the extension from the uploaded content, never from its name.

        The extension is the format's conventional one (``JPEG`` -> ``jpg``),
        unlike ``encode`` which names the blob after the MIME subtype.

        Raises:
            ValidationError: If the content is not an image we can re-encode
        """
        try:
            pipeline = ImagePipeline.decode(file_data)
        except DecodeError as exc:
            raise ValidationError(
                message="The file must be an image",
                details={"field": UPLOAD_FIELD_NAME},
            ) from exc

        unsupported = ValidationError(
            message=f"Unsupported image format: {pipeline.target_format}",
            details={"field": UPLOAD_FIELD_NAME},
        )

        if not pipeline.can_render:
            raise unsupported

        try:
            return extension_for_format(pipeline.target_format)
        except ValueError as exc:
            raise unsupported from exc

    def _replace_blob(
        self,
        image: ImageMetadata,
        updated: ImageMetadata,
        *,
        file_data: bytes,
        mime_type: str,
    ) -> ImageMetadata:
        logger.debug(
            "Replacing image content",
            extra={
                "image_id": image.id,
                "old_extension": image.extension,
                "new_extension": updated.extension,
                "size": len(file_data),
            },
        )

        self.storage.remove_image(image_id=image.id, extension=image.extension)
        self.storage.write_image(
            image_id=image.id,
            extension=updated.extension,
            file_data=file_data,
            mime_type=mime_type,
        )
        saved = self.metadata.save_metadata(metadata=updated)

        logger.info("Image content replaced", extra={"image_id": image.id})
        return saved

