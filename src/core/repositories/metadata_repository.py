"""Abstract contract for image metadata persistence."""

from abc import ABC, abstractmethod

from core.models.image import ImageMetadata


class ImageMetadataRepository(ABC):
    """Contract for storing and retrieving image metadata.

    Implementations could be S3, DynamoDB, PostgreSQL, etc.
    Handlers depend on this interface, not the implementation.
    """

    @abstractmethod
    def create_metadata(
        self,
        *,
        image_id: str,
        original_name: str,
        extension: str,
    ) -> ImageMetadata:
        """Create the metadata record for a new image.

        Both timestamps are set to the current time.

        Raises:
            MetadataOperationFailedError: If the record cannot be written
        """

    @abstractmethod
    def fetch_metadata(self, *, image_id: str) -> ImageMetadata | None:
        """Fetch metadata for a single image.

        Returns:
            The record or None if not found

        Raises:
            MetadataOperationFailedError: If the fetch fails or the record is malformed
        """

    @abstractmethod
    def save_metadata(self, *, metadata: ImageMetadata) -> ImageMetadata:
        """Persist an updated record, refreshing ``updated_at``.

        Returns:
            The record as stored

        Raises:
            MetadataOperationFailedError: If the write fails
        """

    @abstractmethod
    def list_metadata(self) -> list[ImageMetadata]:
        """List the metadata of every stored image.

        Raises:
            MetadataOperationFailedError: If listing fails
        """
