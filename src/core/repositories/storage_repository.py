"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image files.

    Every image owns one storage "directory" keyed by its id, holding the
    encoded bytes under ``image.<extension>``.
    Implementations could be S3, GCS, local disk, etc.
    Handlers depend on this interface, not the implementation.
    """

    @abstractmethod
    def write_image(
        self,
        *,
        image_id: str,
        extension: str,
        file_data: bytes,
        mime_type: str,
    ) -> str:
        """Write (or overwrite) the image bytes and return the storage key.

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    def read_image(self, *, image_id: str, extension: str) -> bytes:
        """Read the stored image bytes.

        Raises:
            NotFoundError: If the blob does not exist
            StorageError: If the read fails
        """

    @abstractmethod
    def remove_image(self, *, image_id: str, extension: str) -> None:
        """Delete the stored image bytes.

        Raises:
            StorageError: If deletion fails
        """

    @abstractmethod
    def remove_directory(self, *, image_id: str) -> None:
        """Delete everything stored for an image (bytes and metadata).

        Raises:
            StorageError: If any object could not be deleted
        """
