"""S3-backed implementation of ImageStorageRepository."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.infrastructure.aws.layout import object_key
from core.models.errors import NotFoundError, StorageError
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    IMAGE_ROLE,
)

logger = Logger(UTC=True)


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3."""

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    def write_image(
        self,
        *,
        image_id: str,
        extension: str,
        file_data: bytes,
        mime_type: str,
    ) -> str:
        """Upload image bytes to S3 and return the object key."""
        key = object_key(image_id, IMAGE_ROLE, extension)

        logger.debug(
            "Writing image",
            extra={"image_id": image_id, "key": key, "size": len(file_data)},
        )

        try:
            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=mime_type,
                metadata={"image_id": image_id},
            )
            logger.info("Image written successfully", extra={"key": key})
            return key

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StorageError(
                message="Unable to store image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error writing image")
            raise StorageError(
                message="Unable to store image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"image_id": image_id},
            ) from exc

    def read_image(self, *, image_id: str, extension: str) -> bytes:
        """Download image bytes directly from S3."""
        key = object_key(image_id, IMAGE_ROLE, extension)
        logger.debug("Reading image", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body: bytes = response["Body"].read()

            logger.info(
                "Image read successfully",
                extra={"key": key, "size": len(body)},
            )

            return body

        except ClientError as exc:
            logger.error("S3 download failed", extra={"key": key})

            if exc.response.get("Error", {}).get("Code") == "NoSuchKey":
                raise NotFoundError(
                    message="Image not found",
                    details={"image_id": image_id, "key": key},
                ) from exc

            raise StorageError(
                message="Unable to read image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error reading image")
            raise StorageError(
                message="Unable to read image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"image_id": image_id},
            ) from exc

    def remove_image(self, *, image_id: str, extension: str) -> None:
        """Delete an image object from S3."""
        key = object_key(image_id, IMAGE_ROLE, extension)
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Image deleted successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

    def remove_directory(self, *, image_id: str) -> None:
        """Delete every object stored under the image's prefix."""
        prefix = object_key(image_id)
        logger.debug("Deleting image directory", extra={"prefix": prefix})

        try:
            keys = list(self._s3.list_keys(prefix=prefix))
            errors = self._s3.delete_objects(keys=keys)

        except ClientError as exc:
            logger.error("S3 directory deletion failed", extra={"prefix": prefix})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image directory")
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        if errors:
            logger.error(
                "S3 reported partial directory deletion",
                extra={"prefix": prefix, "errors": errors},
            )
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={
                    "image_id": image_id,
                    "failed_keys": [error.get("Key") for error in errors],
                },
            )

        logger.info(
            "Image directory deleted",
            extra={"prefix": prefix, "deleted": len(keys)},
        )
