"""S3-backed implementation of ImageMetadataRepository.

Each record is stored as a pretty-printed ``meta.json`` object inside the
image's directory, next to the encoded bytes.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.infrastructure.aws.layout import image_id_from_prefix, object_key
from core.models.errors import MetadataOperationFailedError
from core.models.image import ImageMetadata
from core.repositories.metadata_repository import ImageMetadataRepository
from core.utils.constants import (
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    ERROR_CODE_METADATA_LIST_FAILED,
    ERROR_CODE_METADATA_SAVE_FAILED,
    META_JSON_INDENT,
    META_ROLE,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class S3ImageMetadata(ImageMetadataRepository):
    """S3-backed metadata storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Initialize with S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    def create_metadata(
        self,
        *,
        image_id: str,
        original_name: str,
        extension: str,
    ) -> ImageMetadata:
        """Create metadata for a new image."""
        timestamp = utc_now_iso()

        metadata = ImageMetadata(
            id=image_id,
            original_name=original_name,
            extension=extension,
            created_at=timestamp,
            updated_at=timestamp,
        )

        self._write(metadata)
        logger.info("Metadata created", extra={"image_id": image_id})

        return metadata

    def fetch_metadata(self, *, image_id: str) -> ImageMetadata | None:
        """Fetch metadata for a single image."""
        key = object_key(image_id, META_ROLE)
        logger.debug("Fetching metadata", extra={"image_id": image_id, "key": key})

        try:
            response = self._s3.get_object(key=key)
            raw = response["Body"].read()

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None

            logger.error("S3 get_object failed for metadata", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching metadata")
            raise MetadataOperationFailedError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        return self._parse(raw, image_id=image_id)

    def save_metadata(self, *, metadata: ImageMetadata) -> ImageMetadata:
        """Persist an updated record, refreshing ``updated_at``."""
        refreshed = metadata.model_copy(update={"updated_at": utc_now_iso()})

        self._write(refreshed)
        logger.info("Metadata saved", extra={"image_id": metadata.id})

        return refreshed

    def list_metadata(self) -> list[ImageMetadata]:
        """List metadata for every image directory in the bucket.

        Directories without a readable ``meta.json`` are skipped.
        """
        logger.debug("Listing image metadata")

        try:
            image_ids = [image_id_from_prefix(prefix) for prefix in self._s3.list_prefixes()]

        except Exception as exc:
            logger.exception("Unable to list image directories")
            raise MetadataOperationFailedError(
                message="Unable to list images",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
            ) from exc

        items: list[ImageMetadata] = []

        for image_id in image_ids:
            try:
                metadata = self.fetch_metadata(image_id=image_id)
            except MetadataOperationFailedError:
                logger.warning("Skipping malformed item", extra={"image_id": image_id})
                continue

            if metadata is None:
                logger.warning("Skipping directory without metadata", extra={"image_id": image_id})
                continue

            items.append(metadata)

        logger.info("Image metadata listed", extra={"count": len(items)})

        return items

    def _write(self, metadata: ImageMetadata) -> None:
        key = object_key(metadata.id, META_ROLE)
        body = json.dumps(metadata.model_dump(), indent=META_JSON_INDENT).encode("utf-8")

        logger.debug("Writing metadata", extra={"image_id": metadata.id, "key": key})

        try:
            self._s3.put_object(
                key=key,
                body=body,
                content_type=DEFAULT_CONTENT_TYPE,
                metadata={"image_id": metadata.id},
            )

        except ClientError as exc:
            logger.error("S3 put_object failed for metadata", extra={"image_id": metadata.id})
            raise MetadataOperationFailedError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_SAVE_FAILED,
                details={"image_id": metadata.id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error saving metadata")
            raise MetadataOperationFailedError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_SAVE_FAILED,
                details={"image_id": metadata.id},
            ) from exc

    @staticmethod
    def _parse(raw: bytes, *, image_id: str) -> ImageMetadata:
        try:
            data: Any = json.loads(raw)
            return ImageMetadata.model_validate(data)

        except (ValueError, PydanticValidationError) as exc:
            logger.error("Invalid metadata format", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Invalid image metadata format",
                error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
                details={"image_id": image_id},
            ) from exc
