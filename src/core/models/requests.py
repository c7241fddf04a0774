"""Request models shared by several handlers."""

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from core.utils.constants import MAX_FILE_SIZE, get_max_file_size_mb
from core.utils.events import UploadedFile

logger = Logger(UTC=True)


class ImageIdRequest(BaseModel):
    """Validation model for the ``image_id`` path parameter."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image_id: StrictStr = Field(
        ...,
        min_length=1,
        description="Image ID taken from the request path",
    )

    @field_validator("image_id")
    @classmethod
    def validate_image_id(cls, value: str) -> str:
        if "/" in value:
            raise ValueError("image_id must not contain '/'")
        return value


class ImageFileRequest(BaseModel):
    """Validation model for requests carrying an uploaded image in ``file``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    file: UploadedFile = Field(..., description="Multipart file part")

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: UploadedFile) -> UploadedFile:
        """
        Validate the uploaded file:
        - must have non-zero size
        - must not exceed MAX_FILE_SIZE
        """
        if not value.size:
            logger.error("File validation error: Uploaded file is empty")
            raise ValueError("Uploaded file is empty")

        if value.size > MAX_FILE_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(f"File size exceeds {get_max_file_size_mb()}MB limit")

        return value
