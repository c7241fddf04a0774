"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_DECODE_FAILED = "IMAGE_DECODE_FAILED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DOWNLOAD_FAILED = "IMAGE_DOWNLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Metadata Errors
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_SAVE_FAILED = "METADATA_SAVE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_INVALID_FORMAT = "METADATA_INVALID_FORMAT"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 4 * 1024 * 1024  # 4MB in bytes

# Upper bound on any requested width or height, in pixels.
# Bounds the bitmap a single request can allocate.
MAX_IMAGE_DIMENSION = 10_000

UPLOAD_FIELD_NAME = "file"


# ============================================================================
# Storage Layout
# ============================================================================

IMAGE_ROLE = "image"
META_ROLE = "meta"
META_FILENAME = "meta.json"
META_JSON_INDENT = 4


# ============================================================================
# Image Formats
# ============================================================================

# Format names accepted by the encode endpoint, mapped to Pillow format names.
ENCODE_FORMATS: Final[dict[str, str]] = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
}

# Conventional file extension for each uploadable Pillow format.
FORMAT_EXTENSIONS: Final[dict[str, str]] = {
    "JPEG": "jpg",
    "PNG": "png",
    "GIF": "gif",
    "BMP": "bmp",
    "TIFF": "tiff",
    "WEBP": "webp",
    "ICO": "ico",
    "PPM": "ppm",
}

# Pillow formats able to carry an alpha channel.
ALPHA_FORMATS: Final[frozenset[str]] = frozenset({"PNG", "GIF", "WEBP", "TIFF"})

# Accept header values honoured by content negotiation.
NEGOTIABLE_MIME_TYPES: Final[tuple[str, ...]] = ("image/gif", "image/jpeg", "image/png")

INSERT_POSITIONS: Final[tuple[str, ...]] = (
    "top-left",
    "top",
    "top-right",
    "left",
    "center",
    "right",
    "bottom-left",
    "bottom",
    "bottom-right",
)

DEFAULT_BINARY_CONTENT_TYPE = "application/octet-stream"


# ============================================================================
# Transform Operations
# ============================================================================

OPERATION_CROP = "crop"
OPERATION_RESIZE = "resize"
OPERATION_GREYSCALE = "greyscale"
OPERATION_OPACITY = "opacity"
OPERATION_BRIGHTNESS = "brightness"
OPERATION_ROTATE = "rotate"
OPERATION_INSERT = "insert"
OPERATION_ENCODE = "encode"

# Path segment of each persisted transform endpoint.
OPERATION_ROUTES: Final[dict[str, str]] = {
    "resize": OPERATION_RESIZE,
    "insert": OPERATION_INSERT,
    "crop": OPERATION_CROP,
    "turn-greyscale": OPERATION_GREYSCALE,
    "set-opacity": OPERATION_OPACITY,
    "change-brightness": OPERATION_BRIGHTNESS,
    "rotate": OPERATION_ROTATE,
    "encode": OPERATION_ENCODE,
}

DELETE_FAILED_MESSAGE = "File could not be deleted."

# ============================================================================
# API Gateway Configuration
# ============================================================================

IMAGES_PATH = "images"
CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Accept"
EXPOSE_HEADERS = "Content-Type,Content-Length,Content-Disposition"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_API_BASE_URL = "IMAGE_API_BASE_URL"
ENV_AWS_REGION = "AWS_REGION"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)
