"""Image Transformation Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless image upload and transformation service using AWS Lambda, S3, and Pillow"
)

__all__ = ["handlers", "core"]
