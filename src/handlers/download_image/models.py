"""Pydantic models for the image download request."""

from core.models.requests import ImageIdRequest


class DownloadImageRequest(ImageIdRequest):
    """Validation model for download image request."""
