"""Pydantic models for image replace request."""

from core.models.requests import ImageFileRequest, ImageIdRequest


class ReplaceImageRequest(ImageIdRequest):
    """Validation model for the path of a replace request."""


class ReplaceImageBody(ImageFileRequest):
    """Validation model for the replacement file."""
