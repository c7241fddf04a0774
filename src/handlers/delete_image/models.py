"""Pydantic models for delete image request."""

from core.models.requests import ImageIdRequest


class DeleteImageRequest(ImageIdRequest):
    """Validation model for delete image request."""
