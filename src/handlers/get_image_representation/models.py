"""Pydantic models for the image representation request."""

from core.models.requests import ImageIdRequest


class RepresentationRequest(ImageIdRequest):
    """Validation model for get image representation request."""
