"""Pydantic models for image upload request."""

from core.models.requests import ImageFileRequest


class ImageUploadRequest(ImageFileRequest):
    """Validation model for image upload request.

    The file must be sent as the multipart part named ``file``; its client
    filename becomes the image's ``original_name``.
    """
