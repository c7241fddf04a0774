"""Shared image metadata model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.utils.constants import IMAGES_PATH


class ImageMetadata(BaseModel):
    """Metadata record persisted as ``meta.json`` next to each stored image."""

    model_config = ConfigDict(frozen=True)

    id: StrictStr = Field(..., min_length=1, description="Unique image identifier")
    original_name: StrictStr = Field(..., description="Client supplied file name")
    extension: StrictStr = Field(..., min_length=1, description="Stored file format extension")

    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr = Field(..., description="ISO-8601 last update timestamp (UTC)")

    def fill(
        self,
        *,
        original_name: str | None = None,
        extension: str | None = None,
    ) -> "ImageMetadata":
        """Return a copy with the given mutable fields replaced.

        Only ``original_name`` and ``extension`` may change after creation;
        ``updated_at`` is refreshed by the metadata store on save.
        """
        changes: dict[str, Any] = {}

        if original_name is not None:
            changes["original_name"] = original_name

        if extension is not None:
            changes["extension"] = extension

        return self.model_copy(update=changes)

    def to_representation(self, base_url: str) -> dict[str, Any]:
        """Serialize the record for API responses, adding the derived ``url``."""
        representation = self.model_dump()
        representation["url"] = build_image_url(base_url, self.id)
        return representation


def build_image_url(base_url: str, image_id: str) -> str:
    """Canonical retrieval link for an image."""
    return f"{base_url.rstrip('/')}/{IMAGES_PATH}/{image_id}"
