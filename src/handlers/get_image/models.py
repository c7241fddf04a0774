from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.requests import ImageIdRequest
from core.utils.constants import MAX_IMAGE_DIMENSION

# Accepted spellings of a boolean query parameter.
TRUE_VALUES = ("true", "1")
FALSE_VALUES = ("false", "0")


class GetImageRequest(ImageIdRequest):
    """Validation model for the path of a render request."""


class ShowImageQuery(BaseModel):
    """Validation model for the optional transform parameters of a render request.

    Every constraint is checked before a transform is chosen, so an invalid
    ``angle`` is rejected even when a crop would have won.
    """

    model_config = ConfigDict(extra="ignore")

    width: int | None = Field(
        default=None, ge=0, le=MAX_IMAGE_DIMENSION, description="Target width in pixels"
    )
    height: int | None = Field(
        default=None, ge=0, le=MAX_IMAGE_DIMENSION, description="Target height in pixels"
    )
    x_coordinate: int | None = Field(default=None, ge=0, description="Crop origin x")
    y_coordinate: int | None = Field(default=None, ge=0, description="Crop origin y")

    greyscale: bool | None = Field(
        default=None,
        description="Presence selects greyscale, the value itself is ignored",
    )

    transparency: int | None = Field(default=None, ge=0, le=100, description="Opacity percent")
    brightness: int | None = Field(default=None, ge=-100, le=100, description="Brightness delta")
    angle: float | None = Field(
        default=None,
        ge=-360,
        le=360,
        allow_inf_nan=False,
        description="Clockwise rotation in degrees",
    )

    @field_validator("greyscale", mode="before")
    @classmethod
    def validate_greyscale(cls, value: Any) -> Any:
        """Only ``true``, ``false``, ``1`` and ``0`` count as booleans."""
        if value is None or isinstance(value, bool):
            return value

        if isinstance(value, int) and value in (0, 1):
            return bool(value)

        if isinstance(value, str) and value in TRUE_VALUES + FALSE_VALUES:
            return value in TRUE_VALUES

        raise ValueError("The greyscale field must be one of true, false, 1 or 0")
