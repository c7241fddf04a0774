"""Pydantic models for persisted transform requests.

Every parameter of a persisted transform is required; the model for a
request is chosen by the ``operation`` path segment.
"""

from abc import abstractmethod
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.imaging.selector import Transform
from core.models.requests import ImageFileRequest, ImageIdRequest
from core.utils.constants import (
    MAX_IMAGE_DIMENSION,
    OPERATION_BRIGHTNESS,
    OPERATION_CROP,
    OPERATION_ENCODE,
    OPERATION_GREYSCALE,
    OPERATION_INSERT,
    OPERATION_OPACITY,
    OPERATION_RESIZE,
    OPERATION_ROTATE,
    OPERATION_ROUTES,
)


class TransformImageRequest(ImageIdRequest):
    """Validation model for the path of a persisted transform request."""

    operation: StrictStr = Field(..., description="Transform path segment, e.g. 'set-opacity'")

    @property
    def operation_name(self) -> str | None:
        """Pipeline operation for the path segment, ``None`` when unknown."""
        return OPERATION_ROUTES.get(self.operation)


class TransformParams(BaseModel):
    """Base class of the per-operation parameter models."""

    model_config = ConfigDict(extra="ignore")

    @abstractmethod
    def to_transform(self) -> Transform:
        """The pipeline operation and arguments these parameters describe."""


class ResizeParams(TransformParams):
    width: int = Field(..., ge=0, le=MAX_IMAGE_DIMENSION)
    height: int = Field(..., ge=0, le=MAX_IMAGE_DIMENSION)

    def to_transform(self) -> Transform:
        return Transform(OPERATION_RESIZE, {"width": self.width, "height": self.height})


class CropParams(TransformParams):
    width: int = Field(..., ge=0, le=MAX_IMAGE_DIMENSION)
    height: int = Field(..., ge=0, le=MAX_IMAGE_DIMENSION)
    x_coordinate: int = Field(..., ge=0)
    y_coordinate: int = Field(..., ge=0)

    def to_transform(self) -> Transform:
        return Transform(
            OPERATION_CROP,
            {
                "width": self.width,
                "height": self.height,
                "x": self.x_coordinate,
                "y": self.y_coordinate,
            },
        )


class GreyscaleParams(TransformParams):
    def to_transform(self) -> Transform:
        return Transform(OPERATION_GREYSCALE)


class OpacityParams(TransformParams):
    transparency: int = Field(..., ge=0, le=100, description="Opacity percent")

    def to_transform(self) -> Transform:
        return Transform(OPERATION_OPACITY, {"percent": self.transparency})


class BrightnessParams(TransformParams):
    brightness: int = Field(..., ge=-100, le=100)

    def to_transform(self) -> Transform:
        return Transform(OPERATION_BRIGHTNESS, {"delta": self.brightness})


class RotateParams(TransformParams):
    angle: float = Field(..., ge=-360, le=360, allow_inf_nan=False)

    def to_transform(self) -> Transform:
        return Transform(OPERATION_ROTATE, {"degrees": self.angle})


class EncodeParams(TransformParams):
    format: Literal["jpg", "png", "gif"] = Field(..., description="Target image format")

    def to_transform(self) -> Transform:
        return Transform(OPERATION_ENCODE, {"format_name": self.format})


class InsertParams(TransformParams, ImageFileRequest):
    position: Literal[
        "top-left",
        "top",
        "top-right",
        "left",
        "center",
        "right",
        "bottom-left",
        "bottom",
        "bottom-right",
    ] = Field(..., description="Anchor of the inserted image")

    def to_transform(self) -> Transform:
        return Transform(
            OPERATION_INSERT,
            {"overlay_data": self.file.content, "position": self.position},
        )


OPERATION_PARAMS: dict[str, type[TransformParams]] = {
    OPERATION_RESIZE: ResizeParams,
    OPERATION_CROP: CropParams,
    OPERATION_GREYSCALE: GreyscaleParams,
    OPERATION_OPACITY: OpacityParams,
    OPERATION_BRIGHTNESS: BrightnessParams,
    OPERATION_ROTATE: RotateParams,
    OPERATION_ENCODE: EncodeParams,
    OPERATION_INSERT: InsertParams,
}
