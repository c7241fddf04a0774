"""Selection of the single transformation applied when rendering an image.

Query parameters are matched in a fixed priority order and the first match
wins; anything else supplied alongside it is ignored. When no transform
parameter is present the ``Accept`` header may pick an output format,
otherwise the image is passed through in its original format.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from aws_lambda_powertools import Logger

from core.imaging.processor import ImagePipeline
from core.utils.constants import (
    NEGOTIABLE_MIME_TYPES,
    OPERATION_BRIGHTNESS,
    OPERATION_CROP,
    OPERATION_ENCODE,
    OPERATION_GREYSCALE,
    OPERATION_OPACITY,
    OPERATION_RESIZE,
    OPERATION_ROTATE,
)

logger = Logger(UTC=True)

PASSTHROUGH = "passthrough"


class TransformQuery(Protocol):
    """Validated query parameters of a render request."""

    width: int | None
    height: int | None
    x_coordinate: int | None
    y_coordinate: int | None
    greyscale: bool | None
    transparency: int | None
    brightness: int | None
    angle: float | None


@dataclass(frozen=True)
class Transform:
    """The operation chosen for a request and the arguments to call it with."""

    operation: str
    arguments: dict[str, Any] = field(default_factory=dict)


class TransformSelector:
    """Pick and apply at most one transformation for a render request."""

    def __init__(self, negotiable_mime_types: Sequence[str] = NEGOTIABLE_MIME_TYPES) -> None:
        self._negotiable_mime_types = tuple(negotiable_mime_types)

    def select(self, query: TransformQuery, accept: str | None = None) -> Transform:
        if (
            query.width is not None
            and query.height is not None
            and query.x_coordinate is not None
            and query.y_coordinate is not None
        ):
            return Transform(
                OPERATION_CROP,
                {
                    "width": query.width,
                    "height": query.height,
                    "x": query.x_coordinate,
                    "y": query.y_coordinate,
                },
            )

        if query.width is not None and query.height is not None:
            return Transform(OPERATION_RESIZE, {"width": query.width, "height": query.height})

        if query.greyscale is not None:
            return Transform(OPERATION_GREYSCALE)

        if query.transparency is not None:
            return Transform(OPERATION_OPACITY, {"percent": query.transparency})

        if query.brightness is not None:
            return Transform(OPERATION_BRIGHTNESS, {"delta": query.brightness})

        if query.angle is not None:
            return Transform(OPERATION_ROTATE, {"degrees": query.angle})

        if accept is not None and accept in self._negotiable_mime_types:
            _, _, subtype = accept.partition("/")
            return Transform(OPERATION_ENCODE, {"format_name": subtype})

        return Transform(PASSTHROUGH)

    def apply(self, pipeline: ImagePipeline, transform: Transform) -> ImagePipeline:
        logger.debug(
            "Applying transform",
            extra={"operation": transform.operation, "arguments": transform.arguments},
        )

        if transform.operation == PASSTHROUGH:
            return pipeline

        operation = getattr(pipeline, transform.operation)
        result: ImagePipeline = operation(**transform.arguments)
        return result

    def render(
        self,
        pipeline: ImagePipeline,
        query: TransformQuery,
        accept: str | None = None,
    ) -> ImagePipeline:
        """Select the transform for ``query`` and apply it to ``pipeline``."""
        return self.apply(pipeline, self.select(query, accept))
