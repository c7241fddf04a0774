"""Decode/operate/encode pipeline over a single in-memory bitmap.

Every operation returns a new ``ImagePipeline``; nothing is mutated in place,
so operations compose left to right::

    ImagePipeline.decode(data).resize(50, 50).encode("png").render()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import io

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.models.errors import DecodeError
from core.utils.constants import ALPHA_FORMATS, INSERT_POSITIONS
from core.utils.mime import extension_for_mime, format_for_name, mime_for_format

logger = Logger(UTC=True)

# Multi-picture JPEGs written by cameras are plain JPEGs for our purposes.
_FORMAT_ALIASES: dict[str, str] = {"MPO": "JPEG"}

# (horizontal, vertical) anchor as halves of the free space: 0 start, 1 middle, 2 end.
_ANCHORS: dict[str, tuple[int, int]] = {
    "top-left": (0, 0),
    "top": (1, 0),
    "top-right": (2, 0),
    "left": (0, 1),
    "center": (1, 1),
    "right": (2, 1),
    "bottom-left": (0, 2),
    "bottom": (1, 2),
    "bottom-right": (2, 2),
}

_TRANSPARENT = (0, 0, 0, 0)
_WHITE = (255, 255, 255)


@dataclass(frozen=True)
class EncodedImage:
    """Bytes produced by rendering a pipeline."""

    content: bytes
    mime_type: str

    @property
    def extension(self) -> str:
        """Extension derived from the encoded MIME type (``image/jpeg`` -> ``jpeg``)."""
        return extension_for_mime(self.mime_type)


@dataclass(frozen=True)
class ImagePipeline:
    """A decoded bitmap plus the format it will be encoded to."""

    bitmap: Image.Image
    target_format: str

    @classmethod
    def decode(cls, data: bytes) -> ImagePipeline:
        """Decode raw bytes into a pipeline targeting the source format.

        Raises:
            DecodeError: If the bytes are not a decodable image
        """
        try:
            bitmap = Image.open(io.BytesIO(data))
            bitmap.load()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            EOFError,
            ValueError,
        ) as exc:
            logger.warning("Image decode failed", extra={"size": len(data)})
            raise DecodeError(
                message="The file must be a decodable image",
                details={"size": len(data)},
            ) from exc

        source_format = bitmap.format
        if not source_format:
            raise DecodeError(message="Unable to determine the image format")

        source_format = _FORMAT_ALIASES.get(source_format, source_format)

        return cls(bitmap=_normalize_mode(bitmap), target_format=source_format)

    @property
    def size(self) -> tuple[int, int]:
        return self.bitmap.size

    @property
    def has_alpha(self) -> bool:
        return self.bitmap.mode == "RGBA"

    @property
    def can_render(self) -> bool:
        """Whether Pillow has an encoder for the target format."""
        Image.init()
        return self.target_format in Image.SAVE

    def crop(self, width: int, height: int, x: int, y: int) -> ImagePipeline:
        """Extract the rectangle whose top-left corner is (x, y).

        The rectangle is clamped to the source bounds and never collapses
        below one pixel.
        """
        _require_non_negative(width=width, height=height, x=x, y=y)

        source_width, source_height = self.bitmap.size
        left = min(x, source_width - 1)
        top = min(y, source_height - 1)
        right = max(left + 1, min(x + width, source_width))
        bottom = max(top + 1, min(y + height, source_height))

        return self._with(self.bitmap.crop((left, top, right, bottom)))

    def resize(self, width: int, height: int) -> ImagePipeline:
        """Resize to absolute pixel dimensions (aspect ratio is not preserved)."""
        _require_non_negative(width=width, height=height)

        size = (max(width, 1), max(height, 1))
        return self._with(self.bitmap.resize(size, Image.Resampling.LANCZOS))

    def greyscale(self) -> ImagePipeline:
        grey = ImageOps.grayscale(self.bitmap)

        if self.has_alpha:
            result = Image.merge("RGBA", (grey, grey, grey, self.bitmap.getchannel("A")))
        else:
            result = grey.convert("RGB")

        return self._with(result)

    def opacity(self, percent: int) -> ImagePipeline:
        """Scale the alpha channel to ``percent`` of its current value."""
        _require_range("percent", percent, 0, 100)

        result = self.bitmap.convert("RGBA")
        alpha = result.getchannel("A").point(lambda value: value * percent // 100)
        result.putalpha(alpha)

        return self._with(result)

    def brightness(self, delta: int) -> ImagePipeline:
        """Shift colour channels by ``delta`` percent of the channel range."""
        _require_range("delta", delta, -100, 100)

        shift = round(delta * 255 / 100)
        table = [min(255, max(0, value + shift)) for value in range(256)] * 3

        if self.has_alpha:
            table += list(range(256))

        return self._with(self.bitmap.point(table))

    def rotate(self, degrees: float) -> ImagePipeline:
        """Rotate clockwise, expanding the canvas to keep every corner.

        Exposed background is transparent when the target format carries
        alpha, white otherwise.
        """
        _require_range("degrees", degrees, -360, 360)

        if self.target_format in ALPHA_FORMATS:
            bitmap, fill = self.bitmap.convert("RGBA"), _TRANSPARENT
        else:
            bitmap, fill = self.bitmap.convert("RGB"), _WHITE

        rotated = bitmap.rotate(
            -degrees,
            resample=Image.Resampling.BICUBIC,
            expand=True,
            fillcolor=fill,
        )
        return self._with(rotated)

    def insert(self, overlay_data: bytes, position: str) -> ImagePipeline:
        """Composite another image at an anchor position, without scaling it.

        Raises:
            DecodeError: If the overlay bytes are not a decodable image
        """
        if position not in INSERT_POSITIONS:
            raise ValueError(f"Unknown insert position: {position!r}")

        overlay = ImagePipeline.decode(overlay_data).bitmap.convert("RGBA")
        base = self.bitmap.convert("RGBA")

        horizontal, vertical = _ANCHORS[position]
        offset = (
            (base.width - overlay.width) * horizontal // 2,
            (base.height - overlay.height) * vertical // 2,
        )

        layer = Image.new("RGBA", base.size, _TRANSPARENT)
        layer.paste(overlay, offset)
        composed = Image.alpha_composite(base, layer)

        if not self.has_alpha:
            composed = composed.convert("RGB")

        return self._with(composed)

    def encode(self, format_name: str) -> ImagePipeline:
        """Select the output format: ``jpg``/``jpeg``, ``png`` or ``gif``."""
        return replace(self, target_format=format_for_name(format_name))

    def render(self) -> EncodedImage:
        """Serialize the bitmap into the target format."""
        if not self.can_render:
            raise ValueError(f"Pillow cannot encode {self.target_format!r}")

        buffer = io.BytesIO()
        _prepare_for(self.bitmap, self.target_format).save(buffer, format=self.target_format)

        return EncodedImage(
            content=buffer.getvalue(),
            mime_type=mime_for_format(self.target_format),
        )

    def _with(self, bitmap: Image.Image) -> ImagePipeline:
        return replace(self, bitmap=bitmap)


def _normalize_mode(bitmap: Image.Image) -> Image.Image:
    """Work in RGB or RGBA regardless of the source palette or colour space."""
    has_alpha = bitmap.mode in ("RGBA", "LA", "PA") or "transparency" in bitmap.info
    return bitmap.convert("RGBA" if has_alpha else "RGB")


def _prepare_for(bitmap: Image.Image, target_format: str) -> Image.Image:
    """Drop alpha for formats that cannot store it, flattening onto white."""
    if target_format in ALPHA_FORMATS or bitmap.mode != "RGBA":
        return bitmap

    background = Image.new("RGB", bitmap.size, _WHITE)
    background.paste(bitmap, mask=bitmap.getchannel("A"))
    return background


def _require_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")


def _require_range(name: str, value: float, lower: float, upper: float) -> None:
    if not lower <= value <= upper:
        raise ValueError(f"{name} must be between {lower} and {upper}, got {value}")
