"""
Business logic for downloading the stored bytes of an image.
"""

from dataclasses import dataclass
import unicodedata
from urllib.parse import quote

from aws_lambda_powertools import Logger

from core.services.image_resource import ImageResource
from core.utils.mime import mime_for_extension

logger = Logger(UTC=True)

FALLBACK_FILENAME = "download"


@dataclass(frozen=True)
class Download:
    content: bytes
    content_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        """Attachment header; non-ASCII names also get an RFC 5987 ``filename*``."""
        if self.filename.isascii():
            return f'attachment; filename="{_escape(self.filename)}"'

        fallback = _escape(_ascii_filename(self.filename))
        encoded = quote(self.filename, safe="")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _escape(filename: str) -> str:
    return filename.replace("\\", "\\\\").replace('"', '\\"')


def _ascii_filename(filename: str) -> str:
    """Closest ASCII rendition of a name, e.g. ``café.png`` -> ``cafe.png``."""
    decomposed = unicodedata.normalize("NFKD", filename)
    ascii_name = decomposed.encode("ascii", "ignore").decode("ascii").strip()

    if not ascii_name or ascii_name.startswith("."):
        return f"{FALLBACK_FILENAME}{ascii_name}"

    return ascii_name


class DownloadService:
    """Application service returning stored bytes exactly as persisted."""

    def __init__(self, resource: ImageResource | None = None) -> None:
        self.resource = resource or ImageResource()

    def download_image(self, image_id: str) -> Download:
        """
        Raises:
            NotFoundError: If the image does not exist
            StorageError: If the stored bytes cannot be read
        """
        image = self.resource.find_or_fail(image_id)
        content = self.resource.read_content(image)

        logger.info(
            "Image downloaded",
            extra={"image_id": image_id, "size": len(content)},
        )

        return Download(
            content=content,
            content_type=mime_for_extension(image.extension),
            filename=image.original_name,
        )
