"""MIME type and format-name helpers backed by Pillow's format registry."""

from PIL import Image

from core.utils.constants import DEFAULT_BINARY_CONTENT_TYPE, ENCODE_FORMATS, FORMAT_EXTENSIONS


def mime_for_format(image_format: str) -> str:
    """Return the MIME type Pillow registers for a format name (e.g. ``PNG``)."""
    Image.init()
    return Image.MIME.get(image_format.upper(), DEFAULT_BINARY_CONTENT_TYPE)


def extension_for_mime(mime_type: str) -> str:
    """Return the subtype portion of a MIME type: ``image/jpeg`` -> ``jpeg``."""
    _, _, subtype = mime_type.partition("/")
    if not subtype:
        raise ValueError(f"Invalid MIME type: {mime_type!r}")
    return subtype


def extension_for_format(image_format: str) -> str:
    """Return the conventional file extension for a Pillow format: ``JPEG`` -> ``jpg``.

    Formats without a preferred extension fall back to one Pillow registers
    for them, so ``mime_for_extension`` can always map the result back.

    Raises:
        ValueError: If Pillow registers no extension for the format
    """
    image_format = image_format.upper()

    preferred = FORMAT_EXTENSIONS.get(image_format)
    if preferred is not None:
        return preferred

    candidates = sorted(
        extension.lstrip(".")
        for extension, registered in Image.registered_extensions().items()
        if registered == image_format
    )
    if not candidates:
        raise ValueError(f"No file extension registered for {image_format!r}")

    if image_format.lower() in candidates:
        return image_format.lower()

    return candidates[0]


def mime_for_extension(extension: str) -> str:
    """Best-effort MIME type for a stored extension, used for download headers."""
    image_format = ENCODE_FORMATS.get(extension.lower())
    if image_format is None:
        Image.init()
        image_format = Image.EXTENSION.get(f".{extension.lower()}")

    if image_format is None:
        return DEFAULT_BINARY_CONTENT_TYPE

    return mime_for_format(image_format)


def format_for_name(name: str) -> str:
    """Resolve a user-facing format name (``jpg``, ``png``, ``gif``) to Pillow's name."""
    try:
        return ENCODE_FORMATS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"Unsupported encode format: {name!r}") from exc
