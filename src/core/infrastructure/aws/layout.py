"""Storage key convention shared by the blob and metadata stores.

Each image owns one "directory" named after its id::

    <image_id>/image.<extension>
    <image_id>/meta.json
"""

from core.utils.constants import IMAGE_ROLE, META_FILENAME, META_ROLE


def object_key(image_id: str, role: str | None = None, extension: str | None = None) -> str:
    """Resolve the storage key for an image id and a logical file role.

    Args:
        image_id: Image identifier (the directory name)
        role: ``"image"``, ``"meta"`` or None for the directory prefix itself
        extension: Required for the ``"image"`` role

    Raises:
        ValueError: On an unknown role or a missing extension
    """
    directory = f"{image_id}/"

    if role is None:
        return directory

    if role == META_ROLE:
        return f"{directory}{META_FILENAME}"

    if role == IMAGE_ROLE:
        if not extension:
            raise ValueError("extension is required for the image role")
        return f"{directory}{IMAGE_ROLE}.{extension}"

    raise ValueError(f"Unknown storage role: {role!r}")


def image_id_from_prefix(prefix: str) -> str:
    """Inverse of ``object_key(image_id)`` for directory prefixes."""
    return prefix.rstrip("/")
