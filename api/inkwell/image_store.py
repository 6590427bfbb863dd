"""Image storage for avatars, profile covers, post covers and inline post images.

Images are uploaded as base64 (optionally wrapped in a data URI) and stored in
the vault under <folder>/ using a hash-based folder structure derived from a
fresh image UUID. Callers keep both the public URL and the vault-relative path;
the path is what they hand back to delete_image().
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from . import settings
from .errors import BadRequestError

logger = logging.getLogger(__name__)

FOLDERS = ("avatars", "covers", "posts", "admins")

# Allowed image MIME types
ALLOWED_MIME_TYPES: dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
}

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
)


@dataclass
class StoredImage:
    url: str
    path: str  # relative to the vault root


def get_vault_location() -> Path:
    """Get the vault location from environment variable."""
    return Path(os.environ.get("VAULT_LOCATION", "vault"))


def hash_image_id(image_id: uuid.UUID) -> str:
    """Hash the image UUID using SHA256 for folder structure derivation."""
    return hashlib.sha256(str(image_id).encode()).hexdigest()


def sniff_mime_type(content: bytes) -> str | None:
    for signature, mime_type in _SIGNATURES:
        if content.startswith(signature):
            return mime_type
    return None


def decode_image(data: str) -> tuple[bytes, str]:
    """
    Decode a base64 image and verify it is a PNG or JPEG within the size limit.

    Returns:
        Tuple of (raw bytes, mime type)
    """
    declared: str | None = None
    payload = data.strip()
    if payload.startswith("data:"):
        header, _, payload = payload.partition(",")
        declared = header[len("data:"):].split(";", 1)[0].lower()
        if declared not in ALLOWED_MIME_TYPES:
            raise BadRequestError("Only JPEG and PNG images are allowed")

    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise BadRequestError("Image is not valid base64")

    mime_type = sniff_mime_type(content)
    if mime_type is None:
        raise BadRequestError("Only JPEG and PNG images are allowed")

    if len(content) > settings.IMAGE_MAX_BYTES:
        max_mb = settings.IMAGE_MAX_BYTES / (1024 * 1024)
        raise BadRequestError(f"Image exceeds maximum of {max_mb:g} MB")

    return content, mime_type


def upload_image(data: str, folder: str) -> StoredImage:
    """
    Save a base64 image to the vault.

    Example:
        hash = "a1b2c3d4..."
        file = VAULT_LOCATION/posts/a1/b2/c3/<uuid>.png
        url  = /api/vault/posts/a1/b2/c3/<uuid>.png
    """
    if folder not in FOLDERS:
        raise ValueError(f"Unknown image folder '{folder}'")

    content, mime_type = decode_image(data)
    image_id = uuid.uuid4()
    hash_value = hash_image_id(image_id)
    relative = Path(folder, hash_value[0:2], hash_value[2:4], hash_value[4:6])
    relative_file = relative / f"{image_id}{ALLOWED_MIME_TYPES[mime_type]}"

    folder_path = get_vault_location() / relative
    folder_path.mkdir(parents=True, exist_ok=True)
    with open(get_vault_location() / relative_file, "wb") as f:
        f.write(content)

    logger.info(f"Saved image {image_id} to {relative_file}")
    return StoredImage(url=f"/api/vault/{relative_file.as_posix()}", path=relative_file.as_posix())


def delete_image(path: str | None) -> bool:
    """
    Best-effort delete of a stored image by its vault-relative path.

    Returns True if a file was deleted, False otherwise.
    """
    if not path:
        return False

    vault = get_vault_location().resolve()
    target = (vault / path).resolve()
    if vault not in target.parents:
        logger.warning(f"Refusing to delete image outside the vault: {path}")
        return False

    try:
        if target.exists():
            target.unlink()
            return True
        return False
    except OSError as e:
        logger.warning(f"Failed to delete image {path}: {e}")
        return False
