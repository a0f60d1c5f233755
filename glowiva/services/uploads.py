"""
Image uploads sent as base64 data URLs and stored on local disk.
"""
import base64
import binascii
import logging
import re
import time
from pathlib import Path

from glowiva.core.errors import NotFoundError, ValidationError

logger = logging.getLogger("glowiva")

DATA_URL_PATTERN = re.compile(r"^data:image/([a-zA-Z]+);base64,(.+)$", re.DOTALL)
SAFE_FILENAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
ALLOWED_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "webp")


def decode_data_url(image_data: str) -> tuple[str, bytes]:
    match = DATA_URL_PATTERN.match(image_data.strip())
    if not match:
        raise ValidationError("Invalid image data format")

    extension = match.group(1).lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Unsupported image type: {extension}")

    try:
        content = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid image data format")

    if not content:
        raise ValidationError("Image is empty")

    return extension, content


def sanitize_name(file_name: str) -> str:
    stem = Path(file_name).stem
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "_", stem).strip("_")
    return cleaned or "image"


def store_image(upload_dir: str, image_data: str, file_name: str, max_bytes: int) -> str:
    """Write the decoded image and return its stored filename."""
    extension, content = decode_data_url(image_data)

    if len(content) > max_bytes:
        raise ValidationError(f"Image exceeds the {max_bytes} byte limit")

    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    filename = f"{sanitize_name(file_name)}_{int(time.time() * 1000)}.{extension}"
    (directory / filename).write_bytes(content)

    logger.info(f"Stored upload {filename} ({len(content)} bytes)")
    return filename


def resolve_upload(upload_dir: str, filename: str) -> Path:
    if not SAFE_FILENAME_PATTERN.match(filename) or filename.startswith("."):
        raise ValidationError("Invalid filename")

    directory = Path(upload_dir).resolve()
    path = (directory / filename).resolve()

    if path.parent != directory:
        raise ValidationError("Invalid filename")

    if not path.is_file():
        raise NotFoundError("File not found")

    return path
