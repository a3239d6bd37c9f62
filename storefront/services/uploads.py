"""Image uploads stored on local disk under UPLOAD_DIR and served at /uploads."""

import logging
import re
import secrets
import string
import time
from pathlib import Path

from storefront.core.config import Settings
from storefront.core.errors import InputValidationError
from storefront.schemas.upload import UploadOut
from storefront.services.sanitize import escape_html

logger = logging.getLogger(__name__)

UPLOAD_CATEGORIES = ("products", "banners", "categories", "avatars", "logos")
PUBLIC_PREFIX = "/uploads/"

_RANDOM_ALPHABET = string.ascii_lowercase + string.digits
_EXTENSION = re.compile(r"^[a-z0-9]{1,10}$")
_MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def _extension(original_name: str, content_type: str) -> str:
    """Lowercased extension of the client file name, or one derived from the MIME type."""
    _, dot, ext = original_name.rpartition(".")
    ext = ext.lower()
    if dot and _EXTENSION.match(ext):
        return ext
    return _MIME_EXTENSIONS.get(content_type, "bin")


def generate_file_name(original_name: str, content_type: str) -> str:
    """<epoch ms>-<6 random chars>.<ext>"""
    random_part = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(6))
    ext = _extension(original_name, content_type)
    return f"{int(time.time() * 1000)}-{random_part}.{ext}"


def validate_upload(settings: Settings, *, size: int, content_type: str, category: str) -> None:
    if size == 0:
        raise InputValidationError("File is empty")
    if size > settings.UPLOAD_MAX_SIZE:
        max_mb = settings.UPLOAD_MAX_SIZE / (1024 * 1024)
        raise InputValidationError(f"File is too large. Maximum size is {max_mb:g}MB")
    if content_type.lower() not in settings.allowed_image_types:
        raise InputValidationError(f"Unsupported file type: {escape_html(content_type)}")
    if category not in UPLOAD_CATEGORIES:
        raise InputValidationError("Invalid upload category")


def store_upload(
    settings: Settings,
    *,
    content: bytes,
    original_name: str,
    content_type: str,
    category: str,
) -> UploadOut:
    """Validate and write an uploaded image; returns its public URL."""
    validate_upload(
        settings, size=len(content), content_type=content_type, category=category
    )
    target_dir = Path(settings.UPLOAD_DIR) / category
    target_dir.mkdir(parents=True, exist_ok=True)
    file_name = generate_file_name(original_name, content_type.lower())
    (target_dir / file_name).write_bytes(content)

    url = f"{PUBLIC_PREFIX}{category}/{file_name}"
    logger.info(
        "File uploaded",
        extra={"category": category, "file_name": file_name, "size": len(content)},
    )
    return UploadOut(
        url=url,
        file_name=file_name,
        size=len(content),
        type=content_type,
        category=category,
    )


def resolve_upload_path(settings: Settings, file_url: str) -> Path:
    """
    Map a public /uploads/... URL to a path inside UPLOAD_DIR.
    Raises InputValidationError for URLs that resolve outside it or to a directory.
    """
    relative = file_url.strip()
    if relative.startswith(PUBLIC_PREFIX):
        relative = relative[len(PUBLIC_PREFIX):]
    relative = relative.lstrip("/")
    if not relative:
        raise InputValidationError("File URL is required")
    root = Path(settings.UPLOAD_DIR).resolve()
    path = (root / relative).resolve()
    if path == root or not path.is_relative_to(root) or path.is_dir():
        raise InputValidationError("Invalid file URL")
    return path


def delete_upload(settings: Settings, file_url: str) -> bool:
    """
    Remove an uploaded file. Returns False when it was already gone;
    a missing file is not an error.
    """
    path = resolve_upload_path(settings, file_url)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.info("File deleted", extra={"path": str(path)})
    return True
