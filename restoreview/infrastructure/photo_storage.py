"""Image upload validation and persistence under UPLOAD_DIR."""

import os
import uuid
from typing import Optional

import structlog

from restoreview.config import get_settings
from restoreview.core.exceptions import ValidationError

logger = structlog.get_logger(__name__)

ALLOWED_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
PUBLIC_PREFIX = "/uploads"


class PhotoStorage:
    def __init__(self, root: str, max_bytes: int):
        self.root = root
        self.max_bytes = max_bytes

    def validate(self, filename: Optional[str], content_type: Optional[str], size: int) -> None:
        if content_type not in ALLOWED_TYPES:
            raise ValidationError(
                "Unsupported file type",
                f"{filename or 'file'}: only JPEG, PNG, GIF and WebP images are accepted",
            )
        if size == 0:
            raise ValidationError("Empty file", f"{filename or 'file'} has no content")
        if size > self.max_bytes:
            raise ValidationError(
                "File too large",
                f"{filename or 'file'} exceeds {self.max_bytes // (1024 * 1024)} MB",
            )

    def save(self, folder: str, content_type: str, data: bytes) -> str:
        """Write the file and return its public URL."""
        directory = os.path.join(self.root, folder)
        os.makedirs(directory, exist_ok=True)
        name = f"{folder.rstrip('s')}-{uuid.uuid4().hex}{ALLOWED_TYPES[content_type]}"
        with open(os.path.join(directory, name), "wb") as f:
            f.write(data)
        return f"{PUBLIC_PREFIX}/{folder}/{name}"

    def remove(self, url: Optional[str]) -> None:
        if not url or not url.startswith(PUBLIC_PREFIX + "/"):
            return
        path = os.path.join(self.root, *url[len(PUBLIC_PREFIX) + 1:].split("/"))
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove stored file", path=path, error=str(e))


def get_photo_storage() -> PhotoStorage:
    settings = get_settings()
    return PhotoStorage(settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES)
