import logging
import secrets
import shutil
from pathlib import Path, PurePath
from typing import Optional

from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif"}


class InvalidUpload(ValueError):
    """Raised when no file was sent or its extension is not an image one."""


def allowed_extension(filename: Optional[str]) -> Optional[str]:
    """Return the lower-cased extension if it is an allowed image type."""
    if not filename:
        return None
    ext = PurePath(filename).suffix.lower()
    return ext if ext in ALLOWED_EXTENSIONS else None


def save_avatar(upload, directory: Path) -> str:
    """Store an uploaded avatar under a random name and return that name."""
    if not isinstance(upload, UploadFile) or not upload.filename:
        raise InvalidUpload("No file selected.")

    ext = allowed_extension(upload.filename)
    if ext is None:
        logger.warning("Rejected avatar upload %r", upload.filename)
        raise InvalidUpload("Only images are allowed")

    directory.mkdir(parents=True, exist_ok=True)
    filename = secrets.token_hex(16) + ext
    with open(directory / filename, "wb") as target:
        shutil.copyfileobj(upload.file, target)
    return filename


def remove_avatar(directory: Path, filename: str) -> None:
    (directory / filename).unlink(missing_ok=True)
