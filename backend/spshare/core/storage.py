import hashlib
import logging
from pathlib import Path
from typing import Optional

from .config import settings
from .exceptions import ValidationFailedError
from ..models.enums import ItemType

logger = logging.getLogger(__name__)

SUPPORTED_PICTURE_TYPES = ("jpg", "jpeg", "png")
SUPPORTED_VIDEO_TYPES = ("mp4",)


def get_file_extension(filename: str) -> str:
    """Get the text after the last dot, lower-cased ('' if there is none)."""
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def detect_item_type(filename: str) -> ItemType:
    """Work out the item type of an upload from its file extension."""
    extension = get_file_extension(filename or "")
    if not extension:
        raise ValidationFailedError("Invalid file type. File extension not available")

    if extension in SUPPORTED_PICTURE_TYPES:
        return ItemType.PICTURE
    if extension in SUPPORTED_VIDEO_TYPES:
        return ItemType.VIDEO

    raise ValidationFailedError(
        f"Invalid file type - '{extension}'. Supported types - pictures "
        f"('jpg', 'jpeg' and 'png') and videos ('mp4')",
        details={
            "extension": extension,
            "pictures": list(SUPPORTED_PICTURE_TYPES),
            "videos": list(SUPPORTED_VIDEO_TYPES),
        },
    )


def hashed_filename(original_filename: str, timestamp: int) -> str:
    """SHA-256 of the original name followed by the upload unix timestamp."""
    return hashlib.sha256(f"{original_filename}{timestamp}".encode("utf-8")).hexdigest()


class LocalStorage:
    """Reads, writes and deletes item bytes under an uploads directory.

    Paths handed out and accepted are the stored (relative) form; failures
    surface as ``OSError``.
    """

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.UPLOAD_DIR)

    def ensure_upload_dir(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def item_path(self, original_filename: str, timestamp: int) -> str:
        """Stored path of a new upload, with any leading './' removed."""
        path = f"{self.root.as_posix()}/{hashed_filename(original_filename, timestamp)}"
        return path.removeprefix("./")

    def write(self, path: str, data: bytes) -> None:
        """Write a new file; an existing file at ``path`` raises ``FileExistsError``."""
        self.ensure_upload_dir()
        with open(path, "xb") as buffer:
            buffer.write(data)
        logger.info(f"Wrote {len(data)} bytes to {path}")

    def read(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def delete(self, path: str) -> None:
        Path(path).unlink()
        logger.info(f"Deleted {path}")
