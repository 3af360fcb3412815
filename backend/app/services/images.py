"""Image materialization - writes uploaded/generated images to the managed directory and reads them back."""

import logging
import mimetypes
import secrets
import time
from pathlib import Path

from app.core.errors import NotFoundError, StorageError
from app.core.sandbox import SandboxError, resolve_sandboxed_filename

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def suffix_for(mime_type: str | None) -> str:
    return IMAGE_SUFFIXES.get(mime_type or "", ".jpg")


class ImageStore:
    """Flat directory of image files addressed by filename.

    References handed out look like ``uploads/<filename>``; only the
    filename part is ever used to find the file again.
    """

    def __init__(self, directory: Path, url_prefix: str = "/api/images"):
        self.directory = directory
        self.url_prefix = url_prefix.rstrip("/")

    def _unique_name(self, prefix: str, suffix: str) -> str:
        return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(4)}{suffix}"

    def store(self, data: bytes, prefix: str = "upload", suffix: str = ".jpg") -> str:
        name = self._unique_name(prefix, suffix)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path = self.directory / name
            # "xb" so a name collision can never overwrite an existing image
            with open(path, "xb") as f:
                f.write(data)
        except OSError as e:
            logger.exception(f"Failed to write image {name}")
            raise StorageError(f"Failed to save image: {e}") from e

        logger.info(f"Image saved as {path} ({len(data)} bytes)")
        return f"{self.directory.name}/{name}"

    def path_for(self, filename: str) -> Path:
        """Locate a stored file by bare filename. Anything pointing outside the directory is not found."""
        try:
            path = resolve_sandboxed_filename(self.directory, filename)
        except SandboxError as e:
            logger.warning(f"Rejected image lookup: {e}")
            raise NotFoundError("Image not found") from e

        if not path.is_file():
            raise NotFoundError("Image not found")
        return path

    def resolve(self, reference: str) -> bytes:
        path = self.path_for(self.filename(reference))
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError("Image not found") from e
        except OSError as e:
            logger.exception(f"Failed to read image {path}")
            raise StorageError(f"Failed to read image: {e}") from e

    @staticmethod
    def filename(reference: str) -> str:
        return reference.replace("\\", "/").rsplit("/", 1)[-1]

    def url_for(self, reference: str) -> str:
        return f"{self.url_prefix}/{self.filename(reference)}"

    def mime_type_for(self, reference: str) -> str:
        mime_type, _ = mimetypes.guess_type(self.filename(reference))
        return mime_type or "image/jpeg"
