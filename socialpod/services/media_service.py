"""
Media storage for uploaded photos.

Uploads are decoded with Pillow to learn their real format, which must match
the content type the client declared. The original and its renditions are
written under UPLOAD_DIR with a random name and served from MEDIA_URL:

    <name>.png          original
    small_<name>.png    50x50 crop
    medium_<name>.png   100x100 crop
    large_<name>.png    at most 700px wide
"""

from __future__ import annotations

import io
import logging
import uuid
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from socialpod.config import settings

logger = logging.getLogger(__name__)

# Pillow format name -> MIME type and file extension
ALLOWED_FORMATS = {
    "PNG": ("image/png", ".png"),
    "JPEG": ("image/jpeg", ".jpg"),
    "GIF": ("image/gif", ".gif"),
    "WEBP": ("image/webp", ".webp"),
}

MIME_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "image/x-png": "image/png",
}

THUMBNAIL_SIZES = {
    "small": (50, 50),
    "medium": (100, 100),
}
LARGE_MAX_WIDTH = 700
RENDITIONS = ("small", "medium", "large")


class InvalidImageError(ValueError):
    """The upload is missing, unreadable, too large, or not what it claims to be."""


def normalize_content_type(content_type: Optional[str]) -> str:
    value = (content_type or "").split(";")[0].strip().lower()
    return MIME_ALIASES.get(value, value)


class MediaStorage:
    def __init__(self, storage_root: Optional[str] = None):
        self.storage_root = Path(storage_root or settings.UPLOAD_DIR).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)

    def inspect(self, content: bytes, declared_type: Optional[str]) -> Image.Image:
        """Decode the upload and check it against the declared content type."""
        if not content:
            raise InvalidImageError("Upload is empty")
        if len(content) > settings.MAX_UPLOAD_BYTES:
            raise InvalidImageError(
                f"Upload is {len(content)} bytes, limit is {settings.MAX_UPLOAD_BYTES}"
            )

        try:
            with Image.open(io.BytesIO(content)) as candidate:
                candidate.verify()
            # verify() leaves the image unusable, so decode again
            image = Image.open(io.BytesIO(content))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
            raise InvalidImageError(f"Upload is not a readable image: {exc}") from exc

        if image.format not in ALLOWED_FORMATS:
            raise InvalidImageError(f"Image format {image.format} is not supported")

        actual_type = ALLOWED_FORMATS[image.format][0]
        declared = normalize_content_type(declared_type)
        if declared != actual_type:
            raise InvalidImageError(
                f"Declared content type '{declared or 'none'}' does not match actual '{actual_type}'"
            )
        return image

    def _render(self, image: Image.Image, size: str) -> Image.Image:
        if size in THUMBNAIL_SIZES:
            return ImageOps.fit(image, THUMBNAIL_SIZES[size], method=Image.Resampling.LANCZOS)
        rendition = image.copy()
        rendition.thumbnail((LARGE_MAX_WIDTH, image.height or LARGE_MAX_WIDTH), Image.Resampling.LANCZOS)
        return rendition

    @staticmethod
    def _save(image: Image.Image, path: Path, image_format: str) -> None:
        if image_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        image.save(path, format=image_format)

    def store(self, image: Image.Image) -> Tuple[str, int, int]:
        """
        Write the original and every rendition to disk.

        Returns (file_name, width, height) of the original.
        """
        image_format = image.format
        extension = ALLOWED_FORMATS[image_format][1]
        file_name = f"{uuid.uuid4().hex}{extension}"
        width, height = image.size

        written = []
        try:
            original_path = self.storage_root / file_name
            self._save(image, original_path, image_format)
            written.append(original_path)
            for size in RENDITIONS:
                path = self.storage_root / f"{size}_{file_name}"
                self._save(self._render(image, size), path, image_format)
                written.append(path)
        except OSError:
            for path in written:
                path.unlink(missing_ok=True)
            logger.exception("Failed to store upload %s", file_name)
            raise

        logger.info("Stored photo %s (%dx%d, %s)", file_name, width, height, image_format)
        return file_name, width, height

    def remove(self, file_name: str) -> None:
        """Delete the original and its renditions; missing files are ignored."""
        for name in [file_name] + [f"{size}_{file_name}" for size in RENDITIONS]:
            path = self.storage_root / name
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove media file %s: %s", path, exc)


media_storage = MediaStorage()
