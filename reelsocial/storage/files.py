# =============================================================================
# REELSOCIAL BACKEND - IMAGE STORAGE
# =============================================================================
# File: storage/files.py
# Description: Validation and on-disk storage of uploaded images
#              Files are served back under /images
# =============================================================================

import logging
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from reelsocial.core.exceptions import UploadError


logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/jpg"}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_name(filename: str) -> str:
    name = _UNSAFE_CHARS.sub("_", Path(filename).name).strip("._")
    return name or "image"


class ImageStorage:
    """
    Stores images as ``<epoch-ms>-<original name>`` in the upload directory.

    Only JPEG and PNG are accepted, up to ``max_bytes``.
    """

    def __init__(self, upload_dir: Path, max_bytes: int):
        self._dir = Path(upload_dir)
        self._max_bytes = max_bytes

    @property
    def directory(self) -> Path:
        return self._dir

    def ensure_directory(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)

    async def save(self, file: Optional[UploadFile]) -> str:
        """
        Validate and store an uploaded image.

        Returns:
            str: Stored file name (relative to the upload directory)

        Raises:
            UploadError: No file, wrong content type, empty or too large
        """
        if file is None or not file.filename:
            raise UploadError("No file uploaded")

        if (file.content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
            raise UploadError("Only JPEG, PNG, and JPG files are allowed")

        content = await file.read(self._max_bytes + 1)
        if not content:
            raise UploadError("Empty file not allowed")
        if len(content) > self._max_bytes:
            raise UploadError(
                f"File too large. Maximum: {self._max_bytes} bytes"
            )

        return self.save_bytes(content, file.filename)

    def save_bytes(self, content: bytes, filename: str) -> str:
        """Write raw image bytes under a fresh timestamped name."""
        self.ensure_directory()
        stored_name = f"{int(time.time() * 1000)}-{_safe_name(filename)}"
        path = self._dir / stored_name
        with open(path, "wb") as f:
            f.write(content)

        logger.info("Stored image %s (%d bytes)", stored_name, len(content))
        return stored_name

    def discard(self, stored_name: str) -> None:
        """Remove a stored image that ended up unreferenced."""
        (self._dir / Path(stored_name).name).unlink(missing_ok=True)
        logger.info("Discarded image %s", stored_name)
