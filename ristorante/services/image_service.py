"""
Ristorante API: Gallery Image Service
======================================

What:  Validates gallery uploads, assigns their storage keys and reads
       images back for the public `/img/<key>` route.
How:   Works against whatever ImageStore the request resolved; it never
       knows whether the bytes end up in a bucket or on disk.
Who:   routes/images.py

Upload checks, in order:
    1. Extension from the client filename (no dot → jpg): jpg, jpeg, png, webp
    2. Size: non-empty and at most MAX_UPLOAD_SIZE
    3. Key: gallery/<epoch-millis>-<8 hex>.<ext>

The extension alone decides the stored content type; the bytes are not
sniffed.
"""

import logging
import secrets
import time
from typing import Optional

from ristorante.enums import ImageExtension
from ristorante.exceptions import ValidationError
from ristorante.services.image_store import ImageStore, StoredImage

logger = logging.getLogger(__name__)

GALLERY_PREFIX = "gallery"

UNSUPPORTED_TYPE_MESSAGE = "unsupported file type"
EMPTY_FILE_MESSAGE = "file is empty"
TOO_LARGE_MESSAGE = "file exceeds maximum upload size"


def generate_key(ext: ImageExtension) -> str:
    """
    A fresh gallery key, e.g. `gallery/1718383200000-3fa94c1e.jpg`.

    No existence check is made; a collision needs the same millisecond and
    the same 32 random bits.
    """
    millis = int(time.time() * 1000)
    return f"{GALLERY_PREFIX}/{millis}-{secrets.token_hex(4)}.{ext.value}"


class ImageService:
    """Stateless upload/fetch logic; the store is passed per call."""

    def validate_extension(self, filename: Optional[str]) -> ImageExtension:
        """
        Raises:
            ValidationError: → 400 "unsupported file type"
        """
        ext = ImageExtension.from_filename(filename)
        if ext is None:
            raise ValidationError(
                message=UNSUPPORTED_TYPE_MESSAGE,
                field="file",
                context={"filename": filename},
            )
        return ext

    def validate_size(self, size: int, max_size: int) -> None:
        if size == 0:
            raise ValidationError(message=EMPTY_FILE_MESSAGE, field="file")
        if size > max_size:
            raise ValidationError(
                message=TOO_LARGE_MESSAGE,
                field="file",
                context={"size": size, "max_size": max_size},
            )

    async def upload(
        self,
        store: ImageStore,
        filename: Optional[str],
        content: bytes,
        max_size: int,
    ) -> str:
        """
        Validates and stores one upload.

        Returns:
            The new object key.

        Raises:
            ValidationError: bad extension, empty or oversized file
            ImageStorageError: the store rejected the write
        """
        ext = self.validate_extension(filename)
        self.validate_size(len(content), max_size)

        key = generate_key(ext)
        await store.put(key, content, ext.content_type)
        logger.info("Gallery image uploaded: %s (%d bytes, %s)", key, len(content), ext.content_type)
        return key

    async def fetch(self, store: ImageStore, key: str) -> Optional[StoredImage]:
        """The stored object, or None for an empty or unknown key."""
        if not key:
            return None
        return await store.get(key)


# ── Singleton Instance ────────────────────────────────────────────────────
image_service = ImageService()
