"""
Ristorante API: Local Filesystem Image Store
=============================================

What:  ImageStore backed by a directory on disk.
How:   The object lives at <root>/<key>; its content type and etag live in
       a JSON sidecar at <root>/<key>.meta.json. Writes use aiofiles so the
       event loop is not blocked on disk I/O.

Directory Structure:
    images/
    └── gallery/
        ├── 1718383200000-3fa94c1e.jpg
        └── 1718383200000-3fa94c1e.jpg.meta.json

Security:
    Keys come from URLs (`/img/<key>`). Any key resolving outside the root
    (`../`, absolute paths) is treated as missing.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Optional

import aiofiles

from ristorante.exceptions import ImageStorageError
from ristorante.services.image_store import ImageStore, StoredImage

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta.json"


class LocalImageStore(ImageStore):
    """Stores images as plain files under a root directory."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalImageStore initialized with root=%s", self.root)

    def _resolve(self, key: str) -> Optional[Path]:
        """Absolute path for `key`, or None if it escapes the root."""
        path = (self.root / key).resolve()
        if path == self.root or self.root not in path.parents:
            return None
        if path.name.endswith(META_SUFFIX):
            return None
        return path

    async def get(self, key: str) -> Optional[StoredImage]:
        path = self._resolve(key)
        if path is None or not path.is_file():
            return None

        meta_path = path.with_name(path.name + META_SUFFIX)
        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
            meta = {}
            if meta_path.is_file():
                async with aiofiles.open(meta_path, "r", encoding="utf-8") as f:
                    meta = json.loads(await f.read())
        except (OSError, ValueError) as e:
            logger.error("Failed to read image %s: %s", key, str(e))
            raise ImageStorageError(context={"key": key, "error": str(e)}) from e

        return StoredImage(
            key=key,
            content=content,
            content_type=meta.get("content_type", "application/octet-stream"),
            etag=meta.get("etag") or _etag_for(content),
        )

    async def put(self, key: str, content: bytes, content_type: str) -> str:
        path = self._resolve(key)
        if path is None:
            raise ImageStorageError(context={"key": key, "error": "key outside storage root"})

        etag = _etag_for(content)
        meta_path = path.with_name(path.name + META_SUFFIX)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
            async with aiofiles.open(meta_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps({"content_type": content_type, "etag": etag}))
        except OSError as e:
            logger.error("Failed to store image at %s: %s", path, str(e))
            raise ImageStorageError(context={"key": key, "os_error": str(e)}) from e

        logger.info("Image stored: %s (%d bytes)", key, len(content))
        return etag


def _etag_for(content: bytes) -> str:
    """Quoted MD5 hex digest, the same form S3 uses for single-part objects."""
    return f'"{hashlib.md5(content).hexdigest()}"'
