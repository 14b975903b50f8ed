"""
Ristorante API: Abstract Image Store Interface
===============================================

What:  Contract for the binary key/value store holding gallery images.
How:   Concrete stores implement `get` and `put`; `build_image_store()`
       picks one from Settings:

           IMAGES_BUCKET set → S3ImageStore (aioboto3, any S3-compatible API)
           IMAGES_DIR set    → LocalImageStore (aiofiles, JSON sidecar metadata)
           neither           → None, and image routes answer 500
Who:   ImageService; tests substitute an in-memory store.

Contract:
    - get() returns None for a missing key and raises ImageStorageError for
      anything else that goes wrong
    - put() stores content + content type and returns the etag
    - keys are opaque strings that may contain "/"
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from ristorante.config import Settings
from ristorante.exceptions import ConfigurationError


@dataclass(frozen=True)
class StoredImage:
    """An object fetched from the store, with the metadata served back."""

    key: str
    content: bytes
    content_type: str
    etag: str


class ImageStore(ABC):
    """Abstract interface for the image object store."""

    @abstractmethod
    async def get(self, key: str) -> Optional[StoredImage]:
        """
        Fetch an object.

        Returns:
            StoredImage, or None when no object exists under `key`.

        Raises:
            ImageStorageError: on backend failures.
        """
        ...

    @abstractmethod
    async def put(self, key: str, content: bytes, content_type: str) -> str:
        """
        Store an object under `key`.

        Returns:
            The etag of the stored object.

        Raises:
            ImageStorageError: on backend failures.
        """
        ...


def build_image_store(settings: Settings) -> Optional[ImageStore]:
    """Instantiates the configured backend, or returns None."""
    if settings.images_bucket:
        from ristorante.services.s3_image_store import S3ImageStore
        return S3ImageStore(settings)
    if settings.images_dir:
        from ristorante.services.local_image_store import LocalImageStore
        return LocalImageStore(settings.images_dir)
    return None


def get_image_store(request: Request) -> ImageStore:
    """
    FastAPI dependency resolving the application's image store.

    Raises:
        ConfigurationError: no binding configured (→ 500 "IMAGES binding missing").
    """
    store = getattr(request.app.state, "image_store", None)
    if store is None:
        raise ConfigurationError("IMAGES binding missing")
    return store
