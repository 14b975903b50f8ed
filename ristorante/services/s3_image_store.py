"""
Ristorante API: S3-Compatible Image Store
==========================================

What:  ImageStore backed by an S3-compatible bucket (Cloudflare R2,
       DigitalOcean Spaces, MinIO, AWS S3).
How:   aioboto3 opens a short-lived client per call; content type is the
       object's ContentType and the etag is the one the bucket computes.

Configuration:
    IMAGES_BUCKET               bucket name (required for this backend)
    IMAGES_ENDPOINT_URL         e.g. https://<account>.r2.cloudflarestorage.com
    IMAGES_REGION               e.g. auto, nyc3, eu-west-1
    IMAGES_ACCESS_KEY_ID / IMAGES_SECRET_ACCESS_KEY
                                omitted → the default credential chain
"""

import logging
from typing import Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from ristorante.config import Settings
from ristorante.exceptions import ImageStorageError
from ristorante.services.image_store import ImageStore, StoredImage

logger = logging.getLogger(__name__)

MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3ImageStore(ImageStore):
    """Stores images as objects in one bucket."""

    def __init__(self, settings: Settings):
        self.bucket = settings.images_bucket
        self._client_kwargs = {
            "region_name": settings.images_region,
            "endpoint_url": settings.images_endpoint_url,
            "aws_access_key_id": settings.images_access_key_id,
            "aws_secret_access_key": settings.images_secret_access_key,
        }
        self._session = aioboto3.Session()
        logger.info("S3ImageStore initialized for bucket=%s", self.bucket)

    def _client(self):
        return self._session.client("s3", **self._client_kwargs)

    async def get(self, key: str) -> Optional[StoredImage]:
        try:
            async with self._client() as s3:
                obj = await s3.get_object(Bucket=self.bucket, Key=key)
                async with obj["Body"] as stream:
                    content = await stream.read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in MISSING_KEY_CODES:
                return None
            logger.error("S3 get_object failed for %s: %s", key, code)
            raise ImageStorageError(context={"key": key, "code": code}) from e
        except BotoCoreError as e:
            logger.error("S3 get_object failed for %s: %s", key, str(e))
            raise ImageStorageError(context={"key": key, "error": str(e)}) from e

        return StoredImage(
            key=key,
            content=content,
            content_type=obj.get("ContentType") or "application/octet-stream",
            etag=obj.get("ETag", ""),
        )

    async def put(self, key: str, content: bytes, content_type: str) -> str:
        try:
            async with self._client() as s3:
                result = await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 put_object failed for %s: %s", key, str(e))
            raise ImageStorageError(context={"key": key, "error": str(e)}) from e

        logger.info("Image stored: s3://%s/%s (%d bytes)", self.bucket, key, len(content))
        return result.get("ETag", "")
