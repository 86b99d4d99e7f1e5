"""S3-compatible object storage (MinIO, AWS S3) with checksums and presigned URLs.

Keys are built by msls.core.storage_keys (tenants/<tenant_id>/...).
boto3 is synchronous, so calls run in asyncio.to_thread.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from datetime import timedelta
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from msls.core.config import MinIOSettings
from msls.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class ObjectStorageService:
    """Object storage bound to one bucket on the MinIO/S3 endpoint."""

    def __init__(self, settings: MinIOSettings, client: Any | None = None) -> None:
        """Initialize the S3 client from MINIO_* settings.

        Args:
            settings: Endpoint, credentials, bucket and presign lifetime.
            client: Optional pre-built boto3 client (tests).
        """
        self.settings = settings
        self.bucket = settings.bucket_name
        self._client = client or boto3.client(
            "s3",
            endpoint_url=settings.endpoint_url,
            region_name=settings.region,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key.get_secret_value(),
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )

    async def ensure_bucket(self) -> None:
        """Create the bucket if it does not exist (startup)."""

        def _ensure() -> None:
            try:
                self._client.head_bucket(Bucket=self.bucket)
            except ClientError as e:
                if e.response["Error"]["Code"] not in _NOT_FOUND_CODES:
                    raise
                self._client.create_bucket(Bucket=self.bucket)
                logger.info("Created storage bucket %s", self.bucket)

        await asyncio.to_thread(_ensure)

    async def upload(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store bytes under key with a sha256 metadata entry."""
        checksum = hashlib.sha256(data).hexdigest()
        meta = {"sha256": checksum}
        for k, v in (metadata or {}).items():
            meta[k.lower().replace("_", "-")] = v

        def _put() -> None:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata=meta,
            )

        try:
            await asyncio.to_thread(_put)
        except ClientError as e:
            raise StorageUploadError(key, str(e)) from e
        return {"key": key, "checksum": checksum, "size": len(data)}

    async def delete(self, key: str) -> bool:
        """Delete object. Returns False when it did not exist."""

        def _delete() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                if e.response["Error"]["Code"] in _NOT_FOUND_CODES:
                    return False
                raise
            self._client.delete_object(Bucket=self.bucket, Key=key)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except ClientError as e:
            raise StorageDeleteError(key, str(e)) from e

    async def generate_download_url(
        self, key: str, expiration: timedelta | None = None
    ) -> str:
        """Return a presigned GET URL; raises StorageNotFoundError for missing objects."""
        expires = expiration or self.settings.presign_expires_in

        def _presign() -> str:
            try:
                self._client.head_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                if e.response["Error"]["Code"] in _NOT_FOUND_CODES:
                    raise StorageNotFoundError(key) from e
                raise
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=int(expires.total_seconds()),
            )

        try:
            return await asyncio.to_thread(_presign)
        except ClientError as e:
            raise StorageDownloadError(key, str(e)) from e
