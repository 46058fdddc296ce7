"""S3-compatible object storage (AWS S3, MinIO, etc.) with checksums and presigned URLs."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import AsyncIterator
from datetime import timedelta
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import ClientError

from dataroom.application.exceptions import (
    StorageAlreadyExistsError,
    StorageChecksumMismatchError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_missing(e: ClientError) -> bool:
    return e.response.get("Error", {}).get("Code") in _MISSING_CODES


class S3StorageService:
    """S3-compatible storage with server-side encryption and presigned URLs.

    Uses boto3 (sync) via asyncio.to_thread for async API. Compatible with
    AWS S3, MinIO, DigitalOcean Spaces.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
    ) -> None:
        self.bucket = bucket
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    def _head(self, storage_ref: str) -> dict[str, Any] | None:
        """HEAD the object; None when it does not exist."""
        try:
            return self._client.head_object(Bucket=self.bucket, Key=storage_ref)
        except ClientError as e:
            if _is_missing(e):
                return None
            raise

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload with checksum validation. Idempotent if same checksum."""

        def _upload() -> dict[str, Any]:
            head = self._head(storage_ref)
            if head is not None:
                existing = (head.get("Metadata") or {}).get("sha256")
                if existing != expected_checksum:
                    raise StorageAlreadyExistsError(storage_ref)
                return {
                    "storage_ref": storage_ref,
                    "checksum": existing,
                    "size": head["ContentLength"],
                    "uploaded_at": head["LastModified"].isoformat(),
                }

            file_data.seek(0)
            body = file_data.read()
            computed = hashlib.sha256(body).hexdigest()
            if computed != expected_checksum:
                raise StorageChecksumMismatchError(
                    storage_ref, expected_checksum, computed
                )
            meta = {"sha256": computed, "original-size": str(len(body))}
            for k, v in (metadata or {}).items():
                meta[k.lower().replace("_", "-")] = v
            self._client.put_object(
                Bucket=self.bucket,
                Key=storage_ref,
                Body=body,
                ContentType=content_type,
                ServerSideEncryption="AES256",
                Metadata=meta,
            )
            head = self._client.head_object(Bucket=self.bucket, Key=storage_ref)
            return {
                "storage_ref": storage_ref,
                "checksum": computed,
                "size": len(body),
                "uploaded_at": head["LastModified"].isoformat(),
            }

        try:
            return await asyncio.to_thread(_upload)
        except (StorageChecksumMismatchError, StorageAlreadyExistsError):
            raise
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream object content (body is read in a worker thread chunk by chunk)."""

        def _open() -> Any:
            try:
                return self._client.get_object(Bucket=self.bucket, Key=storage_ref)["Body"]
            except ClientError as e:
                if _is_missing(e):
                    raise StorageNotFoundError(storage_ref) from e
                raise StorageDownloadError(storage_ref, str(e)) from e

        body = await asyncio.to_thread(_open)
        try:
            while chunk := await asyncio.to_thread(body.read, self.CHUNK_SIZE):
                yield chunk
        except Exception as e:
            raise StorageDownloadError(storage_ref, str(e)) from e
        finally:
            body.close()

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. Returns True if deleted, False if it was already gone."""

        def _delete() -> bool:
            if self._head(storage_ref) is None:
                return False
            self._client.delete_object(Bucket=self.bucket, Key=storage_ref)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except Exception as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        try:
            return await asyncio.to_thread(self._head, storage_ref) is not None
        except ClientError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        """Return size, content_type, checksum, last_modified, custom."""
        try:
            head = await asyncio.to_thread(self._head, storage_ref)
        except ClientError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e
        if head is None:
            raise StorageNotFoundError(storage_ref)
        meta = head.get("Metadata") or {}
        return {
            "size": head["ContentLength"],
            "content_type": head.get("ContentType", "application/octet-stream"),
            "checksum": meta.get("sha256"),
            "last_modified": head["LastModified"].isoformat(),
            "custom": meta,
        }

    async def generate_download_url(
        self,
        storage_ref: str,
        expiration: timedelta = timedelta(hours=1),
        filename: str | None = None,
    ) -> str:
        """Return presigned GET URL (attachment disposition when filename is given)."""

        def _presign() -> str:
            if self._head(storage_ref) is None:
                raise StorageNotFoundError(storage_ref)
            params: dict[str, Any] = {"Bucket": self.bucket, "Key": storage_ref}
            if filename:
                safe = filename.replace('"', "")
                params["ResponseContentDisposition"] = f'attachment; filename="{safe}"'
            return self._client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=int(expiration.total_seconds()),
            )

        try:
            return await asyncio.to_thread(_presign)
        except StorageNotFoundError:
            raise
        except Exception as e:
            raise StorageDownloadError(storage_ref, str(e)) from e
