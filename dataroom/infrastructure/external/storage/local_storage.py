"""Local filesystem storage with path validation, atomic writes and token download links."""

from __future__ import annotations

import hashlib
import json
import os
import secrets
import tempfile
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, BinaryIO, cast

import aiofiles
import aiofiles.os

from dataroom.application.exceptions import (
    StorageAlreadyExistsError,
    StorageChecksumMismatchError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from dataroom.shared.utils.datetime import from_timestamp_utc, utc_now

DOWNLOAD_PATH = "/api/v1/storage/download"


@dataclass(frozen=True)
class DownloadGrant:
    """What a download token resolves to."""

    storage_ref: str
    expires_at: datetime
    filename: str | None = None


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename.
    Content type and checksum live in a .meta.json sidecar. Download URLs
    carry an opaque token held in process memory, so they are only valid
    against the process that issued them.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    _download_tokens: dict[str, DownloadGrant] = {}

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all objects.
            base_url: Public base URL prepended to download links (e.g. https://api.example.com).
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else None
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        if full_path == self.storage_root:
            raise StoragePermissionError(storage_ref, "path_validation")
        return full_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_name(file_path.name + ".meta.json")

    async def _compute_checksum(self, file_path: Path) -> str:
        sha256 = hashlib.sha256()
        async with aiofiles.open(file_path, "rb") as f:
            while chunk := await f.read(self.CHUNK_SIZE):
                sha256.update(chunk)
        return sha256.hexdigest()

    async def _write_metadata(self, file_path: Path, metadata: dict[str, Any]) -> None:
        meta_path = self._meta_path(file_path)
        async with aiofiles.open(meta_path, "w") as f:
            await f.write(json.dumps(metadata, indent=2))
        os.chmod(meta_path, 0o640)

    async def _read_metadata(self, file_path: Path) -> dict[str, Any]:
        """Read JSON sidecar or empty dict."""
        meta_path = self._meta_path(file_path)
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path, "r") as f:
            result = json.loads(await f.read())
        return cast(dict[str, Any], result) if isinstance(result, dict) else {}

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload with atomic write and checksum validation. Idempotent if same checksum."""
        try:
            target_path = self._get_full_path(storage_ref)
            if target_path.exists():
                existing_checksum = await self._compute_checksum(target_path)
                if existing_checksum != expected_checksum:
                    raise StorageAlreadyExistsError(storage_ref)
                existing_meta = await self._read_metadata(target_path)
                return {
                    "storage_ref": storage_ref,
                    "checksum": existing_checksum,
                    "size": target_path.stat().st_size,
                    "uploaded_at": existing_meta.get("uploaded_at", utc_now().isoformat()),
                }

            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            file_data.seek(0)
            content = file_data.read()

            temp_fd, temp_name = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            temp_path = Path(temp_name)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                os.chmod(temp_path, 0o640)
                computed = await self._compute_checksum(temp_path)
                if computed != expected_checksum:
                    raise StorageChecksumMismatchError(
                        storage_ref, expected_checksum, computed
                    )
                os.replace(temp_path, target_path)
            finally:
                if temp_path.exists():
                    temp_path.unlink()

            upload_meta: dict[str, Any] = {
                "storage_ref": storage_ref,
                "checksum": computed,
                "size": len(content),
                "content_type": content_type,
                "uploaded_at": utc_now().isoformat(),
                "custom": metadata or {},
            }
            await self._write_metadata(target_path, upload_meta)
            return {
                "storage_ref": storage_ref,
                "checksum": computed,
                "size": len(content),
                "uploaded_at": upload_meta["uploaded_at"],
            }
        except (
            StorageChecksumMismatchError,
            StorageAlreadyExistsError,
            StoragePermissionError,
        ):
            raise
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream object content."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.exists():
            raise StorageNotFoundError(storage_ref)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while chunk := await f.read(self.CHUNK_SIZE):
                    yield chunk
        except Exception as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete object and sidecar, pruning empty parent directories. Returns True if deleted."""
        try:
            file_path = self._get_full_path(storage_ref)
            if not file_path.exists():
                return False
            await aiofiles.os.remove(file_path)
            meta_path = self._meta_path(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
            parent = file_path.parent
            while parent != self.storage_root:
                try:
                    if any(parent.iterdir()):
                        break
                    parent.rmdir()
                except OSError:
                    break
                parent = parent.parent
            return True
        except StoragePermissionError:
            raise
        except Exception as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        try:
            return self._get_full_path(storage_ref).is_file()
        except StoragePermissionError:
            return False

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        """Return size, content_type, checksum, last_modified, custom."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.exists():
            raise StorageNotFoundError(storage_ref)
        stat = file_path.stat()
        stored = await self._read_metadata(file_path)
        return {
            "size": stat.st_size,
            "content_type": stored.get("content_type", "application/octet-stream"),
            "checksum": stored.get("checksum"),
            "last_modified": from_timestamp_utc(stat.st_mtime).isoformat(),
            "custom": stored.get("custom", {}),
        }

    async def generate_download_url(
        self,
        storage_ref: str,
        expiration: timedelta = timedelta(hours=1),
        filename: str | None = None,
    ) -> str:
        """Return temporary download URL backed by a one-process token."""
        if not await self.exists(storage_ref):
            raise StorageNotFoundError(storage_ref)
        self._cleanup_expired_tokens()
        token = secrets.token_urlsafe(32)
        self._download_tokens[token] = DownloadGrant(
            storage_ref=storage_ref,
            expires_at=utc_now() + expiration,
            filename=filename,
        )
        path = f"{DOWNLOAD_PATH}/{token}"
        return f"{self.base_url}{path}" if self.base_url else path

    def _cleanup_expired_tokens(self) -> None:
        now = utc_now()
        for token in [t for t, g in self._download_tokens.items() if g.expires_at <= now]:
            del self._download_tokens[token]

    def validate_download_token(self, token: str) -> DownloadGrant | None:
        """Return the grant if the token is known and not expired."""
        grant = self._download_tokens.get(token)
        if grant is None:
            return None
        if utc_now() >= grant.expires_at:
            del self._download_tokens[token]
            return None
        return grant
