"""Upload coordinator: validate, store the object, then record its metadata."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
from typing import BinaryIO

from dataroom.application.dtos.file import FileCreate, FileResult
from dataroom.application.interfaces.repositories import IFileRepository
from dataroom.application.interfaces.services import IStorageService
from dataroom.application.services.ownership_resolver import OwnershipResolver
from dataroom.application.services.storage_cleanup import StorageCleanup
from dataroom.domain.exceptions import ConflictException, ValidationException
from dataroom.domain.value_objects import FILE_NAME_MAX
from dataroom.application.exceptions import StorageUploadError
from dataroom.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def _rewind_if_seekable(file_data: BinaryIO) -> None:
    """Reset file position to start if stream is seekable."""
    if getattr(file_data, "seekable", lambda: False)():
        file_data.seek(0)


def sanitize_filename(filename: str | None) -> str:
    """Strip path components, NUL bytes and surrounding dots/spaces from a client filename.

    Raises ValidationException if nothing usable remains or it is longer than 255 characters.
    """
    name = os.path.basename((filename or "").replace("\\", "/"))
    name = name.replace("\x00", "").strip(". ")
    if not name:
        raise ValidationException("File name is empty or invalid", field="name")
    if len(name) > FILE_NAME_MAX:
        raise ValidationException(
            f"File name must be at most {FILE_NAME_MAX} characters", field="name"
        )
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in name):
        raise ValidationException("File name must not contain control characters", field="name")
    return name


def normalize_mime_type(content_type: str | None) -> str:
    """Lower-case media type without parameters (e.g. '; charset=...')."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def mime_type_allowed(mime_type: str, allowed: frozenset[str]) -> bool:
    """Match against an allow-list supporting '*/*' and 'type/*' entries."""
    if not mime_type or "/" not in mime_type:
        return False
    if "*/*" in allowed or mime_type in allowed:
        return True
    major = mime_type.split("/", 1)[0]
    return f"{major}/*" in allowed


def _compute_checksum_and_size_sync(file_data: BinaryIO) -> tuple[str, int]:
    """Blocking: one pass over file_data (run in a worker thread). Returns (hexdigest, byte_count)."""
    _rewind_if_seekable(file_data)
    sha256 = hashlib.sha256()
    total = 0
    while chunk := file_data.read(65536):
        sha256.update(chunk)
        total += len(chunk)
    _rewind_if_seekable(file_data)
    return sha256.hexdigest(), total


class FileUploadService:
    """Stores an uploaded file under an owned folder and records its metadata.

    The object is written before the metadata row. When the row cannot be
    inserted because a concurrent upload took the name, the freshly written
    object is released again (best-effort) and the caller gets a conflict.
    """

    def __init__(
        self,
        storage: IStorageService,
        file_repo: IFileRepository,
        resolver: OwnershipResolver,
        cleanup: StorageCleanup,
        *,
        max_upload_size: int,
        allowed_mime_types: frozenset[str],
    ) -> None:
        self.storage = storage
        self.file_repo = file_repo
        self.resolver = resolver
        self.cleanup = cleanup
        self.max_upload_size = max_upload_size
        self.allowed_mime_types = allowed_mime_types

    @staticmethod
    def storage_ref_for(data_room_id: str, file_id: str, safe_name: str) -> str:
        return f"rooms/{data_room_id}/files/{file_id}/{safe_name}"

    async def upload(
        self,
        file_data: BinaryIO,
        declared_name: str | None,
        content_type: str | None,
        target_folder_id: str,
        user_id: str,
    ) -> FileResult:
        folder = await self.resolver.require_folder(user_id, target_folder_id)
        name = sanitize_filename(declared_name)

        mime_type = normalize_mime_type(content_type)
        if not mime_type_allowed(mime_type, self.allowed_mime_types):
            raise ValidationException(
                f"File type not allowed: {mime_type or 'unknown'}", field="file"
            )

        checksum, size = await asyncio.to_thread(_compute_checksum_and_size_sync, file_data)
        if size == 0:
            raise ValidationException("File is empty", field="file")
        if size > self.max_upload_size:
            raise ValidationException(
                f"File exceeds maximum size of {self.max_upload_size} bytes",
                field="file",
            )

        if await self.file_repo.exists_in_folder(folder.id, name):
            raise ConflictException("file", name, "this folder")

        file_id = generate_cuid()
        storage_ref = self.storage_ref_for(folder.data_room_id, file_id, name)
        try:
            await self.storage.upload(
                file_data=file_data,
                storage_ref=storage_ref,
                expected_checksum=checksum,
                content_type=mime_type,
                metadata={"file_id": file_id, "data_room_id": folder.data_room_id},
            )
        except StorageUploadError:
            logger.error("Storage upload failed for %s", storage_ref)
            raise
        except Exception as e:
            logger.error("Storage upload failed for %s: %s", storage_ref, type(e).__name__)
            raise StorageUploadError(storage_ref, str(e)) from e

        try:
            created = await self.file_repo.create_file(
                FileCreate(
                    id=file_id,
                    name=name,
                    mime_type=mime_type,
                    file_size=size,
                    checksum=checksum,
                    storage_ref=storage_ref,
                    folder_id=folder.id,
                    data_room_id=folder.data_room_id,
                    owner_id=user_id,
                )
            )
        except ConflictException:
            logger.info("Upload of %r lost a name race in folder %s", name, folder.id)
            await self.cleanup.release(storage_ref)
            raise
        logger.info(
            "File %s uploaded to folder %s by %s (%d bytes)", created.id, folder.id, user_id, size
        )
        return created
