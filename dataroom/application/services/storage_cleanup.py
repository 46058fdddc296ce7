"""Best-effort release of storage objects after metadata rows are deleted.

Metadata is the source of truth: a failed release leaves an orphaned
object (logged) and never undoes the delete that preceded it.
"""

from __future__ import annotations

import logging

from dataroom.application.interfaces.repositories import IFileRepository
from dataroom.application.interfaces.services import IStorageService

logger = logging.getLogger(__name__)


class StorageCleanup:
    """Releases storage objects that no file row references any more."""

    def __init__(self, storage: IStorageService, file_repo: IFileRepository) -> None:
        self.storage = storage
        self.file_repo = file_repo

    async def release_unreferenced(self, storage_refs: set[str]) -> int:
        """Delete the objects in storage_refs that no remaining file row points at.

        Returns the number of objects actually removed.
        """
        if not storage_refs:
            return 0
        orphaned = await self.file_repo.unreferenced_storage_refs(set(storage_refs))
        kept = len(storage_refs) - len(orphaned)
        if kept:
            logger.debug("Keeping %d storage object(s) still referenced by duplicates", kept)
        released = 0
        for ref in sorted(orphaned):
            if await self.release(ref):
                released += 1
        return released

    async def release(self, storage_ref: str) -> bool:
        """Delete one object without a reference check. Failures are logged, not raised."""
        try:
            return await self.storage.delete(storage_ref)
        except Exception:
            logger.warning(
                "Storage release failed; object left orphaned: %s",
                storage_ref,
                exc_info=True,
            )
            return False
