"""Folder use cases: create, get, rename, move, delete, contents, duplicate, breadcrumb, tree."""

from __future__ import annotations

import logging

from dataroom.application.dtos.file import FileCreate
from dataroom.application.dtos.folder import (
    Breadcrumb,
    FolderContents,
    FolderCreate,
    FolderResult,
    FolderTreeNode,
)
from dataroom.application.interfaces.repositories import (
    IFileRepository,
    IFolderRepository,
)
from dataroom.application.services.breadcrumb_builder import (
    BreadcrumbBuilder,
    build_tree,
    collect_subtree_ids,
)
from dataroom.application.services.ownership_resolver import OwnershipResolver
from dataroom.application.services.storage_cleanup import StorageCleanup
from dataroom.application.use_cases.common import require_name
from dataroom.domain.enums import SortField, SortOrder
from dataroom.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from dataroom.domain.value_objects import FOLDER_NAME_MAX, EntityName
from dataroom.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

_SCOPE = "this location"


def _subtree_height(folders: list[FolderResult], root_id: str, max_depth: int) -> int:
    """Number of levels in the subtree rooted at root_id (1 for a leaf)."""
    children: dict[str, list[str]] = {}
    for f in folders:
        if f.parent_id is not None:
            children.setdefault(f.parent_id, []).append(f.id)
    height = 0
    frontier = [root_id]
    seen = {root_id}
    while frontier and height <= max_depth:
        height += 1
        nxt = []
        for fid in frontier:
            for child in children.get(fid, []):
                if child not in seen:
                    seen.add(child)
                    nxt.append(child)
        frontier = nxt
    return height


class FolderService:
    """Folders inside data rooms the caller owns.

    Mutations run in the order: authorize, validate, sibling-uniqueness
    check, mutate. The store's unique indexes back the uniqueness check,
    so a concurrent insert that slips past it still surfaces as a conflict.
    """

    def __init__(
        self,
        folder_repo: IFolderRepository,
        file_repo: IFileRepository,
        resolver: OwnershipResolver,
        breadcrumbs: BreadcrumbBuilder,
        cleanup: StorageCleanup,
        max_depth: int = 64,
    ) -> None:
        self.folder_repo = folder_repo
        self.file_repo = file_repo
        self.resolver = resolver
        self.breadcrumbs = breadcrumbs
        self.cleanup = cleanup
        self.max_depth = max_depth

    async def _parent_in_room(self, parent_id: str, data_room_id: str) -> FolderResult:
        """Return the parent folder; a folder from another room is reported as not found."""
        parent = await self.folder_repo.get_by_id(parent_id)
        if parent is None or parent.data_room_id != data_room_id:
            raise ResourceNotFoundException("folder", parent_id)
        return parent

    async def _with_counts(self, folder_id: str) -> FolderResult:
        folder = await self.folder_repo.get_with_counts(folder_id)
        if folder is None:
            raise ResourceNotFoundException("folder", folder_id)
        return folder

    async def create(
        self,
        user_id: str,
        name: str,
        data_room_id: str,
        parent_id: str | None = None,
    ) -> FolderResult:
        room = await self.resolver.require_data_room(user_id, data_room_id)
        if parent_id is not None:
            await self._parent_in_room(parent_id, room.id)
        folder_name = require_name(name, FOLDER_NAME_MAX).value
        if parent_id is not None:
            depth = len(await self.breadcrumbs.build(parent_id)) + 1
            if depth > self.max_depth:
                raise ValidationException(
                    f"Folders can be nested at most {self.max_depth} levels deep",
                    field="parentId",
                )
        if await self.folder_repo.exists_sibling(room.id, parent_id, folder_name):
            raise ConflictException("folder", folder_name, _SCOPE)
        folder = await self.folder_repo.create_folder(
            FolderCreate(
                name=folder_name,
                data_room_id=room.id,
                parent_id=parent_id,
                owner_id=user_id,
            )
        )
        logger.info("Folder %s created in room %s by %s", folder.id, room.id, user_id)
        return folder

    async def get(self, user_id: str, folder_id: str) -> FolderResult:
        await self.resolver.require_folder(user_id, folder_id)
        return await self._with_counts(folder_id)

    async def rename(self, user_id: str, folder_id: str, name: str) -> FolderResult:
        """Rename; renaming to the current name succeeds without touching the store."""
        folder = await self.resolver.require_folder(user_id, folder_id)
        new_name = require_name(name, FOLDER_NAME_MAX).value
        if new_name != folder.name:
            if await self.folder_repo.exists_sibling(
                folder.data_room_id, folder.parent_id, new_name, exclude_id=folder.id
            ):
                raise ConflictException("folder", new_name, _SCOPE)
            await self.folder_repo.rename(folder.id, new_name)
        return await self._with_counts(folder.id)

    async def move(
        self, user_id: str, folder_id: str, new_parent_id: str | None
    ) -> FolderResult:
        """Re-parent a folder within its room (None moves it to the room's root level).

        The target must not be the folder itself or one of its descendants.
        The room is locked before the ancestry is read, so two crossing moves
        cannot both pass the descendant check.
        """
        folder = await self.resolver.require_folder(user_id, folder_id)
        await self.folder_repo.lock_room_hierarchy(folder.data_room_id)
        folder = await self._with_counts(folder.id)
        if new_parent_id == folder.parent_id:
            return folder
        target_depth = 0
        if new_parent_id is not None:
            if new_parent_id == folder.id:
                raise ValidationException(
                    "A folder cannot be moved into itself", field="parentId"
                )
            await self._parent_in_room(new_parent_id, folder.data_room_id)
            path = await self.breadcrumbs.build(new_parent_id)
            if any(item.id == folder.id for item in path):
                raise ValidationException(
                    "A folder cannot be moved into one of its subfolders",
                    field="parentId",
                )
            target_depth = len(path)
        room_folders = await self.folder_repo.list_by_room(folder.data_room_id)
        height = _subtree_height(room_folders, folder.id, self.max_depth)
        if target_depth + height > self.max_depth:
            raise ValidationException(
                f"Folders can be nested at most {self.max_depth} levels deep",
                field="parentId",
            )
        if await self.folder_repo.exists_sibling(
            folder.data_room_id, new_parent_id, folder.name, exclude_id=folder.id
        ):
            raise ConflictException("folder", folder.name, _SCOPE)
        await self.folder_repo.move(folder.id, new_parent_id)
        logger.info("Folder %s moved under %s by %s", folder.id, new_parent_id, user_id)
        return await self._with_counts(folder.id)

    async def delete(self, user_id: str, folder_id: str) -> None:
        """Delete the folder and its subtree, then release unreferenced storage objects."""
        folder = await self.resolver.require_folder(user_id, folder_id)
        room_folders = await self.folder_repo.list_by_room(folder.data_room_id)
        subtree = collect_subtree_ids(room_folders, folder.id, self.max_depth)
        refs = await self.file_repo.storage_refs_for_folders(subtree)
        await self.folder_repo.delete_by_id(folder.id)
        released = await self.cleanup.release_unreferenced(refs)
        logger.info(
            "Folder %s deleted by %s (%d folder(s), %d storage object(s) released)",
            folder.id,
            user_id,
            len(subtree),
            released,
        )

    async def contents(
        self,
        user_id: str,
        folder_id: str,
        *,
        include_files: bool = True,
        sort: SortField = SortField.NAME,
        order: SortOrder = SortOrder.ASC,
    ) -> FolderContents:
        """Immediate child folders (with counts) and files; default case-insensitive name order."""
        folder = await self.resolver.require_folder(user_id, folder_id)
        current = await self._with_counts(folder.id)
        children = await self.folder_repo.list_children(
            folder.data_room_id, folder.id, sort, order
        )
        files = (
            await self.file_repo.list_by_folder(folder.id, sort, order)
            if include_files
            else []
        )
        return FolderContents(folder=current, children=children, files=files)

    async def duplicate(self, user_id: str, folder_id: str) -> FolderResult:
        """Copy the folder and its subtree next to the original as '<name> (Copy)'.

        Copied file rows point at the same storage objects as the originals.
        """
        folder = await self.resolver.require_folder(user_id, folder_id)
        copy_name = EntityName(folder.name, FOLDER_NAME_MAX).copy_name().value
        if await self.folder_repo.exists_sibling(
            folder.data_room_id, folder.parent_id, copy_name
        ):
            raise ConflictException("folder", copy_name, _SCOPE)

        room_folders = await self.folder_repo.list_by_room(folder.data_room_id)
        by_id = {f.id: f for f in room_folders}
        subtree = collect_subtree_ids(room_folders, folder.id, self.max_depth)
        id_map = {fid: generate_cuid() for fid in subtree}

        for fid in subtree:
            source = by_id.get(fid, folder)
            is_root = fid == folder.id
            await self.folder_repo.create_folder(
                FolderCreate(
                    id=id_map[fid],
                    name=copy_name if is_root else source.name,
                    data_room_id=folder.data_room_id,
                    parent_id=folder.parent_id if is_root else id_map[source.parent_id],
                    owner_id=user_id,
                )
            )

        files = await self.file_repo.list_by_folders(subtree)
        await self.file_repo.create_files(
            [
                FileCreate(
                    id=generate_cuid(),
                    name=f.name,
                    mime_type=f.mime_type,
                    file_size=f.file_size,
                    checksum=f.checksum,
                    storage_ref=f.storage_ref,
                    folder_id=id_map[f.folder_id],
                    data_room_id=folder.data_room_id,
                    owner_id=user_id,
                )
                for f in files
            ]
        )
        logger.info(
            "Folder %s duplicated as %s by %s (%d folder(s), %d file(s))",
            folder.id,
            id_map[folder.id],
            user_id,
            len(subtree),
            len(files),
        )
        return await self._with_counts(id_map[folder.id])

    async def breadcrumb(self, user_id: str, folder_id: str) -> Breadcrumb:
        folder = await self.resolver.require_folder(user_id, folder_id)
        room = await self.resolver.require_data_room(user_id, folder.data_room_id)
        items = await self.breadcrumbs.build(folder.id)
        return Breadcrumb(data_room_id=room.id, data_room_name=room.name, items=items)

    async def tree(self, user_id: str, data_room_id: str) -> list[FolderTreeNode]:
        room = await self.resolver.require_data_room(user_id, data_room_id)
        return build_tree(await self.folder_repo.list_by_room(room.id))
