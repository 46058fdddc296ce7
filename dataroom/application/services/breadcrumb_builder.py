"""Breadcrumb and folder-tree construction over parent pointers.

Both traversals terminate on corrupted data: the breadcrumb walk fails
fast with HierarchyCycleException, and the tree builder drops nodes whose
ancestry never reaches a root.
"""

from __future__ import annotations

import logging

from dataroom.application.dtos.folder import BreadcrumbItem, FolderResult, FolderTreeNode
from dataroom.application.interfaces.repositories import IFolderRepository
from dataroom.domain.exceptions import HierarchyCycleException, ResourceNotFoundException

logger = logging.getLogger(__name__)


class BreadcrumbBuilder:
    """Builds the root-to-folder path for a folder. No caching."""

    def __init__(self, folder_repo: IFolderRepository, max_depth: int = 64) -> None:
        self.folder_repo = folder_repo
        self.max_depth = max_depth

    async def build(self, folder_id: str) -> list[BreadcrumbItem]:
        """Return [root, ..., folder] (inclusive).

        Raises:
            ResourceNotFoundException: Start folder does not exist.
            HierarchyCycleException: An id repeats, a parent is missing,
                or the path is longer than max_depth.
        """
        folder = await self.folder_repo.get_by_id(folder_id)
        if folder is None:
            raise ResourceNotFoundException("folder", folder_id)
        path = [BreadcrumbItem(id=folder.id, name=folder.name)]
        visited = {folder.id}
        current = folder
        while current.parent_id is not None:
            if len(path) >= self.max_depth:
                logger.error("Breadcrumb for %s exceeds max depth %d", folder_id, self.max_depth)
                raise HierarchyCycleException(folder_id, "depth_exceeded")
            if current.parent_id in visited:
                logger.error("Breadcrumb for %s revisits folder %s", folder_id, current.parent_id)
                raise HierarchyCycleException(folder_id, "cycle")
            parent = await self.folder_repo.get_by_id(current.parent_id)
            if parent is None:
                logger.error(
                    "Breadcrumb for %s hits dangling parent %s", folder_id, current.parent_id
                )
                raise HierarchyCycleException(folder_id, "dangling_parent")
            visited.add(parent.id)
            path.append(BreadcrumbItem(id=parent.id, name=parent.name))
            current = parent
        path.reverse()
        return path


def build_tree(folders: list[FolderResult]) -> list[FolderTreeNode]:
    """Assemble a nested tree from a flat folder listing.

    Children keep the order of the input list. Nodes whose parent chain
    never reaches a root (cycle or parent outside the listing) are omitted.
    """
    nodes = {f.id: FolderTreeNode(id=f.id, name=f.name, parent_id=f.parent_id) for f in folders}
    roots: list[FolderTreeNode] = []
    for f in folders:
        node = nodes[f.id]
        if f.parent_id is None:
            roots.append(node)
        elif f.parent_id in nodes:
            nodes[f.parent_id].children.append(node)

    reachable: set[str] = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node.id in reachable:
            continue
        reachable.add(node.id)
        stack.extend(node.children)

    orphaned = set(nodes) - reachable
    if orphaned:
        logger.warning(
            "Folder tree omits %d folder(s) not reachable from a root: %s",
            len(orphaned),
            sorted(orphaned),
        )
    return roots


def collect_subtree_ids(folders: list[FolderResult], root_id: str, max_depth: int = 64) -> list[str]:
    """Return root_id and the ids of all its descendants (breadth-first, cycle-safe)."""
    children: dict[str, list[str]] = {}
    for f in folders:
        if f.parent_id is not None:
            children.setdefault(f.parent_id, []).append(f.id)
    result = [root_id]
    seen = {root_id}
    frontier = [root_id]
    depth = 0
    while frontier and depth < max_depth:
        depth += 1
        nxt: list[str] = []
        for fid in frontier:
            for child in children.get(fid, []):
                if child not in seen:
                    seen.add(child)
                    result.append(child)
                    nxt.append(child)
        frontier = nxt
    if frontier and any(children.get(fid) for fid in frontier):
        logger.warning("Subtree of %s truncated at depth %d", root_id, max_depth)
    return result
