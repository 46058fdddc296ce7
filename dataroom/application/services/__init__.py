"""Application services shared by use cases."""

from dataroom.application.services.breadcrumb_builder import (
    BreadcrumbBuilder,
    build_tree,
    collect_subtree_ids,
)
from dataroom.application.services.ownership_resolver import OwnershipResolver
from dataroom.application.services.storage_cleanup import StorageCleanup

__all__ = [
    "BreadcrumbBuilder",
    "OwnershipResolver",
    "StorageCleanup",
    "build_tree",
    "collect_subtree_ids",
]
