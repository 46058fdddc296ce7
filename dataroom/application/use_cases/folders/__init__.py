"""Folder use cases."""

from dataroom.application.use_cases.folders.folder_service import FolderService

__all__ = ["FolderService"]
