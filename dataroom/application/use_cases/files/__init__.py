"""File use cases."""

from dataroom.application.use_cases.files.file_service import FileService
from dataroom.application.use_cases.files.upload import FileUploadService

__all__ = ["FileService", "FileUploadService"]
