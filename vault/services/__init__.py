"""Service layer for business logic."""

from vault.services.upload_service import UploadService
from vault.services.download_service import DownloadService
from vault.services.delete_service import DeleteService
from vault.services.group_service import GroupService
from vault.services.file_query_service import FileQueryService

__all__ = [
    "UploadService",
    "DownloadService",
    "DeleteService",
    "GroupService",
    "FileQueryService",
]
