"""Pydantic schemas for API requests and responses."""

from vault.schemas.common import ErrorResponse
from vault.schemas.files import (
    UploadFileResponse,
    FileListingResponse,
    ListFilesResponse,
)
from vault.schemas.groups import (
    CreateGroupRequest,
    GroupResponse,
    GroupListingResponse,
    ListGroupsResponse,
    DeleteGroupResponse,
)

__all__ = [
    "ErrorResponse",
    "UploadFileResponse",
    "FileListingResponse",
    "ListFilesResponse",
    "CreateGroupRequest",
    "GroupResponse",
    "GroupListingResponse",
    "ListGroupsResponse",
    "DeleteGroupResponse",
]
