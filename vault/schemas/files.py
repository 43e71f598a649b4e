"""Pydantic schemas for file endpoints."""

from typing import List, Optional

from pydantic import BaseModel


class UploadFileResponse(BaseModel):
    """Response model for file upload."""
    file_id: int
    name: str
    size: int
    total_parts: int
    content_hash: str
    group_id: int


class FileListingResponse(BaseModel):
    """One row of a file search."""
    file_id: int
    name: str
    size: int
    size_display: str
    total_parts: int
    group_id: int
    group_name: Optional[str] = None


class ListFilesResponse(BaseModel):
    """Response model for file search."""
    files: List[FileListingResponse]
