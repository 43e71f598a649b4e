"""File operation API routes."""

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import StreamingResponse

from common.constants import ROOT_GROUP_ID
from vault.dependencies import get_vault
from vault.schemas.files import FileListingResponse, ListFilesResponse, UploadFileResponse
from vault.utils import format_bytes
from vault.vault import Vault

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=UploadFileResponse, status_code=status.HTTP_201_CREATED)
def upload_file(
    file: UploadFile = File(...),
    group_id: int = Form(ROOT_GROUP_ID),
    vault: Vault = Depends(get_vault),
):
    """
    Upload a file into a group.

    Parameters:
        - file: File to upload (multipart/form-data)
        - group_id: Target group id (defaults to the root group)

    Raises:
        - 404: Group not found
        - 502: Blob backend failure
    """
    with tempfile.TemporaryDirectory(prefix="vault-upload-", dir=vault.uploads.staging_dir) as tmpdir:
        source = Path(tmpdir) / "source"
        with open(source, "wb") as out:
            shutil.copyfileobj(file.file, out)

        stored = vault.uploads.upload(source, group_id, name=file.filename or "upload")

    return UploadFileResponse(
        file_id=stored.file_id,
        name=stored.name,
        size=stored.size,
        total_parts=stored.total_parts,
        content_hash=stored.content_hash,
        group_id=stored.group_id,
    )


@router.get("", response_model=ListFilesResponse)
def list_files(
    search: Optional[str] = Query(None, description="Substring of the file name"),
    file_id: Optional[int] = Query(None, alias="id"),
    group_id: Optional[int] = Query(None, alias="group"),
    vault: Vault = Depends(get_vault),
):
    """
    Search files by name substring, exact id and/or group id (first 50 matches).
    """
    files = vault.search_files(name_substring=search, file_id=file_id, group_id=group_id)

    return ListFilesResponse(
        files=[
            FileListingResponse(
                file_id=f.file_id,
                name=f.name,
                size=f.size,
                size_display=format_bytes(f.size),
                total_parts=f.total_parts,
                group_id=f.group_id,
                group_name=f.group_name,
            )
            for f in files
        ]
    )


@router.get("/{file_id}/download")
def download_file(file_id: int, vault: Vault = Depends(get_vault)):
    """
    Stream a file's reassembled contents.

    Raises:
        - 404: File not found
    """
    file, content_length, chunks = vault.downloads.stream_file(file_id)

    return StreamingResponse(
        chunks,
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": f'attachment; filename="{file.name}"',
            "Content-Length": str(content_length),
        }
    )


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(file_id: int, vault: Vault = Depends(get_vault)):
    """
    Delete a file and all of its parts.

    Raises:
        - 404: File not found, or one of its parts is missing from the backend
        - 502: Blob backend failed on one part (earlier parts are already gone)
    """
    vault.delete(file_id)
