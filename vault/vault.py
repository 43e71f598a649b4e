"""Vault facade: the operations exposed to command-line and HTTP front ends."""

from pathlib import Path
from typing import List, Optional, Union

from common.constants import ROOT_GROUP_ID
from common.types import FileListing, GroupListing
from vault import config
from vault.backends import create_backend
from vault.backends.base import BlobBackend
from vault.database import MetadataStore
from vault.repositories.file_repository import File
from vault.repositories.group_repository import Group
from vault.services.delete_service import DeleteService
from vault.services.download_service import DownloadService
from vault.services.file_query_service import FileQueryService
from vault.services.group_service import GroupService
from vault.services.upload_service import UploadService


class Vault:
    """
    Binds one metadata store and one blob backend to the vault services.

    Usage:
        with Vault(MetadataStore("data/db.sqlite3").init(), LocalBlobBackend("data/blobs")) as vault:
            math = vault.create_group("Math")
            file = vault.upload("book.pdf", math.group_id)
            vault.download(file.file_id, "book-copy.pdf")
    """

    def __init__(
        self,
        store: MetadataStore,
        backend: BlobBackend,
        chunk_size: int = config.CHUNK_SIZE,
        output_dir: str = config.OUTPUT_DIR,
        staging_dir: Optional[str] = config.STAGING_DIR,
        transfer_workers: int = config.TRANSFER_WORKERS,
        verify_downloads: bool = config.VERIFY_DOWNLOADS,
    ):
        self.store = store
        self.backend = backend
        self.uploads = UploadService(
            store, backend,
            chunk_size=chunk_size,
            staging_dir=staging_dir,
            transfer_workers=transfer_workers,
        )
        self.downloads = DownloadService(
            store, backend,
            output_dir=output_dir,
            transfer_workers=transfer_workers,
            verify=verify_downloads,
        )
        self.deletes = DeleteService(store, backend)
        self.groups = GroupService(store)
        self.files = FileQueryService(store)

    @classmethod
    def from_config(cls) -> "Vault":
        """
        Build a vault from the VAULT_* environment settings.
        """
        store = MetadataStore(config.DATABASE_PATH).init()
        return cls(store, create_backend())

    def close(self) -> None:
        self.backend.close()
        self.store.close()

    def __enter__(self) -> "Vault":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def upload(self, path: Union[str, Path], group_id: int = ROOT_GROUP_ID) -> File:
        return self.uploads.upload(path, group_id)

    def download(self, file_id: int, output_name: Optional[str] = None, verify: Optional[bool] = None) -> Path:
        return self.downloads.download(file_id, output_name, verify=verify)

    def delete(self, file_id: int) -> None:
        self.deletes.delete(file_id)

    def create_group(self, name: str, parent: Optional[str] = None) -> Group:
        return self.groups.create(name, parent)

    def delete_group(self, name: str) -> List[int]:
        return self.groups.delete(name)

    def move_group(self, name: str, new_parent: Optional[str] = None) -> Group:
        return self.groups.move(name, new_parent)

    def list_groups(self) -> List[GroupListing]:
        return self.groups.list()

    def search_files(
        self,
        name_substring: Optional[str] = None,
        file_id: Optional[int] = None,
        group_id: Optional[int] = None,
    ) -> List[FileListing]:
        return self.files.search(name_substring=name_substring, file_id=file_id, group_id=group_id)
