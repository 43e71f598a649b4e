"""Read-only file lookups: search by name substring, exact id or group."""

from typing import List, Optional

from common.constants import LIST_PAGE_SIZE
from common.types import FileListing, PartDescriptor
from vault.database import MetadataStore
from vault.exceptions import FileNotFoundInStoreError, GroupNotFoundError
from vault.repositories.file_repository import File, FileRepository
from vault.repositories.group_repository import GroupRepository
from vault.repositories.part_repository import PartRepository


class FileQueryService:
    def __init__(self, store: MetadataStore, page_size: int = LIST_PAGE_SIZE):
        self.page_size = page_size
        self.file_repo = FileRepository(store)
        self.group_repo = GroupRepository(store)
        self.part_repo = PartRepository(store)

    def search(
        self,
        name_substring: Optional[str] = None,
        file_id: Optional[int] = None,
        group_id: Optional[int] = None,
    ) -> List[FileListing]:
        """
        Files matching every given filter, at most ``page_size`` of them.

        Raises:
            GroupNotFoundError: ``group_id`` is given but does not exist
        """
        if group_id is not None and self.group_repo.get_by_id(group_id) is None:
            raise GroupNotFoundError(group_id)

        return self.file_repo.search(
            name_substring=name_substring,
            file_id=file_id,
            group_id=group_id,
            limit=self.page_size,
        )

    def get(self, file_id: int) -> File:
        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise FileNotFoundInStoreError(file_id)
        return file

    def get_part_descriptors(self, file_id: int) -> List[PartDescriptor]:
        self.get(file_id)
        return [
            PartDescriptor(part_id=part.part_id, part_index=part.part_index, size=part.size)
            for part in self.part_repo.get_parts_by_file(file_id)
        ]
