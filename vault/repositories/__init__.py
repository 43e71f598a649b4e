"""Repository layer for data access."""

from vault.repositories.group_repository import Group, GroupRepository
from vault.repositories.file_repository import File, FileRepository
from vault.repositories.part_repository import Part, PartRepository

__all__ = [
    "Group",
    "GroupRepository",
    "File",
    "FileRepository",
    "Part",
    "PartRepository",
]
