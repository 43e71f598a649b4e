"""Shared data type definitions (PartDescriptor, FileListing, GroupListing)."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PartDescriptor:
    """
    One stored chunk of a file, in upload order.
    """
    part_id: str
    part_index: int
    size: int


@dataclass(frozen=True)
class FileListing:
    """
    A file row joined with its group name, as shown by searches.
    """
    file_id: int
    name: str
    size: int
    total_parts: int
    group_id: int
    group_name: Optional[str]


@dataclass(frozen=True)
class GroupListing:
    """
    A group row with its parent resolved to a name ("root" when it has none).
    """
    group_id: int
    name: str
    parent_name: str
