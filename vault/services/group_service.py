"""Group service: create, list, re-parent and delete groups."""

from typing import List, Optional

from common.constants import ROOT_GROUP_ID
from common.logging_config import get_logger
from common.types import GroupListing
from vault.database import MetadataStore
from vault.exceptions import (
    AlreadyExistsError,
    GroupCycleError,
    GroupNotFoundError,
    RootGroupError,
    ValidationError,
)
from vault.repositories.file_repository import FileRepository
from vault.repositories.group_repository import Group, GroupRepository

logger = get_logger(__name__)


class GroupService:
    def __init__(self, store: MetadataStore):
        self.store = store
        self.group_repo = GroupRepository(store)
        self.file_repo = FileRepository(store)

    def resolve(self, name: str) -> Group:
        group = self.group_repo.get_by_name(name)
        if group is None:
            raise GroupNotFoundError(name)
        return group

    def get(self, group_id: int) -> Group:
        group = self.group_repo.get_by_id(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group

    def create(self, name: str, parent_name: Optional[str] = None) -> Group:
        """
        Create a group, optionally under an existing parent.

        Raises:
            ValidationError: empty name
            AlreadyExistsError: name already taken
            GroupNotFoundError: parent name does not resolve
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name must not be empty")

        parent_id = None
        if parent_name:
            parent_id = self.resolve(parent_name).group_id

        if self.group_repo.get_by_name(name) is not None:
            raise AlreadyExistsError(f"A group with the name '{name}' already exists")

        group = self.group_repo.create_group(name, parent_id)
        logger.info(f"Group '{name}' created successfully [group_id={group.group_id}]")
        return group

    def list(self) -> List[GroupListing]:
        return self.group_repo.list_groups()

    def move(self, name: str, new_parent_name: Optional[str] = None) -> Group:
        """
        Re-parent a group. Rejects moves that would make it its own ancestor.
        """
        group = self.resolve(name)
        if group.group_id == ROOT_GROUP_ID:
            raise RootGroupError("The root group cannot be re-parented")

        new_parent_id = None
        if new_parent_name:
            parent = self.resolve(new_parent_name)
            lineage = [parent.group_id] + self.group_repo.get_ancestor_ids(parent.group_id)
            if group.group_id in lineage:
                raise GroupCycleError(
                    f"Moving '{name}' under '{new_parent_name}' would create a cycle"
                )
            new_parent_id = parent.group_id

        self.group_repo.set_parent(group.group_id, new_parent_id)
        group.parent_id = new_parent_id
        return group

    def delete(self, name: str) -> List[int]:
        """
        Delete a group and all of its descendants in one transaction.

        Files attached to any deleted group are moved to the root group.
        The subtree is walked with an explicit stack and a visited set, so a
        corrupted cyclic parent chain still terminates.

        Returns:
            Ids of the deleted groups, descendants before ancestors
        """
        target = self.resolve(name)
        if target.group_id == ROOT_GROUP_ID:
            raise RootGroupError("The root group cannot be deleted")

        with self.store.transaction() as conn:
            order = self._collect_subtree(target.group_id, conn)

            conn.executemany(
                "UPDATE groups SET parent_group_id = NULL WHERE group_id = ?",
                [(group_id,) for group_id in order]
            )

            for group_id in order:
                self.file_repo.reassign_group(group_id, ROOT_GROUP_ID, conn=conn)
                self.group_repo.delete_group(group_id, conn=conn)
                if group_id != target.group_id:
                    logger.info(f"Child group with ID '{group_id}' deleted")

        logger.info(
            f"Group '{name}' and {len(order) - 1} child groups deleted, files reassigned to root"
        )
        return order

    def _collect_subtree(self, group_id: int, conn) -> List[int]:
        """
        Post-order listing of ``group_id`` and its descendants.
        """
        order: List[int] = []
        visited = {group_id}
        stack = [(group_id, False)]

        while stack:
            current, expanded = stack.pop()
            if expanded:
                order.append(current)
                continue

            stack.append((current, True))
            for child_id in reversed(self.group_repo.get_child_ids(current, conn=conn)):
                if child_id in visited or child_id == ROOT_GROUP_ID:
                    continue
                visited.add(child_id)
                stack.append((child_id, False))

        return order
