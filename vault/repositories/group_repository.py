"""Group repository for database operations."""

import sqlite3
from dataclasses import dataclass
from typing import List, Optional

from common.constants import ROOT_PARENT_LABEL
from common.logging_config import get_logger
from common.types import GroupListing
from vault.database import MetadataStore
from vault.exceptions import AlreadyExistsError, GroupNotFoundError, StoreError

logger = get_logger(__name__)


@dataclass
class Group:
    group_id: int
    name: str
    parent_id: Optional[int]


def _row_to_group(row: sqlite3.Row) -> Group:
    return Group(
        group_id=row["group_id"],
        name=row["group_name"],
        parent_id=row["parent_group_id"],
    )


class GroupRepository:
    def __init__(self, store: MetadataStore):
        self.store = store

    def create_group(self, name: str, parent_id: Optional[int] = None, conn=None) -> Group:
        if conn is None:
            with self.store.transaction() as conn:
                return self.create_group(name, parent_id, conn=conn)

        try:
            cursor = conn.execute(
                "INSERT INTO groups (group_name, parent_group_id) VALUES (?, ?)",
                (name, parent_id)
            )
        except sqlite3.IntegrityError as e:
            if "UNIQUE constraint failed" in str(e):
                raise AlreadyExistsError(
                    f"A group with the name '{name}' already exists"
                ) from e
            if "FOREIGN KEY constraint failed" in str(e):
                raise GroupNotFoundError(parent_id) from e
            raise

        logger.info(f"Created group [name={name}, parent_id={parent_id}]")
        return Group(group_id=cursor.lastrowid, name=name, parent_id=parent_id)

    def get_by_name(self, name: str, conn=None) -> Optional[Group]:
        conn = conn or self.store.conn
        try:
            row = conn.execute(
                "SELECT group_id, group_name, parent_group_id FROM groups WHERE group_name = ?",
                (name,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to fetch group '{name}': {e}") from e
        return _row_to_group(row) if row else None

    def get_by_id(self, group_id: int, conn=None) -> Optional[Group]:
        conn = conn or self.store.conn
        try:
            row = conn.execute(
                "SELECT group_id, group_name, parent_group_id FROM groups WHERE group_id = ?",
                (group_id,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to fetch group {group_id}: {e}") from e
        return _row_to_group(row) if row else None

    def list_groups(self) -> List[GroupListing]:
        try:
            rows = self.store.conn.execute(
                """
                SELECT g.group_id, g.group_name, pg.group_name AS parent_group_name
                FROM groups g
                LEFT JOIN groups pg ON g.parent_group_id = pg.group_id
                ORDER BY g.group_id
                """
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list groups: {e}") from e

        return [
            GroupListing(
                group_id=row["group_id"],
                name=row["group_name"],
                parent_name=row["parent_group_name"] or ROOT_PARENT_LABEL,
            )
            for row in rows
        ]

    def get_child_ids(self, group_id: int, conn=None) -> List[int]:
        conn = conn or self.store.conn
        rows = conn.execute(
            "SELECT group_id FROM groups WHERE parent_group_id = ? ORDER BY group_id",
            (group_id,)
        ).fetchall()
        return [row["group_id"] for row in rows]

    def get_ancestor_ids(self, group_id: int, conn=None) -> List[int]:
        """
        Walk parent links upward from ``group_id`` (exclusive).

        Stops at the first repeated id, so a corrupted cyclic chain terminates.
        """
        conn = conn or self.store.conn
        ancestors: List[int] = []
        seen = {group_id}
        current = self.get_by_id(group_id, conn=conn)
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            ancestors.append(current.parent_id)
            seen.add(current.parent_id)
            current = self.get_by_id(current.parent_id, conn=conn)
        return ancestors

    def set_parent(self, group_id: int, parent_id: Optional[int], conn=None) -> None:
        if conn is None:
            with self.store.transaction() as conn:
                return self.set_parent(group_id, parent_id, conn=conn)

        conn.execute(
            "UPDATE groups SET parent_group_id = ? WHERE group_id = ?",
            (parent_id, group_id)
        )
        logger.info(f"Re-parented group [group_id={group_id}, parent_id={parent_id}]")

    def delete_group(self, group_id: int, conn=None) -> None:
        if conn is None:
            with self.store.transaction() as conn:
                return self.delete_group(group_id, conn=conn)

        conn.execute("DELETE FROM groups WHERE group_id = ?", (group_id,))
        logger.debug(f"Deleted group row [group_id={group_id}]")
