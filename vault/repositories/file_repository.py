"""File repository for database operations."""

import sqlite3
from dataclasses import dataclass
from typing import List, Optional

from common.constants import LIST_PAGE_SIZE, ROOT_GROUP_ID
from common.logging_config import get_logger
from common.types import FileListing
from vault.database import MetadataStore
from vault.exceptions import StoreError

logger = get_logger(__name__)


def _escape_like(value: str) -> str:
    # match %, _ and \ literally under ESCAPE '\'
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class File:
    file_id: int
    name: str
    total_parts: int
    size: int
    content_hash: str
    group_id: int


def _row_to_file(row: sqlite3.Row) -> File:
    return File(
        file_id=row["id"],
        name=row["name"],
        total_parts=row["total_parts"],
        size=row["size"],
        content_hash=row["hash"],
        group_id=row["group_id"],
    )


class FileRepository:
    def __init__(self, store: MetadataStore):
        self.store = store

    def create_file(
        self,
        name: str,
        total_parts: int,
        size: int,
        content_hash: str,
        group_id: int = ROOT_GROUP_ID,
        conn=None
    ) -> File:
        if conn is None:
            with self.store.transaction() as conn:
                return self.create_file(name, total_parts, size, content_hash, group_id, conn=conn)

        cursor = conn.execute(
            "INSERT INTO files (name, total_parts, size, hash, group_id) VALUES (?, ?, ?, ?, ?)",
            (name, total_parts, size, content_hash, group_id)
        )
        file_id = cursor.lastrowid
        logger.info(f"Registered file [file_id={file_id}, name={name}, total_parts={total_parts}]")

        return File(
            file_id=file_id,
            name=name,
            total_parts=total_parts,
            size=size,
            content_hash=content_hash,
            group_id=group_id,
        )

    def get_by_id(self, file_id: int, conn=None) -> Optional[File]:
        conn = conn or self.store.conn
        try:
            row = conn.execute(
                "SELECT id, name, total_parts, size, hash, group_id FROM files WHERE id = ?",
                (file_id,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to fetch file {file_id}: {e}") from e
        return _row_to_file(row) if row else None

    def search(
        self,
        name_substring: Optional[str] = None,
        file_id: Optional[int] = None,
        group_id: Optional[int] = None,
        limit: int = LIST_PAGE_SIZE
    ) -> List[FileListing]:
        """
        Find files by name substring, exact id and/or group id.

        Filters that are None are ignored; the rest are combined with AND.
        """
        query = """
            SELECT f.id, f.name, f.size, f.total_parts, f.group_id, g.group_name
            FROM files f
            LEFT JOIN groups g ON f.group_id = g.group_id
            WHERE 1=1
        """
        params: list = []

        if name_substring:
            query += " AND f.name LIKE ? ESCAPE '\\'"
            params.append(f"%{_escape_like(name_substring)}%")
        if file_id is not None:
            query += " AND f.id = ?"
            params.append(file_id)
        if group_id is not None:
            query += " AND f.group_id = ?"
            params.append(group_id)

        query += " ORDER BY f.id LIMIT ?"
        params.append(limit)

        try:
            rows = self.store.conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to search files: {e}") from e

        return [
            FileListing(
                file_id=row["id"],
                name=row["name"],
                size=row["size"],
                total_parts=row["total_parts"],
                group_id=row["group_id"],
                group_name=row["group_name"],
            )
            for row in rows
        ]

    def count_by_group(self, group_id: int) -> int:
        row = self.store.conn.execute(
            "SELECT COUNT(*) AS count FROM files WHERE group_id = ?",
            (group_id,)
        ).fetchone()
        return row["count"]

    def reassign_group(self, from_group_id: int, to_group_id: int = ROOT_GROUP_ID, conn=None) -> int:
        if conn is None:
            with self.store.transaction() as conn:
                return self.reassign_group(from_group_id, to_group_id, conn=conn)

        cursor = conn.execute(
            "UPDATE files SET group_id = ? WHERE group_id = ?",
            (to_group_id, from_group_id)
        )
        if cursor.rowcount:
            logger.info(
                f"Reassigned {cursor.rowcount} files [from_group={from_group_id}, to_group={to_group_id}]"
            )
        return cursor.rowcount

    def delete_file(self, file_id: int, conn=None) -> None:
        if conn is None:
            with self.store.transaction() as conn:
                return self.delete_file(file_id, conn=conn)

        conn.execute("DELETE FROM files WHERE id = ?", (file_id,))
        logger.info(f"Deleted file row [file_id={file_id}]")
