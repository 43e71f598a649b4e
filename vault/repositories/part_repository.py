"""Part repository for database operations."""

import sqlite3
from dataclasses import dataclass
from typing import List

from common.logging_config import get_logger
from vault.database import MetadataStore
from vault.exceptions import StoreError

logger = get_logger(__name__)


@dataclass
class Part:
    part_id: str
    file_id: int
    part_index: int
    size: int


class PartRepository:
    def __init__(self, store: MetadataStore):
        self.store = store

    def create_parts(self, parts: List[Part], conn=None) -> None:
        if not parts:
            return

        if conn is None:
            with self.store.transaction() as conn:
                return self.create_parts(parts, conn=conn)

        logger.debug(f"Inserting {len(parts)} parts for file_id={parts[0].file_id}")
        conn.executemany(
            "INSERT INTO parts (part_id, file_id, part_index, size) VALUES (?, ?, ?, ?)",
            [(part.part_id, part.file_id, part.part_index, part.size) for part in parts]
        )
        logger.info(f"Inserted {len(parts)} parts [file_id={parts[0].file_id}]")

    def get_parts_by_file(self, file_id: int) -> List[Part]:
        """
        Return the parts of a file in upload order.
        """
        try:
            rows = self.store.conn.execute(
                """
                SELECT part_id, file_id, part_index, size
                FROM parts
                WHERE file_id = ?
                ORDER BY part_index
                """,
                (file_id,)
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to query parts for file {file_id}: {e}") from e

        return [
            Part(
                part_id=row["part_id"],
                file_id=row["file_id"],
                part_index=row["part_index"],
                size=row["size"],
            )
            for row in rows
        ]

    def get_part_ids(self, file_id: int) -> List[str]:
        return [part.part_id for part in self.get_parts_by_file(file_id)]

    def count_by_file(self, file_id: int) -> int:
        row = self.store.conn.execute(
            "SELECT COUNT(*) AS count FROM parts WHERE file_id = ?",
            (file_id,)
        ).fetchone()
        return row["count"]

    def delete_part(self, part_id: str, conn=None) -> None:
        if conn is None:
            with self.store.transaction() as conn:
                return self.delete_part(part_id, conn=conn)

        conn.execute("DELETE FROM parts WHERE part_id = ?", (part_id,))
        logger.debug(f"Deleted part row [part_id={part_id}]")
