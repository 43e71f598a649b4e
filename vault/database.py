"""Database schema and connection management for SQLite."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from common.constants import ROOT_GROUP_ID, ROOT_GROUP_NAME
from common.logging_config import get_logger
from vault.exceptions import StoreError

logger = get_logger(__name__)

SCHEMA = f"""
    CREATE TABLE IF NOT EXISTS groups (
        group_id INTEGER PRIMARY KEY AUTOINCREMENT,
        group_name TEXT UNIQUE NOT NULL CHECK (length(group_name) > 0),
        parent_group_id INTEGER,
        FOREIGN KEY(parent_group_id) REFERENCES groups(group_id)
    );

    CREATE UNIQUE INDEX IF NOT EXISTS idx_group_name ON groups(group_name);
    CREATE INDEX IF NOT EXISTS idx_group_parent ON groups(parent_group_id);

    INSERT OR IGNORE INTO groups (group_id, group_name, parent_group_id)
    VALUES ({ROOT_GROUP_ID}, '{ROOT_GROUP_NAME}', NULL);

    CREATE TABLE IF NOT EXISTS files (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        total_parts INTEGER NOT NULL,
        size INTEGER NOT NULL,
        hash TEXT NOT NULL,
        group_id INTEGER NOT NULL DEFAULT {ROOT_GROUP_ID},
        FOREIGN KEY(group_id) REFERENCES groups(group_id)
    );

    CREATE INDEX IF NOT EXISTS idx_file_search_id ON files(group_id);
    CREATE INDEX IF NOT EXISTS idx_file_search_name ON files(name);

    CREATE TABLE IF NOT EXISTS parts (
        part_id TEXT PRIMARY KEY,
        file_id INTEGER NOT NULL,
        part_index INTEGER NOT NULL,
        size INTEGER NOT NULL,
        UNIQUE(file_id, part_index),
        FOREIGN KEY(file_id) REFERENCES files(id)
    );

    CREATE INDEX IF NOT EXISTS idx_file_id ON parts(file_id);
"""


class MetadataStore:
    """
    Durable storage for groups, files and parts.

    One instance owns the SQLite connection and is passed explicitly to every
    repository and service. Writes go through ``transaction()`` so that a
    multi-statement mutation commits or rolls back as a unit.
    """

    def __init__(self, database_path: Union[str, Path]):
        self.database_path = str(database_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._write_lock = threading.RLock()

    def _connect(self) -> sqlite3.Connection:
        if self.database_path != ":memory:":
            Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.database_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = self._connect()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to open database {self.database_path}: {e}") from e
        return self._conn

    def init(self) -> "MetadataStore":
        """
        Create tables and indexes if they don't exist and seed the root group.
        """
        try:
            self.conn.executescript(SCHEMA)
            self.conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create tables: {e}") from e
        logger.debug(f"Metadata store initialized [path={self.database_path}]")
        return self

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "MetadataStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for a unit of work.

        Commits on success, rolls back on any exception. ``sqlite3.Error`` is
        re-raised as ``StoreError``; vault exceptions pass through untouched.
        """
        conn = self.conn
        with self._write_lock:
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(str(e)) from e
            except BaseException:
                conn.rollback()
                raise
