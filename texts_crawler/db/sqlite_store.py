"""
SQLite sink for scraped texts.

Write-only ingestion store: the table is created once and rows are inserted,
never updated or deleted.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from typing import Literal

from texts_crawler.crawl.base import TextRecord

logger = logging.getLogger(__name__)

CreationMode = Literal["create", "open"]

_SCHEMA = """
CREATE TABLE IF NOT EXISTS texts (
    id INTEGER PRIMARY KEY,
    text TEXT,
    type TEXT,
    author TEXT,
    source TEXT
)
"""

_INSERT = "INSERT INTO texts (id, text, type, author, source) VALUES (?, ?, ?, ?, ?)"


class StorageError(RuntimeError):
    """A database operation failed."""


class DuplicateRecordError(StorageError):
    """A row with the same id is already stored."""


class DatabaseExistsError(FileExistsError):
    """Create mode was requested but something already exists at the path."""


class TextsDB:
    """Single-file SQLite store holding the ``texts`` table.

    mode="create" fails if anything already exists at path.
    mode="open" opens or creates the file.
    """

    def __init__(self, path: str, *, mode: CreationMode = "create") -> None:
        if mode not in ("create", "open"):
            raise ValueError(f"unknown creation mode: {mode!r}")
        if mode == "create" and os.path.lexists(path):
            raise DatabaseExistsError(f"file exists at {path}")

        self.path = path
        try:
            self._conn = sqlite3.connect(path)
        except sqlite3.Error as exc:
            raise StorageError(f"failed to open db {path}: {exc}") from exc
        logger.debug("Opened texts db", extra={"path": path, "mode": mode})

    def create_schema(self) -> None:
        try:
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as exc:
            raise StorageError(f"executing schema statement failed: {exc}") from exc

    def insert(self, record: TextRecord) -> None:
        """Insert one record and commit.

        Raises:
            DuplicateRecordError: if a row with record.id already exists
            StorageError: on any other write failure
        """
        try:
            with self._conn:
                self._conn.execute(
                    _INSERT,
                    (record.id, record.text, record.type, record.author, record.source),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateRecordError(f"text {record.id} already stored: {exc}") from exc
        except sqlite3.Error as exc:
            raise StorageError(f"failed to insert text {record.id}: {exc}") from exc

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "TextsDB":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
