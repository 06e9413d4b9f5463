from .sqlite_store import DatabaseExistsError, DuplicateRecordError, StorageError, TextsDB

__all__ = [
    "DatabaseExistsError",
    "DuplicateRecordError",
    "StorageError",
    "TextsDB",
]
