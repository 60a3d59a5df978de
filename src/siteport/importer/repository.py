"""Read-only access to the data store of an unpacked export package.

The data store is an SQLite file holding one table per record collection.
Every table has the same shape::

    CREATE TABLE <collection> (
        id   INTEGER PRIMARY KEY AUTOINCREMENT,
        data TEXT NOT NULL          -- JSON document
    )
"""

import logging
import re
import sqlite3
from pathlib import Path
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import DataStoreError, RecordCountError

logger = logging.getLogger(__name__)

M = TypeVar('M', bound=BaseModel)

_COLLECTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ExportImportRepository:
    """
    Read-only document repository over a package database.

    Usage:
        with ExportImportRepository(db_path) as repository:
            metadata = repository.get_single_item(ExportMetadata)
    """

    def __init__(self, db_path: Path):
        """
        Open the package database.

        Args:
            db_path: Path to the unpacked database file

        Raises:
            DataStoreError: If the file is missing or is not a database
        """
        self.db_path = Path(db_path)
        self._connection: Optional[sqlite3.Connection] = None
        self._connect()

    def _connect(self) -> None:
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        try:
            self._connection = sqlite3.connect(uri, uri=True, timeout=5.0)
        except sqlite3.Error as e:
            raise DataStoreError(
                f"Cannot open data store: {e}", path=str(self.db_path)
            ) from e

        try:
            # sqlite only reads the header on first use; fail early on garbage
            self._connection.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error as e:
            self.close()
            raise DataStoreError(
                f"Not a valid data store: {e}", path=str(self.db_path)
            ) from e

        logger.debug(f"Opened data store: {self.db_path}")

    @property
    def closed(self) -> bool:
        return self._connection is None

    def _execute(self, sql: str, parameters=()) -> sqlite3.Cursor:
        if self._connection is None:
            raise DataStoreError("Data store is closed", path=str(self.db_path))
        try:
            return self._connection.execute(sql, parameters)
        except sqlite3.Error as e:
            raise DataStoreError(
                f"Data store query failed: {e}", path=str(self.db_path)
            ) from e

    def has_collection(self, collection: str) -> bool:
        """Check whether the store contains a collection."""
        _check_collection_name(collection)
        cursor = self._execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (collection,),
        )
        try:
            return cursor.fetchone() is not None
        finally:
            cursor.close()

    def get_count(self, collection: str) -> int:
        """
        Count records in a collection.

        A collection the export never wrote counts as empty.
        """
        if not self.has_collection(collection):
            return 0
        cursor = self._execute(f'SELECT count(*) FROM "{collection}"')
        try:
            return cursor.fetchone()[0]
        finally:
            cursor.close()

    def get_all_items(self, record_type: Type[M]) -> List[M]:
        """Load every record of a collection in insertion order."""
        return self._load(record_type)

    def get_single_item(self, record_type: Type[M]) -> M:
        """
        Load the only record of a collection.

        Raises:
            RecordCountError: If the collection holds zero or several records
        """
        items = self._load(record_type, limit=2)
        if len(items) != 1:
            count = self.get_count(record_type.collection)
            raise RecordCountError(
                f"Expected exactly one {record_type.__name__} record, found {count}",
                collection=record_type.collection,
                count=count,
            )
        return items[0]

    def _load(self, record_type: Type[M], limit: Optional[int] = None) -> List[M]:
        collection = record_type.collection
        if not self.has_collection(collection):
            return []

        sql = f'SELECT id, data FROM "{collection}" ORDER BY id'
        parameters: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            parameters = (limit,)

        cursor = self._execute(sql, parameters)
        try:
            rows = cursor.fetchall()
        finally:
            cursor.close()

        items = []
        for row_id, data in rows:
            try:
                items.append(record_type.model_validate_json(data))
            except ValidationError as e:
                raise DataStoreError(
                    f"Invalid {record_type.__name__} record {row_id}: {e}",
                    collection=collection,
                    record_id=row_id,
                ) from e
        return items

    def close(self) -> None:
        """Close the data store. Safe to call more than once."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed data store: {self.db_path}")

    def __enter__(self) -> "ExportImportRepository":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def _check_collection_name(collection: str) -> None:
    if not _COLLECTION_NAME.match(collection):
        raise DataStoreError(f"Invalid collection name: {collection!r}", collection=collection)
