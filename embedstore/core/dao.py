"""
Embedding repository: persistence of text/vector records in SQLite.

Every write is a single statement committed on its own. The repository does
not retry; callers decide what to do with a StorageError.
"""

import sqlite3
from typing import List, Optional

from .config import EMBED_DIMENSION
from .db import get_db, init_db
from .errors import CorruptVector, DimensionMismatch, StorageError
from .schema import EmbeddingRecord
from ..util.logging import logger
from ..vector import codec

DELETE_KEYS = ("id", "reference")


class EmbeddingRepository:
    """Insert, list and delete embedding records."""

    def __init__(self, db_path: str = None, dimension: int = EMBED_DIMENSION):
        self.db_path = db_path
        self.dimension = dimension
        try:
            init_db(db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize database: {e}", operation="init") from e

    def insert(self, reference: str, text: str, vector: List[float]) -> int:
        """Encode and persist one record. Returns the assigned id."""
        if vector is None or len(vector) != self.dimension:
            raise DimensionMismatch(
                expected=self.dimension,
                actual=0 if vector is None else len(vector),
                operation="insert", key=reference,
            )
        try:
            blob = codec.encode(vector)
        except ValueError as e:
            raise StorageError(f"Cannot encode vector: {e}", operation="insert", key=reference) from e

        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(
                    "INSERT INTO embeddings (reference, text, embedding) VALUES (?, ?, ?)",
                    (reference, text, sqlite3.Binary(blob))
                )
                record_id = cursor.lastrowid
        except sqlite3.Error as e:
            logger.log_embedding_operation("insert", reference, text, {"error": str(e)}, status="failed")
            raise StorageError(f"Insert failed: {e}", operation="insert", key=reference) from e

        logger.log_embedding_operation("insert", record_id, text, {"reference": reference})
        return record_id

    def list_all(self, skip_corrupt: bool = False, corrupt_ids: Optional[List[int]] = None) -> List[EmbeddingRecord]:
        """
        Read and decode every row in storage order.

        Args:
            skip_corrupt: Leave undecodable rows out instead of failing
            corrupt_ids: When given, receives the ids of skipped rows

        Raises:
            CorruptVector: a row could not be decoded and skip_corrupt is False
            StorageError: the read itself failed
        """
        rows = self._fetch("SELECT id, reference, text, embedding FROM embeddings ORDER BY id", (), "list_all")

        records = []
        skipped = []
        for row in rows:
            try:
                records.append(self._row_to_record(row))
            except CorruptVector:
                if not skip_corrupt:
                    logger.log_corrupt_rows([row[0]], "aborted")
                    raise
                skipped.append(row[0])

        if skipped:
            logger.log_corrupt_rows(skipped, "skipped")
            if corrupt_ids is not None:
                corrupt_ids.extend(skipped)
        return records

    def get(self, record_id: int) -> Optional[EmbeddingRecord]:
        """Get one record by id, or None if it does not exist."""
        rows = self._fetch(
            "SELECT id, reference, text, embedding FROM embeddings WHERE id = ?", (record_id,), "get"
        )
        if not rows:
            return None
        return self._row_to_record(rows[0])

    def delete(self, key, by: str = "id") -> int:
        """Delete by id or reference. Returns rows affected; 0 is not an error."""
        if by not in DELETE_KEYS:
            raise ValueError(f"by must be one of: {DELETE_KEYS}")

        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(f"DELETE FROM embeddings WHERE {by} = ?", (key,))
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            logger.log_embedding_operation("delete", key, details={"by": by, "error": str(e)}, status="failed")
            raise StorageError(f"Delete failed: {e}", operation="delete", key=key) from e

        logger.log_embedding_operation("delete", key, details={"by": by, "rows_affected": deleted})
        return deleted

    def count(self) -> int:
        """Number of stored records."""
        return self._fetch("SELECT COUNT(*) FROM embeddings", (), "count")[0][0]

    def verify(self) -> List[int]:
        """Ids of rows whose embedding cannot be decoded."""
        corrupt = []
        self.list_all(skip_corrupt=True, corrupt_ids=corrupt)
        return corrupt

    def _fetch(self, query: str, params: tuple, operation: str) -> list:
        try:
            with get_db(self.db_path) as conn:
                return conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Read failed: {e}", operation=operation) from e

    def _row_to_record(self, row) -> EmbeddingRecord:
        record_id, reference, text, blob = row
        # Rows whose generation never completed carry no vector
        vector = None if blob is None else codec.decode(blob, self.dimension, key=record_id)
        return EmbeddingRecord(id=record_id, reference=reference, text=text, vector=vector)
