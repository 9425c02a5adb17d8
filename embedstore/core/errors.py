"""
Error taxonomy for the embedding store.
Every failure aborts the current operation and is surfaced to the caller.
"""

from typing import List, Optional, Union


class EmbedStoreError(Exception):
    """Base class for embedding store failures."""

    error_type = "EMBED_STORE_ERROR"

    def __init__(self, message: str, operation: Optional[str] = None,
                 key: Optional[Union[int, str]] = None, stored_ids: Optional[List[int]] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.key = key
        # Ids persisted before a batch failure, for partial-success reconciliation
        self.stored_ids = list(stored_ids or [])

    def to_dict(self) -> dict:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "operation": self.operation,
            "key": self.key,
            "stored_ids": self.stored_ids,
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.key is not None:
            parts.append(f"key={self.key}")
        return ", ".join(parts)


class GenerationError(EmbedStoreError):
    """Embedding provider unavailable or input rejected."""

    error_type = "GENERATION_ERROR"


class StorageError(EmbedStoreError):
    """Persistence read/write failure."""

    error_type = "STORAGE_ERROR"


class CorruptVector(StorageError):
    """Stored blob is malformed or has the wrong dimension."""

    error_type = "CORRUPT_VECTOR"


class DimensionMismatch(EmbedStoreError):
    """Two vectors that must agree on dimension do not."""

    error_type = "DIMENSION_MISMATCH"

    def __init__(self, expected: int, actual: int, operation: Optional[str] = None,
                 key: Optional[Union[int, str]] = None, stored_ids: Optional[List[int]] = None):
        super().__init__(
            f"Vector dimension {actual} does not match expected dimension {expected}",
            operation=operation, key=key, stored_ids=stored_ids,
        )
        self.expected = expected
        self.actual = actual
