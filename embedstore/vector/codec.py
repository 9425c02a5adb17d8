"""
Vector codec for the embeddings BLOB column.

Blob layout: b"EMB1" magic, little-endian uint32 dimension, then the
float32 values in little-endian order. Blobs written as a JSON array by
earlier versions of the store are still readable.
"""

import json
from typing import List, Optional, Sequence

import numpy as np

from ..core.errors import CorruptVector

MAGIC = b"EMB1"
HEADER_SIZE = len(MAGIC) + 4
FLOAT_DTYPE = np.dtype("<f4")
DIM_DTYPE = np.dtype("<u4")


def encode(vector: Sequence[float]) -> bytes:
    """Encode a float vector as a self-describing float32 blob."""
    array = np.asarray(vector, dtype=FLOAT_DTYPE)
    if array.ndim != 1 or array.size == 0:
        raise ValueError("Vector must be a non-empty one-dimensional sequence")
    if not np.all(np.isfinite(array)):
        raise ValueError("Vector contains non-finite values")

    header = MAGIC + np.array([array.size], dtype=DIM_DTYPE).tobytes()
    return header + array.tobytes()


def decode(blob: bytes, dimension: Optional[int] = None, key=None) -> List[float]:
    """
    Decode a blob produced by encode().

    Args:
        blob: Raw column value
        dimension: Expected vector length, or None to accept any
        key: Row identity reported in the error on failure

    Raises:
        CorruptVector: blob is malformed, truncated or of the wrong dimension
    """
    if isinstance(blob, memoryview):
        blob = blob.tobytes()
    if not isinstance(blob, (bytes, bytearray)):
        raise CorruptVector(f"Expected bytes, got {type(blob).__name__}", operation="decode", key=key)

    blob = bytes(blob)
    if blob.startswith(MAGIC):
        values = _decode_binary(blob, key)
    elif blob.lstrip().startswith(b"["):
        values = _decode_json(blob, key)
    else:
        raise CorruptVector("Unrecognized vector blob format", operation="decode", key=key)

    if dimension is not None and len(values) != dimension:
        raise CorruptVector(
            f"Decoded {len(values)} values, expected {dimension}",
            operation="decode", key=key,
        )
    return values


def _decode_binary(blob: bytes, key) -> List[float]:
    if len(blob) < HEADER_SIZE:
        raise CorruptVector("Truncated vector header", operation="decode", key=key)

    size = int(np.frombuffer(blob, dtype=DIM_DTYPE, count=1, offset=len(MAGIC))[0])
    payload = blob[HEADER_SIZE:]
    if size == 0 or len(payload) != size * FLOAT_DTYPE.itemsize:
        raise CorruptVector(
            f"Payload of {len(payload)} bytes does not hold {size} float32 values",
            operation="decode", key=key,
        )
    array = np.frombuffer(payload, dtype=FLOAT_DTYPE)
    if not np.all(np.isfinite(array)):
        raise CorruptVector("Vector blob contains non-finite values", operation="decode", key=key)
    return array.tolist()


def _decode_json(blob: bytes, key) -> List[float]:
    try:
        values = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise CorruptVector(f"Invalid JSON vector blob: {e}", operation="decode", key=key) from e

    if (not isinstance(values, list) or not values
            or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values)):
        raise CorruptVector("JSON vector blob is not a flat list of numbers", operation="decode", key=key)

    # Round through float32 so legacy rows compare like binary ones
    try:
        with np.errstate(over="ignore"):
            array = np.asarray(values, dtype=FLOAT_DTYPE)
    except (OverflowError, ValueError) as e:
        raise CorruptVector(f"JSON vector blob value out of range: {e}", operation="decode", key=key) from e
    if not np.all(np.isfinite(array)):
        raise CorruptVector("JSON vector blob contains non-finite values", operation="decode", key=key)
    return array.tolist()
