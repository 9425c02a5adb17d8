"""
Vector codec tests: blob round trips and fallible decoding.
"""

import json

import numpy as np
import pytest

from embedstore.core.errors import CorruptVector, StorageError
from embedstore.vector.codec import HEADER_SIZE, MAGIC, decode, encode


def test_round_trip_is_exact_at_float32_precision():
    """Test that decode(encode(v)) returns v for float32 values."""
    vector = np.random.default_rng(7).uniform(-1.0, 1.0, 384).astype(np.float32).tolist()

    decoded = decode(encode(vector), dimension=384)

    assert decoded == vector


def test_blob_is_self_describing():
    """Test that the blob carries magic, dimension and float32 payload."""
    blob = encode([1.0, 2.0, 3.0])

    assert blob.startswith(MAGIC)
    assert len(blob) == HEADER_SIZE + 3 * 4


def test_encode_rejects_empty_and_non_finite():
    with pytest.raises(ValueError):
        encode([])
    with pytest.raises(ValueError):
        encode([1.0, float("nan")])
    with pytest.raises(ValueError):
        encode([[1.0, 2.0], [3.0, 4.0]])


def test_truncated_blob_is_corrupt():
    """Test that cutting bytes off the payload is detected."""
    blob = encode([0.5] * 8)

    with pytest.raises(CorruptVector):
        decode(blob[:-1])
    with pytest.raises(CorruptVector):
        decode(blob[:HEADER_SIZE - 1])


def test_garbage_blob_is_corrupt():
    with pytest.raises(CorruptVector):
        decode(b"\x00\x01\x02\x03garbage")
    with pytest.raises(CorruptVector):
        decode(b"")


def test_zero_length_header_is_corrupt():
    """Test that a blob claiming zero values is not read as an empty vector."""
    with pytest.raises(CorruptVector):
        decode(MAGIC + b"\x00\x00\x00\x00")


def test_dimension_mismatch_on_decode():
    blob = encode([1.0, 2.0, 3.0])

    with pytest.raises(CorruptVector) as exc_info:
        decode(blob, dimension=4, key=17)

    assert exc_info.value.key == 17
    assert exc_info.value.operation == "decode"


def test_corrupt_vector_is_a_storage_error():
    with pytest.raises(StorageError):
        decode(b"not a vector")


def test_non_bytes_input_is_corrupt():
    with pytest.raises(CorruptVector):
        decode("[1.0, 2.0]")


def test_memoryview_is_accepted():
    blob = encode([1.0, -1.0])

    assert decode(memoryview(blob)) == [1.0, -1.0]


def test_legacy_json_blob_decodes():
    """Test that JSON array blobs written by earlier versions are readable."""
    blob = json.dumps([1.23, 4.56, 7.89]).encode("utf-8")

    decoded = decode(blob, dimension=3)

    assert decoded == np.array([1.23, 4.56, 7.89], dtype=np.float32).tolist()


def test_legacy_json_blob_validation():
    with pytest.raises(CorruptVector):
        decode(b"[1.0, 2.0", dimension=2)
    with pytest.raises(CorruptVector):
        decode(b'["a", "b"]')
    with pytest.raises(CorruptVector):
        decode(b"[]")
    with pytest.raises(CorruptVector):
        decode(b"[[1.0], [2.0]]")
    with pytest.raises(CorruptVector):
        decode(b"[1.0, 2.0]", dimension=3)


def float32_blob(values):
    """Hand-built binary blob, bypassing encode() validation."""
    return (MAGIC + np.array([len(values)], dtype="<u4").tobytes()
            + np.array(values, dtype="<f4").tobytes())


def test_non_finite_binary_payload_is_corrupt():
    """Test that NaN or inf stored in a binary blob is not decoded."""
    with pytest.raises(CorruptVector) as exc_info:
        decode(float32_blob([float("nan"), 1.0]), dimension=2, key=5)
    assert exc_info.value.key == 5

    with pytest.raises(CorruptVector):
        decode(float32_blob([float("inf"), 1.0, 1.0, 1.0]), dimension=4)
    with pytest.raises(CorruptVector):
        decode(float32_blob([1.0, float("-inf")]))


def test_legacy_json_blob_out_of_range_or_nested_is_corrupt():
    """Test that oversized integers and deep nesting stay inside CorruptVector."""
    with pytest.raises(CorruptVector):
        decode(b"[" + str(10 ** 400).encode() + b", 1]", dimension=2)
    with pytest.raises(CorruptVector):
        decode(b"[1e400, 1]", dimension=2)
    with pytest.raises(CorruptVector):
        decode(b"[" * 100000, dimension=2)
