"""
Similarity engine tests: cosine scoring, zero vectors and stable ranking.
"""

import math

import pytest

from embedstore.core.errors import DimensionMismatch
from embedstore.core.schema import EmbeddingRecord
from embedstore.vector.similarity import cosine_similarity, rank


def make_records(vectors):
    return [
        EmbeddingRecord(id=i + 1, reference=f"ref{i + 1}", text=f"text {i + 1}", vector=v)
        for i, v in enumerate(vectors)
    ]


def test_cosine_similarity_known_values():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)
    assert cosine_similarity([1.0, 1.0], [1.0, 0.0]) == pytest.approx(1 / math.sqrt(2))


def test_cosine_similarity_ignores_magnitude():
    assert cosine_similarity([3.0, 4.0], [30.0, 40.0]) == pytest.approx(1.0)


def test_zero_vector_scores_zero():
    """Test that a zero vector on either side scores 0.0 instead of NaN."""
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0
    assert cosine_similarity([1.0, 0.0], [0.0, 0.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0


def test_cosine_similarity_dimension_mismatch():
    with pytest.raises(DimensionMismatch):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_rank_orders_by_descending_score():
    """Test the canonical ordering: same direction, orthogonal, opposite."""
    records = make_records([[0.0, 1.0], [-1.0, 0.0], [1.0, 0.0]])

    result_set = rank("query", [1.0, 0.0], records)

    assert [r.record.id for r in result_set.results] == [3, 1, 2]
    assert [r.score for r in result_set.results] == pytest.approx([1.0, 0.0, -1.0])
    assert result_set.query_text == "query"


def test_rank_strips_vectors():
    records = make_records([[1.0, 0.0]])

    result_set = rank("query", [1.0, 0.0], records)

    assert result_set.results[0].record.vector is None
    # Inputs are not mutated
    assert records[0].vector == [1.0, 0.0]


def test_rank_ties_keep_storage_order():
    records = make_records([[0.0, 1.0], [2.0, 0.0], [0.0, -1.0], [1.0, 0.0], [5.0, 0.0]])

    result_set = rank("query", [1.0, 0.0], records)

    assert [r.record.id for r in result_set.results] == [2, 4, 5, 1, 3]


def test_rank_zero_vector_candidate_scores_zero():
    records = make_records([[0.0, 0.0], [-1.0, 0.0]])

    result_set = rank("query", [1.0, 0.0], records)

    assert [r.record.id for r in result_set.results] == [1, 2]
    assert result_set.results[0].score == 0.0
    assert not any(math.isnan(r.score) for r in result_set.results)


def test_rank_zero_query_scores_everything_zero():
    records = make_records([[1.0, 0.0], [0.0, 1.0]])

    result_set = rank("query", [0.0, 0.0], records)

    assert [r.score for r in result_set.results] == [0.0, 0.0]
    assert [r.record.id for r in result_set.results] == [1, 2]


def test_rank_is_deterministic():
    records = make_records([[0.3, 0.4, 0.5], [0.1, -0.9, 0.2], [0.7, 0.7, 0.0], [0.3, 0.4, 0.5]])

    first = rank("query", [0.2, 0.1, 0.9], records)
    second = rank("query", [0.2, 0.1, 0.9], records)

    assert [(r.record.id, r.score) for r in first.results] == [(r.record.id, r.score) for r in second.results]


def test_rank_top_k():
    records = make_records([[0.0, 1.0], [-1.0, 0.0], [1.0, 0.0]])

    result_set = rank("query", [1.0, 0.0], records, top_k=2)

    assert [r.record.id for r in result_set.results] == [3, 1]


def test_rank_empty_candidates():
    result_set = rank("query", [1.0, 0.0], [])

    assert result_set.results == []
    assert len(result_set) == 0


def test_rank_dimension_mismatch_names_record():
    records = make_records([[1.0, 0.0], [1.0, 0.0, 0.0]])

    with pytest.raises(DimensionMismatch) as exc_info:
        rank("query", [1.0, 0.0], records)

    assert exc_info.value.key == 2
    assert exc_info.value.expected == 2
    assert exc_info.value.actual == 3


def test_rank_record_without_vector_is_rejected():
    records = [EmbeddingRecord(id=1, reference="r", text="t", vector=None)]

    with pytest.raises(DimensionMismatch):
        rank("query", [1.0, 0.0], records)


def test_rank_rejects_top_k_below_one():
    records = make_records([[1.0, 0.0], [0.0, 1.0]])

    with pytest.raises(ValueError):
        rank("query", [1.0, 0.0], records, top_k=0)
    with pytest.raises(ValueError):
        rank("query", [1.0, 0.0], records, top_k=-1)
