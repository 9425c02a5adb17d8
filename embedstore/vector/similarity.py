"""
Cosine similarity ranking over stored embeddings.

Ranking is an exhaustive scan: every candidate is scored and the whole set
is sorted. There is no index; the store targets small corpora.

Zero vectors have no direction, so any pair involving one scores 0.0
instead of NaN.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..core.errors import DimensionMismatch
from ..core.schema import EmbeddingRecord, SimilarityResult, SimilarityResultSet


def cosine_similarity(query: Sequence[float], candidate: Sequence[float]) -> float:
    """Cosine similarity of two vectors of equal length, in [-1.0, 1.0]."""
    q = np.asarray(query, dtype=np.float64)
    v = np.asarray(candidate, dtype=np.float64)
    if q.shape != v.shape:
        raise DimensionMismatch(expected=q.size, actual=v.size, operation="cosine_similarity")
    return float(_score_matrix(q, v.reshape(1, -1))[0])


def _score_matrix(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    q_norm = np.linalg.norm(query)
    if q_norm == 0:
        return np.zeros(matrix.shape[0])

    norms = np.linalg.norm(matrix, axis=1)
    dots = matrix @ query
    scores = np.zeros(matrix.shape[0])
    nonzero = norms > 0
    scores[nonzero] = dots[nonzero] / (norms[nonzero] * q_norm)
    # Rounding can push parallel vectors just past 1.0
    return np.clip(scores, -1.0, 1.0)


def rank(query_text: str, query_vector: Sequence[float], records: List[EmbeddingRecord],
         top_k: Optional[int] = None) -> SimilarityResultSet:
    """
    Score every record against the query and sort descending by score.

    Ties keep the order in which records were given. Returned records have
    their vectors stripped.

    Raises:
        DimensionMismatch: a candidate vector differs in length from the query
        ValueError: top_k is given and less than 1
    """
    if top_k is not None and top_k < 1:
        raise ValueError(f"top_k must be >= 1, got {top_k}")
    q = np.asarray(query_vector, dtype=np.float64)
    if not records:
        return SimilarityResultSet(query_text=query_text, results=[])

    for record in records:
        if record.vector is None or len(record.vector) != q.size:
            actual = 0 if record.vector is None else len(record.vector)
            raise DimensionMismatch(expected=q.size, actual=actual, operation="search", key=record.id)

    matrix = np.asarray([record.vector for record in records], dtype=np.float64)
    scores = _score_matrix(q, matrix)

    # Stable sort on negated scores keeps storage order on ties
    order = np.argsort(-scores, kind="stable")
    if top_k is not None:
        order = order[:top_k]

    results = [
        SimilarityResult(record=records[i].without_vector(), score=float(scores[i]))
        for i in order
    ]
    return SimilarityResultSet(query_text=query_text, results=results)
