"""
Record types shared by the repository, the similarity engine and the API.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional


@dataclass
class EmbeddingRecord:
    reference: str
    text: str
    vector: Optional[List[float]] = None
    id: Optional[int] = None

    def without_vector(self) -> "EmbeddingRecord":
        """Copy of this record with the vector stripped."""
        return replace(self, vector=None)


@dataclass
class SimilarityResult:
    record: EmbeddingRecord
    score: float


@dataclass
class SimilarityResultSet:
    query_text: str
    results: List[SimilarityResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)
