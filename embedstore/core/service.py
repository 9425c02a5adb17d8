"""
Embedding service: the four operations the HTTP layer calls.

List, create, delete and search, composed from an embedding repository and an
embedding provider. Both are injected so tests can substitute their own.
"""

from typing import Iterable, List, Optional, Tuple

from .config import get_embedding_provider, get_search_default_k
from .dao import EmbeddingRepository
from .errors import DimensionMismatch, EmbedStoreError
from .schema import EmbeddingRecord, SimilarityResultSet
from ..util.logging import logger
from ..vector.embeddings import IEmbeddingProvider
from ..vector.similarity import rank


class EmbeddingService:

    def __init__(self, repository: EmbeddingRepository, provider: IEmbeddingProvider):
        if provider.get_dimension() != repository.dimension:
            raise DimensionMismatch(
                expected=repository.dimension,
                actual=provider.get_dimension(),
                operation="configure",
            )
        self.repository = repository
        self.provider = provider

    @classmethod
    def from_config(cls, db_path: str = None) -> "EmbeddingService":
        """Build a service from environment configuration."""
        provider = get_embedding_provider()
        return cls(EmbeddingRepository(db_path, dimension=provider.get_dimension()), provider)

    def list_embeddings(self) -> List[EmbeddingRecord]:
        """Every stored record with its vector, in storage order."""
        return self.repository.list_all()

    def create_embeddings(self, items: Iterable[Tuple[str, str]]) -> List[int]:
        """
        Embed and store (reference, text) pairs.

        The whole batch is embedded first, so a generation failure stores
        nothing. Records are then inserted one by one; if an insert fails the
        raised error's stored_ids lists the ids persisted before it.
        """
        items = list(items)
        if not items:
            return []

        vectors = self.provider.embed([text for _, text in items])

        stored_ids = []
        for (reference, text), vector in zip(items, vectors):
            try:
                stored_ids.append(self.repository.insert(reference, text, vector))
            except EmbedStoreError as e:
                e.stored_ids = list(stored_ids)
                logger.log_operation("embedding.create", "partial", {
                    "requested": len(items),
                    "stored": len(stored_ids),
                    "failed_reference": reference,
                })
                raise

        logger.log_operation("embedding.create", "success", {"stored": len(stored_ids)})
        return stored_ids

    def delete_embedding(self, key, by: str = "id") -> int:
        """Delete by id or reference; returns rows affected."""
        return self.repository.delete(key, by=by)

    def search(self, query_text: str, top_k: Optional[int] = None) -> SimilarityResultSet:
        """Rank every stored record by cosine similarity to the query text."""
        query_vector = self.provider.embed([query_text])[0]
        candidates = self.repository.list_all()

        if top_k is None:
            top_k = get_search_default_k()
        result_set = rank(query_text, query_vector, candidates, top_k=top_k)

        top_score = result_set.results[0].score if result_set.results else None
        logger.log_search(query_text, len(candidates), len(result_set), top_score)
        return result_set
