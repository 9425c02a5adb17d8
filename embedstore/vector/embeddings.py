"""
Embedding providers: the generator client the store depends on.
Providers embed an ordered batch of texts or fail with GenerationError.
"""

from abc import ABC, abstractmethod
import hashlib
from typing import List

import numpy as np

from ..core.errors import GenerationError
from ..util.logging import logger


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    max_batch_size: int = 64

    @abstractmethod
    def _embed_batch(self, texts: List[str]) -> List[List[float]]:
        """Generate one vector per text. Implementations may raise anything."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def embed(self, texts: List[str]) -> List[List[float]]:
        """
        Embed texts in order.

        Returns:
            One vector per input text, same order

        Raises:
            GenerationError: invalid input, oversized batch, provider failure,
                or vectors of the wrong count or dimension
        """
        texts = list(texts)
        self._validate_input(texts)

        try:
            vectors = self._embed_batch(texts)
        except GenerationError:
            raise
        except Exception as e:
            logger.log_generation(self.name, len(texts), status="failed", error=str(e))
            raise GenerationError(f"Embedding provider failed: {e}", operation="embed") from e

        vectors = [list(map(float, v)) for v in vectors]
        self._validate_output(texts, vectors)
        logger.log_generation(self.name, len(texts), self.get_dimension())
        return vectors

    def _validate_input(self, texts: List[str]) -> None:
        if not texts:
            raise GenerationError("No texts to embed", operation="embed")
        if len(texts) > self.max_batch_size:
            raise GenerationError(
                f"Batch of {len(texts)} texts exceeds provider limit of {self.max_batch_size}",
                operation="embed",
            )
        for position, text in enumerate(texts):
            if not isinstance(text, str) or not text.strip():
                raise GenerationError("Cannot embed empty text", operation="embed", key=position)

    def _validate_output(self, texts: List[str], vectors: List[List[float]]) -> None:
        if len(vectors) != len(texts):
            raise GenerationError(
                f"Provider returned {len(vectors)} vectors for {len(texts)} texts",
                operation="embed",
            )
        dimension = self.get_dimension()
        for position, vector in enumerate(vectors):
            if len(vector) != dimension:
                raise GenerationError(
                    f"Provider returned a {len(vector)}-dimensional vector, expected {dimension}",
                    operation="embed", key=position,
                )


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider.

    Expands a SHA-256 digest of the text into a reproducible vector, which
    makes it useful offline and in tests without model dependencies. The
    vectors carry no semantic meaning beyond exact-text identity.
    """

    def __init__(self, dimension: int = 384, max_batch_size: int = 64):
        self.dimension = dimension
        self.max_batch_size = max_batch_size

    def _embed_batch(self, texts: List[str]) -> List[List[float]]:
        return [self._embed_one(text) for text in texts]

    def _embed_one(self, text: str) -> List[float]:
        # Seed a generator from the digest so every dimension gets a value
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        rng = np.random.default_rng(int.from_bytes(digest[:8], "little"))
        vector = rng.uniform(-1.0, 1.0, self.dimension).astype(np.float32)
        return vector.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    The model is loaded lazily on first use. all-MiniLM-L6-v2 produces
    384-dimensional vectors.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2", dimension: int = None,
                 max_batch_size: int = 64):
        self.model_name = model_name
        self.max_batch_size = max_batch_size
        self._model = None
        self._dimension = dimension

    @property
    def model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            try:
                self._model = SentenceTransformer(self.model_name)
            except Exception as e:
                raise GenerationError(
                    f"Could not load embedding model '{self.model_name}': {e}",
                    operation="load_model",
                ) from e
        return self._model

    def _embed_batch(self, texts: List[str]) -> List[List[float]]:
        embeddings = self.model.encode(texts, convert_to_numpy=True, batch_size=self.max_batch_size)
        return np.asarray(embeddings, dtype=np.float32).tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension
