"""
Vector layer: blob codec, embedding providers and similarity ranking.
"""

from .codec import encode, decode
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding
from .similarity import cosine_similarity, rank

__all__ = [
    'encode',
    'decode',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'cosine_similarity',
    'rank'
]
