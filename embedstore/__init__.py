"""Text embedding store with cosine similarity search."""

__version__ = "0.1.0"
