"""
Process configuration read from the environment.
All settings have local-first defaults so the store runs without any setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/embeddings.db")
DB_TIMEOUT_SEC = float(os.getenv("DB_TIMEOUT_SEC", "5.0"))

DEBUG = os.getenv("DEBUG", "true").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Embedding generation
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformers
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")
EMBED_DIMENSION = int(os.getenv("EMBED_DIMENSION", "384"))
EMBED_MAX_BATCH = int(os.getenv("EMBED_MAX_BATCH", "64"))

# Empty means return every ranked candidate
SEARCH_DEFAULT_K = os.getenv("SEARCH_DEFAULT_K", "")

VERSION = "0.1.0"

VALID_PROVIDERS = ["hash", "sentence_transformers"]


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    if EMBED_PROVIDER == "sentence_transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(
            model_name=EMBED_MODEL_NAME,
            dimension=EMBED_DIMENSION,
            max_batch_size=EMBED_MAX_BATCH,
        )
    from ..vector.embeddings import DeterministicHashEmbedding
    return DeterministicHashEmbedding(dimension=EMBED_DIMENSION, max_batch_size=EMBED_MAX_BATCH)


def get_search_default_k():
    """Default number of search results, or None for all."""
    if not SEARCH_DEFAULT_K.strip():
        return None
    k = int(SEARCH_DEFAULT_K)
    # validate_config reports values below 1; treat them as unset
    return k if k >= 1 else None


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in VALID_PROVIDERS:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if EMBED_DIMENSION < 1:
        issues.append("EMBED_DIMENSION must be >= 1")

    if EMBED_MAX_BATCH < 1:
        issues.append("EMBED_MAX_BATCH must be >= 1")

    if DB_TIMEOUT_SEC <= 0:
        issues.append("DB_TIMEOUT_SEC must be > 0")

    if SEARCH_DEFAULT_K.strip():
        try:
            if int(SEARCH_DEFAULT_K) < 1:
                issues.append("SEARCH_DEFAULT_K must be >= 1")
        except ValueError:
            issues.append(f"Invalid SEARCH_DEFAULT_K: {SEARCH_DEFAULT_K}")

    return issues
