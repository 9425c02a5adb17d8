#!/usr/bin/env python3
"""
Integrity check for the embeddings table.
Decodes every stored vector and reports rows that cannot be read.
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from embedstore.core.config import DB_PATH, EMBED_DIMENSION, LOG_LEVEL
from embedstore.core.dao import EmbeddingRepository
from embedstore.core.errors import StorageError
from embedstore.util.logging import configure_logging


def run_check(db_path: str, dimension: int) -> dict:
    """Count rows and collect the ids of undecodable ones."""
    repository = EmbeddingRepository(db_path, dimension=dimension)
    corrupt_ids = repository.verify()
    return {
        "db_path": db_path,
        "dimension": dimension,
        "total": repository.count(),
        "corrupt_ids": corrupt_ids,
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Verify stored embedding vectors")
    parser.add_argument("--db", default=DB_PATH, help="SQLite database path")
    parser.add_argument("--dimension", type=int, default=EMBED_DIMENSION, help="Expected vector dimension")
    parser.add_argument("--json", action="store_true", help="Output results in JSON format")
    args = parser.parse_args(argv)

    configure_logging(LOG_LEVEL)

    try:
        result = run_check(args.db, args.dimension)
    except StorageError as e:
        print(f"❌ Integrity check failed: {e}")
        return 2

    if args.json:
        print(json.dumps(result))
    elif result["corrupt_ids"]:
        print(f"⚠️  {len(result['corrupt_ids'])} of {result['total']} rows cannot be decoded")
        for row_id in result["corrupt_ids"][:20]:
            print(f"     - id {row_id}")
    else:
        print(f"✅ All {result['total']} rows decode at dimension {result['dimension']}")

    return 1 if result["corrupt_ids"] else 0


if __name__ == "__main__":
    sys.exit(main())
