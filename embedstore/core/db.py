"""
SQLite connection handling and schema for the embeddings table.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .config import DB_PATH, DB_TIMEOUT_SEC, ensure_db_directory


@contextmanager
def get_db(db_path: str = None) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection in autocommit mode."""
    conn = sqlite3.connect(db_path or DB_PATH, timeout=DB_TIMEOUT_SEC, isolation_level=None)
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = None):
    """Initialize the database with required tables."""
    ensure_db_directory(db_path)
    with get_db(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS embeddings (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                reference TEXT NOT NULL,
                text TEXT NOT NULL CHECK (length(text) > 0),
                embedding BLOB
            )
        ''')

        # reference is a lookup key but not unique
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_embeddings_reference ON embeddings(reference)')


def health_check(db_path: str = None):
    """Check database health."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='embeddings'")
            return cursor.fetchone() is not None
    except sqlite3.Error:
        return False
