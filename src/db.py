"""SQLite helper for the key-value persistence bridge."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def wal_connect(db_path: str | Path) -> Iterator[sqlite3.Connection]:
    """Open a WAL-mode connection for one unit of work.

    Commits when the block exits cleanly, rolls back when it raises, and
    always closes the connection.

    Args:
        db_path: Path to database file.
    """
    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute("PRAGMA journal_mode=WAL")
        with conn:
            yield conn
    finally:
        conn.close()
