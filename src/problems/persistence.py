"""Durable storage the problem store syncs to after every mutation."""

import os
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog

from db import wal_connect

from .errors import ImportParseError, PersistenceError
from .models import Problem
from .transfer import decode_problems, encode_problems

logger = structlog.get_logger()

STORAGE_KEY = "algo-rewind-problems"


class PersistenceBridge(ABC):
    """Whole-collection durable record.

    ``load()`` never fails on bad data: it returns an empty list and leaves a
    message in ``load_warning`` for the presentation layer.
    """

    load_warning: Optional[str] = None

    @abstractmethod
    def load(self) -> list[Problem]: ...

    @abstractmethod
    def save(self, problems: list[Problem]) -> None:
        """Overwrite the durable record."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Delete the durable record. No-op when absent."""
        ...

    def _decode(self, raw: bytes | str, source: str) -> list[Problem]:
        try:
            return decode_problems(raw)
        except ImportParseError as e:
            logger.warning("stored_data_unreadable", source=source, error=str(e))
            self.load_warning = f"Saved data could not be read and was ignored: {e}"
            return []

    def _encode(self, problems: list[Problem], target: Path) -> bytes:
        try:
            return encode_problems(problems, indent=None)
        except (UnicodeEncodeError, ValueError) as e:
            raise PersistenceError(f"Could not encode problems for {target}: {e}") from e


class JsonFileBridge(PersistenceBridge):
    """One JSON array in a file, replaced atomically on save."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> list[Problem]:
        self.load_warning = None
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e
        return self._decode(raw, str(self.path))

    def save(self, problems: list[Problem]) -> None:
        payload = self._encode(problems, self.path)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(payload)
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e
        logger.debug("problems_saved", path=str(self.path), count=len(problems))

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not delete {self.path}: {e}") from e


class SqliteBridge(PersistenceBridge):
    """Key-value row in a SQLite database."""

    def __init__(self, db_path: str | Path, key: str = STORAGE_KEY):
        self.db_path = Path(db_path).expanduser()
        self.key = key
        self._init_db()

    def _init_db(self):
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with wal_connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Could not open {self.db_path}: {e}") from e

    def load(self) -> list[Problem]:
        self.load_warning = None
        try:
            with wal_connect(self.db_path) as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (self.key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read {self.db_path}: {e}") from e
        if row is None:
            return []
        return self._decode(row[0], f"{self.db_path}:{self.key}")

    def save(self, problems: list[Problem]) -> None:
        value = self._encode(problems, self.db_path).decode("utf-8")
        try:
            with wal_connect(self.db_path) as conn:
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at""",
                    (self.key, value, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not write {self.db_path}: {e}") from e
        logger.debug("problems_saved", path=str(self.db_path), count=len(problems))

    def clear(self) -> None:
        try:
            with wal_connect(self.db_path) as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (self.key,))
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not clear {self.db_path}: {e}") from e
