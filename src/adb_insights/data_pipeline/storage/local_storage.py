"""Durable string key/value storage backed by SQLite."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)


class LocalStorage:
    """String-keyed store with browser local-storage semantics.

    Passing ``db_path=None`` keeps everything in a private in-memory database
    that lives as long as this object.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path is not None else None
        self._lock = threading.Lock()
        self._memory_conn: Optional[sqlite3.Connection] = None

        if self.db_path is None:
            self._memory_conn = sqlite3.connect(":memory:", check_same_thread=False)
        else:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()
        logger.info(f"Local storage initialized at {self.db_path or ':memory:'}")

    def _init_schema(self):
        """Create the key/value table if it doesn't exist."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with proper locking."""
        with self._lock:
            if self._memory_conn is not None:
                yield self._memory_conn
                return
            if self.db_path is None:
                raise RuntimeError("In-memory local storage has been closed")
            conn = sqlite3.connect(str(self.db_path))
            try:
                yield conn
            finally:
                conn.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO local_storage (key, value) VALUES (?, ?)",
                (key, value),
            )
            conn.commit()

    def remove_item(self, key: str) -> None:
        with self._get_connection() as conn:
            conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))
            conn.commit()

    def keys(self) -> List[str]:
        with self._get_connection() as conn:
            return [row[0] for row in conn.execute("SELECT key FROM local_storage ORDER BY key")]

    def clear(self) -> None:
        with self._get_connection() as conn:
            conn.execute("DELETE FROM local_storage")
            conn.commit()

    def close(self) -> None:
        """Release the in-memory connection; file-backed stores hold none."""
        if self._memory_conn is not None:
            self._memory_conn.close()
            self._memory_conn = None
