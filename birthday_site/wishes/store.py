"""Durable key/value storage for per-recipient viewer data.

## Database Schema

```sql
kv:
  key TEXT PRIMARY KEY
  value TEXT NOT NULL
  updated_at TIMESTAMP
```
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """SQLite-backed string key/value store.

    Last write wins; concurrent viewers of the same recipient may race.
    """

    def __init__(self, db_path: str = "./data/wishes.sqlite"):
        """Open (and create if needed) the store.

        Args:
            db_path: Path to the SQLite file, or ":memory:".
        """
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._ensure_tables()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        return self._conn

    def _ensure_tables(self) -> None:
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
        logger.debug(f"Local store ready at {self.db_path}")

    def get(self, key: str) -> Optional[str]:
        row = self._get_connection().execute(
            "SELECT value FROM kv WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._get_connection()
        conn.execute("""
            INSERT INTO kv (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
        """, (key, value))
        conn.commit()

    def delete(self, key: str) -> None:
        conn = self._get_connection()
        conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        conn.commit()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
