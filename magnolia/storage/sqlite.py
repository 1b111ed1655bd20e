"""
SQLiteStore - Persist key-value blobs in ~/.magnolia/portal.db.

Each key holds one JSON document (in practice a JSON array per entity
type). Every call opens its own connection.
"""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from magnolia.errors import StoreUnavailableError

from .base import KeyValueStore


logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = Path.home() / ".magnolia"
DEFAULT_STORE_DB = DEFAULT_STORE_DIR / "portal.db"


class SQLiteStore(KeyValueStore):
    """
    Key-value store on a single SQLite table.

    A value that fails to decode is logged and read as absent.
    """

    def __init__(self, db_path: Optional[str | Path] = None):
        """
        Initialize the store.

        Args:
            db_path: Path to the database file (default: ~/.magnolia/portal.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_STORE_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as e:
            raise StoreUnavailableError(f"Cannot open store at {self.db_path}: {e}") from e
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def load(self, key: str) -> Optional[Any]:
        try:
            conn = self._get_connection()
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot read '{key}': {e}") from e

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable value stored under '{key}'")
            return None

    def save(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        now = datetime.now().isoformat()
        try:
            conn = self._get_connection()
            try:
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at)
                       VALUES (?, ?, ?)
                       ON CONFLICT(key) DO UPDATE SET
                         value = excluded.value,
                         updated_at = excluded.updated_at""",
                    (key, payload, now)
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot write '{key}': {e}") from e

    def keys(self) -> list[str]:
        """List stored keys."""
        conn = self._get_connection()
        try:
            cursor = conn.execute("SELECT key FROM kv_store ORDER BY key")
            return [row["key"] for row in cursor.fetchall()]
        finally:
            conn.close()
