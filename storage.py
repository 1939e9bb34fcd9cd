"""
Storage Manager for PocketCalc
Key-value persistence over SQLite used by the history recorder
"""
import logging
import sqlite3
from datetime import datetime

import config

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when the backing store cannot be read or written"""


class KeyValueStore:
    """Minimal get/set/remove capability the history recorder depends on"""

    def get(self, key):
        raise NotImplementedError

    def set(self, key, value):
        raise NotImplementedError

    def remove(self, key):
        raise NotImplementedError


class SQLiteStore(KeyValueStore):
    def __init__(self, db_path=config.DB_PATH):
        self.db_path = db_path
        self.init_database()

    def get_connection(self):
        """Create and return a database connection"""
        return sqlite3.connect(self.db_path)

    def init_database(self):
        """Initialize the key-value table"""
        try:
            conn = self.get_connection()
            try:
                conn.execute('''
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                ''')
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not initialize {self.db_path}: {e}") from e
        logger.info("Storage ready at %s", self.db_path)

    def get(self, key):
        """Return the stored value for key, or None when absent"""
        try:
            conn = self.get_connection()
            try:
                row = conn.execute('SELECT value FROM kv_store WHERE key = ?', (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read {key!r}: {e}") from e
        return row[0] if row else None

    def set(self, key, value):
        """Insert or replace the value stored under key"""
        updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        try:
            conn = self.get_connection()
            try:
                conn.execute('''
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                ''', (key, value, updated_at))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not write {key!r}: {e}") from e

    def remove(self, key):
        """Delete key; succeeds when it is already absent"""
        try:
            conn = self.get_connection()
            try:
                conn.execute('DELETE FROM kv_store WHERE key = ?', (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not remove {key!r}: {e}") from e
