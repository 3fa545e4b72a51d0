"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from common.exceptions import TransientBackendError
from common.logging_config import get_logger

logger = get_logger(__name__)


class Database:
    """
    Handle on the SQLite metadata database.

    Connections are opened per operation; the handle itself only holds the path,
    so it is safe to share between request handlers.
    """

    def __init__(self, path: str, timeout: float = 5.0):
        self.path = path
        self.timeout = timeout

    def init_schema(self) -> None:
        """
        Initialize database and create tables if they don't exist.
        """
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        with self.connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    user_id TEXT PRIMARY KEY,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS files (
                    file_id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL CHECK (type IN ('folder', 'file', 'image')),
                    parent_id TEXT NOT NULL,
                    is_public INTEGER NOT NULL DEFAULT 0,
                    storage_key TEXT,
                    created_at TEXT NOT NULL,
                    CHECK ((type = 'folder') = (storage_key IS NULL)),
                    FOREIGN KEY(owner_id) REFERENCES users(user_id)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_files_owner_parent ON files(owner_id, parent_id)
            """)

            conn.commit()
        logger.info(f"Database schema ready at {self.path}")

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Integrity errors propagate unchanged so callers can map them to
        business errors; any other SQLite failure becomes TransientBackendError.
        """
        try:
            conn = sqlite3.connect(self.path, timeout=self.timeout)
        except sqlite3.Error as e:
            logger.error(f"Cannot open database {self.path}: {e}", exc_info=True)
            raise TransientBackendError() from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            logger.error(f"Database operation failed: {e}", exc_info=True)
            raise TransientBackendError() from e
        finally:
            conn.close()

    def ping(self) -> bool:
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except TransientBackendError:
            return False
