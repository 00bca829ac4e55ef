"""
Database Connection - SQLite access for the form state store

One connection per thread, WAL journaling, and a process-wide write lock so
the GUI thread and worker threads never interleave writes.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

BUSY_TIMEOUT_SEC = 30.0


class DatabaseConnection:
    """
    Lazily opened, thread-local SQLite connection.

    Usage:
        db = DatabaseConnection(path)
        with db.transaction() as conn:
            conn.execute('INSERT ...')
        with db.read_only() as conn:
            rows = conn.execute('SELECT ...').fetchall()
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._local = threading.local()
        self._write_lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        """Connection for the calling thread, opened on first use"""
        conn = getattr(self._local, 'connection', None)
        if conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), timeout=BUSY_TIMEOUT_SEC)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
            logger.debug(f"Opened {self.db_path} on thread {threading.current_thread().name}")
            self._local.connection = conn
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Serialized write; commits on success, rolls back and re-raises on error"""
        conn = self.get_connection()
        with self._write_lock:
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()

    @contextmanager
    def read_only(self) -> Iterator[sqlite3.Connection]:
        """Unlocked read; WAL lets readers run beside a writer"""
        yield self.get_connection()

    def close(self):
        """Close the calling thread's connection, if open"""
        conn = getattr(self._local, 'connection', None)
        if conn is None:
            return
        self._local.connection = None
        try:
            conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Error closing {self.db_path}: {e}")


__all__ = ['DatabaseConnection']
