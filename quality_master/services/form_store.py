"""
FormStateStore - Versioned, per-production-order form persistence

Each production order gets its own slot, keyed by (schema version, order).
Documents written under an older schema version are never read back by a
newer one; they are simply orphaned.

Table layout:
    form_state(schema_version INTEGER, scope TEXT, payload TEXT, updated_at TEXT)
    PRIMARY KEY (schema_version, scope)
"""

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..config import Config
from ..models.form_document import FormDocument
from .database.connection import DatabaseConnection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeKey:
    """Storage slot identity: schema version x production order"""
    schema_version: int
    scope: str

    @classmethod
    def for_order(cls, production_order: Optional[str],
                  schema_version: int = Config.FORM_SCHEMA_VERSION) -> 'ScopeKey':
        """Build the key for an order; empty orders share the sentinel slot"""
        order = (production_order or '').strip()
        return cls(schema_version, order or Config.NO_ORDER_SCOPE)

    def __str__(self) -> str:
        return f"v{self.schema_version}:{self.scope}"


class FormStateStore:
    """
    SQLite-backed key/value store for FormDocuments.

    Writes are rejected, not raised, when the store would grow past its
    quota or SQLite refuses them; callers keep working from memory.
    """

    def __init__(self, db_path: Optional[Path] = None,
                 quota_bytes: int = Config.STORE_QUOTA_BYTES):
        if db_path is None:
            db_path = Config.get_store_path()
        self._conn = DatabaseConnection(db_path)
        self._quota_bytes = quota_bytes
        self._init_schema()

    @property
    def quota_bytes(self) -> int:
        return self._quota_bytes

    def _init_schema(self):
        with self._conn.transaction() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS form_state (
                    schema_version INTEGER NOT NULL,
                    scope TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (schema_version, scope)
                )
            ''')

    # ==================== Load/Save/Clear ====================

    def load(self, key: ScopeKey) -> Optional[FormDocument]:
        """
        Load the document stored under exactly this key.

        Returns:
            FormDocument, or None if absent or unreadable
        """
        try:
            with self._conn.read_only() as conn:
                row = conn.execute(
                    'SELECT payload FROM form_state WHERE schema_version = ? AND scope = ?',
                    (key.schema_version, key.scope)
                ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Could not read form state {key}: {e}")
            return None

        if row is None:
            return None

        try:
            return FormDocument.from_dict(json.loads(row['payload']))
        except (ValueError, OverflowError) as e:
            logger.warning(f"Ignoring unreadable form state {key}: {e}")
            return None

    def save(self, key: ScopeKey, doc: FormDocument) -> bool:
        """
        Serialize and write a document under the key.

        Returns:
            True if written; False if over quota or the write failed
        """
        try:
            payload = json.dumps(doc.to_dict(), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Form state {key} is not serializable: {e}")
            return False

        size = len(payload.encode('utf-8'))
        try:
            with self._conn.transaction() as conn:
                used = conn.execute(
                    'SELECT COALESCE(SUM(LENGTH(CAST(payload AS BLOB))), 0) FROM form_state '
                    'WHERE NOT (schema_version = ? AND scope = ?)',
                    (key.schema_version, key.scope)
                ).fetchone()[0]

                if used + size > self._quota_bytes:
                    logger.warning(
                        f"Form state {key} not saved: {used + size} bytes exceeds "
                        f"quota of {self._quota_bytes} bytes"
                    )
                    return False

                conn.execute(
                    'INSERT OR REPLACE INTO form_state (schema_version, scope, payload, updated_at) '
                    'VALUES (?, ?, ?, ?)',
                    (key.schema_version, key.scope, payload, datetime.now(timezone.utc).isoformat())
                )
        except sqlite3.Error as e:
            logger.warning(f"Form state {key} not saved: {e}")
            return False

        return True

    def clear(self, key: ScopeKey) -> bool:
        """Remove only the entry for this key"""
        try:
            with self._conn.transaction() as conn:
                conn.execute(
                    'DELETE FROM form_state WHERE schema_version = ? AND scope = ?',
                    (key.schema_version, key.scope)
                )
            return True
        except sqlite3.Error as e:
            logger.warning(f"Could not clear form state {key}: {e}")
            return False

    def list_scopes(self) -> List[ScopeKey]:
        """All keys currently holding a document"""
        try:
            with self._conn.read_only() as conn:
                rows = conn.execute(
                    'SELECT schema_version, scope FROM form_state ORDER BY schema_version, scope'
                ).fetchall()
        except sqlite3.Error as e:
            logger.warning(f"Could not list form state scopes: {e}")
            return []
        return [ScopeKey(row['schema_version'], row['scope']) for row in rows]

    def close(self):
        self._conn.close()


__all__ = ['ScopeKey', 'FormStateStore']
