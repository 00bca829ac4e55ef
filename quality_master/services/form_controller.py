"""
FormController - Owner of the active FormDocument

Holds the in-memory document for one scope, applies edits, and writes
through to the FormStateStore after each one. The in-memory document is
authoritative: a failed write is reported and retried on the next edit.
"""

import logging
from typing import Any, Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import Config
from ..models.form_document import FormDocument, default_document
from .form_store import FormStateStore, ScopeKey

logger = logging.getLogger(__name__)


class FormController(QObject):
    """
    Document owner for a single scope.

    Signals:
        document_changed: Any field of the current document changed
        document_replaced: A different document object is now current (reset)
        persist_failed(str): A write-through was rejected by the store
        persist_recovered: A write succeeded after earlier failures
    """

    document_changed = pyqtSignal()
    document_replaced = pyqtSignal()
    persist_failed = pyqtSignal(str)
    persist_recovered = pyqtSignal()

    def __init__(self, store: FormStateStore, locked_production_order: Optional[str] = None,
                 schema_version: int = Config.FORM_SCHEMA_VERSION, parent: Optional[QObject] = None):
        """
        Args:
            store: Persistence backend
            locked_production_order: Externally supplied order (e.g. --po);
                selects the scope and makes the order field read-only
            schema_version: Form schema version used in the scope key
        """
        super().__init__(parent)
        self._store = store
        self._locked_order = (locked_production_order or '').strip() or None
        self._scope_key = ScopeKey.for_order(self._locked_order, schema_version)
        self._last_persist_ok = True

        document = store.load(self._scope_key)
        if document is None:
            logger.info(f"No saved form for {self._scope_key}, starting from defaults")
            document = default_document()
        else:
            logger.info(f"Restored form for {self._scope_key}")

        self._document = document
        self._apply_locked_order()

    # ==================== Properties ====================

    @property
    def document(self) -> FormDocument:
        return self._document

    @property
    def scope_key(self) -> ScopeKey:
        return self._scope_key

    @property
    def locked_production_order(self) -> Optional[str]:
        return self._locked_order

    @property
    def is_order_locked(self) -> bool:
        return self._locked_order is not None

    @property
    def last_persist_ok(self) -> bool:
        return self._last_persist_ok

    # ==================== Persistence ====================

    def persist(self) -> bool:
        """
        Write the current document through to the store.

        Returns:
            True if the store accepted the write
        """
        ok = self._store.save(self._scope_key, self._document)
        if ok:
            if not self._last_persist_ok:
                logger.info(f"Form state {self._scope_key} saved again after earlier failures")
                self.persist_recovered.emit()
        else:
            self.persist_failed.emit(
                "Could not save this form on this device (storage is full). "
                "Your changes are kept while the app stays open."
            )
        self._last_persist_ok = ok
        return ok

    def commit(self) -> bool:
        """Notify listeners of an edit and persist it"""
        self.document_changed.emit()
        return self.persist()

    def reset(self):
        """Drop this scope's saved form and start over from defaults"""
        self._store.clear(self._scope_key)
        self._document = default_document()
        self._apply_locked_order()
        logger.info(f"Form {self._scope_key} reset")
        self.document_replaced.emit()
        self.document_changed.emit()

    def _apply_locked_order(self):
        if self._locked_order and not self._document.header.production_order:
            self._document.header.production_order = self._locked_order
            self.persist()

    # ==================== Header ====================

    def set_panel_serial(self, value: str) -> bool:
        self._document.header.panel_serial = value
        return self.commit()

    def set_production_order(self, value: str) -> bool:
        """Set the order field (ignored when the order came from outside)"""
        if self.is_order_locked:
            logger.debug("Production order is locked; ignoring edit")
            return False
        self._document.header.production_order = value
        return self.commit()

    # ==================== Checklist ====================

    def set_item_initials(self, section_key: str, item_id: str, value: str) -> bool:
        """Set the initials of one checklist item"""
        section = self._document.sections.get(section_key)
        item = section.get_item(item_id) if section else None
        if item is None:
            raise KeyError(f"Unknown checklist item {section_key}/{item_id}")
        item.initials = value
        return self.commit()

    def set_section_field(self, section_key: str, field_name: str, value: str) -> bool:
        """
        Set a section's date, notes, or one of its sign-off initials.

        Only the named field of the named section changes.
        """
        section = self._document.sections.get(section_key)
        if section is None:
            raise KeyError(f"Unknown section {section_key}")

        if field_name == 'date':
            section.date = value
        elif field_name == 'notes':
            section.notes = value
        elif field_name in section.signoffs:
            section.signoffs[field_name] = value
        else:
            raise KeyError(f"Unknown field {section_key}.{field_name}")
        return self.commit()

    # ==================== Remote record ====================

    def to_record(self) -> Dict[str, Any]:
        """Serialized document for the remote record store"""
        return self._document.to_dict()


__all__ = ['FormController']
