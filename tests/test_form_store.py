"""Tests for the versioned per-order form store"""

import json
import sqlite3

from quality_master.models.form_document import default_document
from quality_master.services.form_store import FormStateStore, ScopeKey


def test_scope_key_for_order():
    assert ScopeKey.for_order('PO-1') == ScopeKey(10, 'PO-1')
    assert ScopeKey.for_order('') == ScopeKey(10, 'NO_PO')
    assert ScopeKey.for_order(None) == ScopeKey(10, 'NO_PO')
    assert ScopeKey.for_order('  ') == ScopeKey(10, 'NO_PO')
    assert str(ScopeKey(10, 'PO-1')) == 'v10:PO-1'


def test_missing_scope_loads_none(store):
    assert store.load(ScopeKey.for_order('PO-1')) is None


def test_save_then_load_same_scope(store):
    doc = default_document('PO-1')
    doc.header.panel_serial = 'SN-7'
    assert store.save(ScopeKey.for_order('PO-1'), doc)

    loaded = store.load(ScopeKey.for_order('PO-1'))
    assert loaded.header.panel_serial == 'SN-7'
    assert loaded.header.production_order == 'PO-1'


def test_scopes_are_isolated(store):
    doc_a = default_document('A')
    doc_a.header.panel_serial = 'serial-A'
    store.save(ScopeKey.for_order('A'), doc_a)

    assert store.load(ScopeKey.for_order('B')) is None

    doc_b = default_document('B')
    doc_b.header.panel_serial = 'serial-B'
    store.save(ScopeKey.for_order('B'), doc_b)

    assert store.load(ScopeKey.for_order('A')).header.panel_serial == 'serial-A'
    assert store.load(ScopeKey.for_order('B')).header.panel_serial == 'serial-B'


def test_older_schema_version_is_not_read(store):
    doc = default_document('A')
    doc.header.panel_serial = 'old'
    store.save(ScopeKey(9, 'A'), doc)

    assert store.load(ScopeKey(10, 'A')) is None
    # The old entry is orphaned, not deleted
    assert ScopeKey(9, 'A') in store.list_scopes()


def test_clear_affects_only_its_scope(store):
    store.save(ScopeKey.for_order('A'), default_document('A'))
    store.save(ScopeKey.for_order('B'), default_document('B'))

    assert store.clear(ScopeKey.for_order('A'))

    assert store.load(ScopeKey.for_order('A')) is None
    assert store.load(ScopeKey.for_order('B')) is not None


def _insert_raw(path, scope, payload):
    conn = sqlite3.connect(str(path))
    with conn:
        conn.execute(
            'INSERT OR REPLACE INTO form_state (schema_version, scope, payload, updated_at) '
            'VALUES (?, ?, ?, ?)',
            (10, scope, payload, '2026-01-01T00:00:00Z')
        )
    conn.close()


def test_unparseable_payload_is_treated_as_absent(store, store_path):
    _insert_raw(store_path, 'BROKEN', '{not json')
    assert store.load(ScopeKey.for_order('BROKEN')) is None


def test_wrongly_shaped_payload_is_treated_as_absent(store, store_path):
    _insert_raw(store_path, 'LIST', json.dumps([1, 2, 3]))
    _insert_raw(store_path, 'BADHEADER', json.dumps({'header': 'oops'}))
    _insert_raw(store_path, 'BADTOOL', json.dumps({'markup': {'tool': 'LASER'}}))
    # json accepts both literals; neither converts to a pixel width
    _insert_raw(store_path, 'HUGEBRUSH', '{"markup": {"brushWidth": 1e999}}')
    _insert_raw(store_path, 'NANBRUSH', '{"markup": {"brushWidth": NaN}}')

    assert store.load(ScopeKey.for_order('LIST')) is None
    assert store.load(ScopeKey.for_order('BADHEADER')) is None
    assert store.load(ScopeKey.for_order('BADTOOL')) is None
    assert store.load(ScopeKey.for_order('HUGEBRUSH')) is None
    assert store.load(ScopeKey.for_order('NANBRUSH')) is None


def test_save_over_quota_returns_false_and_keeps_previous(store_path):
    small_store = FormStateStore(store_path, quota_bytes=6000)
    key = ScopeKey.for_order('A')
    try:
        doc = default_document('A')
        assert small_store.save(key, doc)

        doc.markup.ink_image = 'data:image/png;base64,' + 'A' * 10_000
        assert small_store.save(key, doc) is False

        loaded = small_store.load(key)
        assert loaded.markup.ink_image is None
    finally:
        small_store.close()


def test_quota_counts_other_scopes(store_path):
    seed_store = FormStateStore(store_path)
    seed_store.save(ScopeKey.for_order('A'), default_document('A'))
    size_a = len(json.dumps(default_document('A').to_dict(), ensure_ascii=False).encode('utf-8'))
    seed_store.close()

    tight_store = FormStateStore(store_path, quota_bytes=size_a + 10)
    try:
        # Rewriting A fits; adding B on top of A does not
        assert tight_store.save(ScopeKey.for_order('A'), default_document('A'))
        assert tight_store.save(ScopeKey.for_order('B'), default_document('B')) is False
    finally:
        tight_store.close()
