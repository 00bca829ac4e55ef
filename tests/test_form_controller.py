"""Tests for the document owner and its write-through behavior"""

import pytest

from quality_master.models.form_document import default_document
from quality_master.services.form_controller import FormController
from quality_master.services.form_store import ScopeKey


class FlakyStore:
    """In-memory store whose writes can be made to fail"""

    def __init__(self):
        self.fail = False
        self.saved = {}
        self.cleared = []

    def load(self, key):
        return self.saved.get(key)

    def save(self, key, doc):
        if self.fail:
            return False
        self.saved[key] = doc
        return True

    def clear(self, key):
        self.cleared.append(key)
        self.saved.pop(key, None)
        return True


def test_starts_from_defaults_when_nothing_saved(controller):
    assert controller.document == default_document()
    assert controller.scope_key == ScopeKey(10, 'NO_PO')
    assert not controller.is_order_locked


def test_edits_are_written_through(controller, store):
    controller.set_panel_serial('SN-5')
    controller.set_item_initials('ip6', 'ip6_1', 'AB')
    controller.set_section_field('visual', 'qcFinalApprovalInitials', 'QC')

    saved = store.load(controller.scope_key)
    assert saved.header.panel_serial == 'SN-5'
    assert saved.section('ip6').get_item('ip6_1').initials == 'AB'
    assert saved.section('visual').signoffs['qcFinalApprovalInitials'] == 'QC'


def test_fields_are_independent(controller):
    controller.set_section_field('ip6', 'readyForPrimerInitials', 'RP')
    doc = controller.document
    assert all(item.initials == '' for item in doc.section('ip6').items)
    assert doc.section('visual').signoffs['approvedForPrimerInitials'] == ''


def test_unknown_fields_raise(controller):
    with pytest.raises(KeyError):
        controller.set_item_initials('ip6', 'ip6_99', 'X')
    with pytest.raises(KeyError):
        controller.set_section_field('ip9', 'date', '2026-01-01')
    with pytest.raises(KeyError):
        controller.set_section_field('ip6', 'qcFinalApprovalInitials', 'X')


def test_restores_saved_document(store):
    first = FormController(store, locked_production_order='PO-3')
    first.set_panel_serial('SN-3')

    second = FormController(store, locked_production_order='PO-3')
    assert second.document.header.panel_serial == 'SN-3'


def test_locked_order_fills_header_and_rejects_edits(store):
    ctrl = FormController(store, locked_production_order=' PO-42 ')
    assert ctrl.is_order_locked
    assert ctrl.scope_key == ScopeKey(10, 'PO-42')
    assert ctrl.document.header.production_order == 'PO-42'

    assert ctrl.set_production_order('OTHER') is False
    assert ctrl.document.header.production_order == 'PO-42'


def test_unlocked_order_is_editable(controller):
    assert controller.set_production_order('PO-8')
    assert controller.document.header.production_order == 'PO-8'
    # The scope does not follow the typed order
    assert controller.scope_key == ScopeKey(10, 'NO_PO')


def test_failed_write_keeps_memory_and_reports():
    store = FlakyStore()
    ctrl = FormController(store)
    failures, recoveries = [], []
    ctrl.persist_failed.connect(failures.append)
    ctrl.persist_recovered.connect(lambda: recoveries.append(True))

    store.fail = True
    assert ctrl.set_panel_serial('SN-1') is False
    assert ctrl.document.header.panel_serial == 'SN-1'
    assert not ctrl.last_persist_ok
    assert len(failures) == 1

    # Later edits keep trying
    store.fail = False
    assert ctrl.set_panel_serial('SN-2')
    assert recoveries == [True]
    assert store.saved[ctrl.scope_key].header.panel_serial == 'SN-2'


def test_reset_clears_only_this_scope_and_reapplies_locked_order(store):
    other = FormController(store, locked_production_order='OTHER')
    other.set_panel_serial('keep-me')

    ctrl = FormController(store, locked_production_order='PO-1')
    ctrl.set_panel_serial('SN-1')
    replaced = []
    ctrl.document_replaced.connect(lambda: replaced.append(True))

    ctrl.reset()

    assert replaced == [True]
    assert ctrl.document.header.panel_serial == ''
    assert ctrl.document.header.production_order == 'PO-1'
    assert store.load(ScopeKey.for_order('OTHER')).header.panel_serial == 'keep-me'


def test_to_record_is_serialized_document(controller):
    controller.set_panel_serial('SN-9')
    record = controller.to_record()
    assert record['header']['panelSerial'] == 'SN-9'
    assert 'markup' in record
