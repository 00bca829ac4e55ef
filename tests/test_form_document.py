"""Tests for the persisted form document model"""

import pytest

from quality_master.models.form_document import (
    SECTION_TEMPLATES, FormDocument, FormDocumentError, MarkupTool, default_document
)


def test_default_document_shape():
    doc = default_document()
    assert list(doc.sections) == ['ip6', 'ip8', 'visual']
    assert len(doc.section('ip6').items) == 11
    assert len(doc.section('ip8').items) == 7
    assert len(doc.section('visual').items) == 6
    assert doc.section('visual').signoffs == {
        'approvedForPrimerInitials': '',
        'approvedForTopcoatInitials': '',
        'qcFinalApprovalInitials': '',
    }
    assert doc.markup.tool == MarkupTool.PEN
    assert doc.markup.category_key == 'HIGH'
    assert doc.markup.brush_width == 6
    assert doc.markup.background_image is None
    assert doc.markup.ink_image is None


def test_to_dict_uses_camel_case_keys():
    doc = default_document('PO-9')
    data = doc.to_dict()
    assert data['header'] == {'panelSerial': '', 'productionOrder': 'PO-9'}
    assert data['ip6']['readyForPrimerInitials'] == ''
    assert data['ip8']['removeFromPaintlineInitials'] == ''
    assert data['markup'] == {
        'tool': 'PEN',
        'categoryKey': 'HIGH',
        'brushWidth': 6,
        'backgroundImage': None,
        'inkImage': None,
    }


def test_from_dict_restores_edited_fields():
    doc = default_document('PO-9')
    doc.header.panel_serial = 'SN-1'
    doc.section('ip6').items[2].initials = 'JD'
    doc.section('visual').signoffs['qcFinalApprovalInitials'] = 'QC'
    doc.section('ip8').notes = 'runs near edge'
    doc.markup.tool = MarkupTool.ERASER
    doc.markup.brush_width = 12

    restored = FormDocument.from_dict(doc.to_dict())
    assert restored == doc


def test_missing_keys_fall_back_to_defaults():
    restored = FormDocument.from_dict({'header': {'panelSerial': 'SN-1'}})
    assert restored.header.panel_serial == 'SN-1'
    assert restored.header.production_order == ''
    assert [t.key for t in SECTION_TEMPLATES] == list(restored.sections)
    assert restored.markup.brush_width == 6


def test_unknown_category_and_out_of_range_width_are_normalized():
    restored = FormDocument.from_dict({'markup': {'categoryKey': 'PURPLE', 'brushWidth': 500}})
    assert restored.markup.category_key == 'HIGH'
    assert restored.markup.brush_width == 30


@pytest.mark.parametrize('data', [
    [],
    'text',
    {'header': []},
    {'ip6': {'items': 'nope'}},
    {'ip6': {'date': 5}},
    {'markup': {'tool': 'LASER'}},
    {'markup': {'brushWidth': 'wide'}},
    {'markup': {'brushWidth': True}},
    {'markup': {'brushWidth': float('inf')}},
    {'markup': {'brushWidth': float('nan')}},
    {'markup': {'inkImage': 42}},
])
def test_malformed_data_raises(data):
    with pytest.raises(FormDocumentError):
        FormDocument.from_dict(data)
