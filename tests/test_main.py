"""Tests for command line handling"""

from quality_master.main import parse_args, resolve_production_order


def test_po_argument(monkeypatch):
    monkeypatch.delenv('QUALITY_MASTER_PO', raising=False)
    args = parse_args(['--po', 'PO-77'])
    assert resolve_production_order(args.production_order) == 'PO-77'


def test_environment_fallback(monkeypatch):
    monkeypatch.setenv('QUALITY_MASTER_PO', 'PO-ENV')
    assert resolve_production_order(None) == 'PO-ENV'
    assert resolve_production_order('PO-CLI') == 'PO-CLI'


def test_no_order(monkeypatch):
    monkeypatch.delenv('QUALITY_MASTER_PO', raising=False)
    assert resolve_production_order('  ') is None


def test_unknown_qt_arguments_are_ignored():
    args = parse_args(['-platform', 'offscreen', '--store', 'x.db'])
    assert args.store_path == 'x.db'
    assert args.production_order is None
