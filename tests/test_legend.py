"""Tests for the defect legend"""

from quality_master.markup.legend import (
    FALLBACK_COLOR, LEGEND, color_for_key, get_entry, is_valid_key, legend_keys
)


def test_legend_order_and_colors():
    assert legend_keys() == ('HIGH', 'LOW', 'SAND', 'BONDO', 'OTHER', 'CHIP', 'SCRATCH')
    assert color_for_key('HIGH') == '#ff4da6'
    assert color_for_key('LOW') == '#ffd400'
    assert color_for_key('SCRATCH') == '#9467bd'


def test_keys_are_unique():
    keys = [entry.key for entry in LEGEND]
    assert len(keys) == len(set(keys))


def test_unknown_key_falls_back_to_black():
    assert color_for_key('NOPE') == FALLBACK_COLOR == '#000000'
    assert get_entry('NOPE') is None
    assert not is_valid_key('NOPE')


def test_get_entry_returns_label():
    assert get_entry('SAND').label == 'Needs sanding'
