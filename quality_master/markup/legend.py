"""
Defect legend - category keys, display labels and stroke colors
"""

from dataclasses import dataclass
from typing import Optional, Tuple

FALLBACK_COLOR = '#000000'


@dataclass(frozen=True)
class LegendEntry:
    """One markup category"""
    key: str
    label: str
    color: str


LEGEND: Tuple[LegendEntry, ...] = (
    LegendEntry('HIGH', 'High', '#ff4da6'),      # pink
    LegendEntry('LOW', 'Low', '#ffd400'),        # yellow
    LegendEntry('SAND', 'Needs sanding', '#1f77b4'),
    LegendEntry('BONDO', 'Needs bondo', '#ff7f0e'),
    LegendEntry('OTHER', 'Other', '#2ca02c'),
    LegendEntry('CHIP', 'Chip', '#d62728'),
    LegendEntry('SCRATCH', 'Scratch', '#9467bd'),
)

_BY_KEY = {entry.key: entry for entry in LEGEND}


def get_entry(key: str) -> Optional[LegendEntry]:
    return _BY_KEY.get(key)


def color_for_key(key: str) -> str:
    """Stroke color for a category key (black for unknown keys)"""
    entry = _BY_KEY.get(key)
    return entry.color if entry else FALLBACK_COLOR


def legend_keys() -> Tuple[str, ...]:
    return tuple(entry.key for entry in LEGEND)


def is_valid_key(key: str) -> bool:
    return key in _BY_KEY


__all__ = [
    'LegendEntry',
    'LEGEND',
    'FALLBACK_COLOR',
    'get_entry',
    'color_for_key',
    'legend_keys',
    'is_valid_key',
]
