"""
Markup subpackage.

Provides the two-layer annotation canvas model:
- legend: defect categories and stroke colors
- ink_renderer: segment rasterization onto the ink layer
- background_importer: photo letterboxing and re-encoding
- scheduled_task: cancellable snapshot timer
- session: pointer state machine owning both layers

Only the legend is re-exported here; import the other modules directly.
"""

from .legend import LegendEntry, LEGEND, color_for_key, get_entry, legend_keys, is_valid_key

__all__ = [
    'LegendEntry',
    'LEGEND',
    'color_for_key',
    'get_entry',
    'legend_keys',
    'is_valid_key',
]
