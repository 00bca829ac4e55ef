"""Widgets for Quality Master"""

from .markup_canvas import MarkupCanvas
from .markup_toolbar import MarkupToolbar
from .checklist_panel import ChecklistPanel, ChecklistSectionBox
from .main_window import MainWindow

__all__ = [
    'MarkupCanvas',
    'MarkupToolbar',
    'ChecklistPanel',
    'ChecklistSectionBox',
    'MainWindow',
]
