"""
FormDocument - The persisted inspection record

One document per production order: header identifiers, the three checklist
sections and the markup sub-document (tool state plus both layer images).

Serialized shape (camelCase keys, shared with the remote record store):

    {
        "header": {"panelSerial": "", "productionOrder": ""},
        "ip6": {"date": "", "notes": "", "items": [...], "readyForPrimerInitials": ""},
        "ip8": {...},
        "visual": {...},
        "markup": {"tool": "PEN", "categoryKey": "HIGH", "brushWidth": 6,
                   "backgroundImage": null, "inkImage": null}
    }
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..config import Config
from ..markup.legend import is_valid_key


class FormDocumentError(ValueError):
    """Raised when serialized data cannot be turned into a FormDocument"""


class MarkupTool(Enum):
    """Active markup tool"""
    PEN = 'PEN'
    ERASER = 'ERASER'


@dataclass(frozen=True)
class ToolState:
    """Tool settings applied to the next drawn segment"""
    tool: MarkupTool = MarkupTool.PEN
    category_key: str = Config.DEFAULT_CATEGORY
    brush_width: int = Config.DEFAULT_BRUSH_WIDTH


@dataclass(frozen=True)
class SectionTemplate:
    """Static layout of one checklist section"""
    key: str
    title: str
    items: Tuple[Tuple[str, str], ...]      # (item_id, label)
    signoffs: Tuple[Tuple[str, str], ...]   # (field_name, label)


SECTION_TEMPLATES: Tuple[SectionTemplate, ...] = (
    SectionTemplate(
        key='ip6',
        title='Inspection Point 6 – Pre-Paint Line Inspection',
        items=(
            ('ip6_1', 'A-surface flat with no visible depressions under raking light'),
            ('ip6_2', 'Fillet corners acceptable (rounded, not flattened)'),
            ('ip6_3', 'No surface porosity or pinholes visible'),
            ('ip6_4', 'No high spots'),
            ('ip6_5', 'No low spots'),
            ('ip6_6', 'No unsanded substrate or spot-primed areas'),
            ('ip6_7', 'Pin holes and bun holes filled and feathered'),
            ('ip6_8', 'First 3" of returns sanded and acceptable'),
            ('ip6_9', 'No witness tool lines remain'),
            ('ip6_10', 'Clearly label “Ready for paint” on the bag side of panel'),
            ('ip6_11', 'Write the inspector’s initials on the bag side of panel'),
        ),
        signoffs=(
            ('readyForPrimerInitials', 'Ready for Primer'),
        ),
    ),
    SectionTemplate(
        key='ip8',
        title='Inspection Point 8 – Post-Paint Inspection (Coraflon)',
        items=(
            ('ip8_1', 'Inspected from ~10 ft'),
            ('ip8_2', 'High-gloss finish consistent across panel'),
            ('ip8_3', 'No visible paint defects (runs, dirt nibs, fisheyes)'),
            ('ip8_4', 'Orange peel within acceptable visual standard'),
            ('ip8_5', 'No dramatic waves or lines visible'),
            ('ip8_6', 'No tool witness lines telegraphing'),
            ('ip8_7', 'Fillet corners remain rounded (not flat)'),
        ),
        signoffs=(
            ('removeFromPaintlineInitials', 'Remove from the Paintline'),
        ),
    ),
    SectionTemplate(
        key='visual',
        title='Visual Inspection Guide',
        items=(
            ('vis_1', 'Pinholes / Pitting'),
            ('vis_2', 'Embeds verified'),
            ('vis_3', 'Threading verified'),
            ('vis_4', 'Corners / Contours'),
            ('vis_5', 'Air Pockets / Bugholes'),
            ('vis_6', 'Uniform Flatness'),
        ),
        signoffs=(
            ('approvedForPrimerInitials', 'Approved for primer'),
            ('approvedForTopcoatInitials', 'Approved for topcoat'),
            ('qcFinalApprovalInitials', 'QC Final Approval'),
        ),
    ),
)

TEMPLATES_BY_KEY = {template.key: template for template in SECTION_TEMPLATES}


@dataclass
class Header:
    production_order: str = ''
    panel_serial: str = ''


@dataclass
class ChecklistItem:
    id: str
    label: str
    initials: str = ''


@dataclass
class ChecklistSection:
    key: str
    date: str = ''
    notes: str = ''
    items: List[ChecklistItem] = field(default_factory=list)
    signoffs: Dict[str, str] = field(default_factory=dict)

    @property
    def template(self) -> SectionTemplate:
        return TEMPLATES_BY_KEY[self.key]

    def get_item(self, item_id: str) -> Optional[ChecklistItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


@dataclass
class MarkupState:
    """Markup sub-document: tool state plus encoded layers (data URLs)"""
    tool: MarkupTool = MarkupTool.PEN
    category_key: str = Config.DEFAULT_CATEGORY
    brush_width: int = Config.DEFAULT_BRUSH_WIDTH
    background_image: Optional[str] = None
    ink_image: Optional[str] = None

    @property
    def tool_state(self) -> ToolState:
        return ToolState(self.tool, self.category_key, self.brush_width)


@dataclass
class FormDocument:
    header: Header = field(default_factory=Header)
    sections: Dict[str, ChecklistSection] = field(default_factory=dict)
    markup: MarkupState = field(default_factory=MarkupState)

    def section(self, key: str) -> ChecklistSection:
        return self.sections[key]

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'header': {
                'panelSerial': self.header.panel_serial,
                'productionOrder': self.header.production_order,
            },
        }
        for key, section in self.sections.items():
            section_data = {
                'date': section.date,
                'notes': section.notes,
                'items': [
                    {'id': item.id, 'label': item.label, 'initials': item.initials}
                    for item in section.items
                ],
            }
            section_data.update(section.signoffs)
            data[key] = section_data

        data['markup'] = {
            'tool': self.markup.tool.value,
            'categoryKey': self.markup.category_key,
            'brushWidth': self.markup.brush_width,
            'backgroundImage': self.markup.background_image,
            'inkImage': self.markup.ink_image,
        }
        return data

    @classmethod
    def from_dict(cls, data: Any) -> 'FormDocument':
        """
        Build a document from serialized data.

        Missing keys fall back to defaults; wrongly typed values raise
        FormDocumentError so callers can treat the record as unusable.
        """
        if not isinstance(data, dict):
            raise FormDocumentError(f"Expected an object, got {type(data).__name__}")

        doc = default_document()

        header = _dict_field(data, 'header')
        doc.header.panel_serial = _str_field(header, 'panelSerial')
        doc.header.production_order = _str_field(header, 'productionOrder')

        for template in SECTION_TEMPLATES:
            section_data = _dict_field(data, template.key)
            section = doc.sections[template.key]
            section.date = _str_field(section_data, 'date')
            section.notes = _str_field(section_data, 'notes')

            items = section_data.get('items') or []
            if not isinstance(items, list):
                raise FormDocumentError(f"'{template.key}.items' must be a list")
            for item_data in items:
                if not isinstance(item_data, dict):
                    raise FormDocumentError(f"'{template.key}.items' entries must be objects")
                item = section.get_item(str(item_data.get('id', '')))
                if item is not None:
                    item.initials = _str_field(item_data, 'initials')

            for field_name, _label in template.signoffs:
                section.signoffs[field_name] = _str_field(section_data, field_name)

        markup = _dict_field(data, 'markup')
        tool_value = markup.get('tool', MarkupTool.PEN.value)
        try:
            doc.markup.tool = MarkupTool(tool_value)
        except ValueError:
            raise FormDocumentError(f"Unknown markup tool: {tool_value!r}")

        category_key = markup.get('categoryKey', Config.DEFAULT_CATEGORY)
        if not isinstance(category_key, str) or not is_valid_key(category_key):
            category_key = Config.DEFAULT_CATEGORY
        doc.markup.category_key = category_key

        brush_width = markup.get('brushWidth', Config.DEFAULT_BRUSH_WIDTH)
        if (isinstance(brush_width, bool) or not isinstance(brush_width, (int, float))
                or not math.isfinite(brush_width)):
            raise FormDocumentError(f"Invalid brush width: {brush_width!r}")
        doc.markup.brush_width = Config.clamp_brush_width(brush_width)

        doc.markup.background_image = _optional_str_field(markup, 'backgroundImage')
        doc.markup.ink_image = _optional_str_field(markup, 'inkImage')
        return doc


def default_document(production_order: str = '') -> FormDocument:
    """Fresh document with empty answers and default tool settings"""
    doc = FormDocument(header=Header(production_order=production_order))
    for template in SECTION_TEMPLATES:
        doc.sections[template.key] = ChecklistSection(
            key=template.key,
            items=[ChecklistItem(item_id, label) for item_id, label in template.items],
            signoffs={field_name: '' for field_name, _label in template.signoffs},
        )
    return doc


# ==================== Field helpers ====================

def _dict_field(data: Dict, name: str) -> Dict:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise FormDocumentError(f"'{name}' must be an object")
    return value


def _str_field(data: Dict, name: str) -> str:
    value = data.get(name)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise FormDocumentError(f"'{name}' must be a string")
    return value


def _optional_str_field(data: Dict, name: str) -> Optional[str]:
    value = data.get(name)
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise FormDocumentError(f"'{name}' must be a string or null")
    return value


__all__ = [
    'FormDocumentError',
    'MarkupTool',
    'ToolState',
    'SectionTemplate',
    'SECTION_TEMPLATES',
    'Header',
    'ChecklistItem',
    'ChecklistSection',
    'MarkupState',
    'FormDocument',
    'default_document',
]
