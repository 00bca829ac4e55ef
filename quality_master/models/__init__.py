"""Data models for Quality Master"""

from .form_document import (
    FormDocumentError,
    MarkupTool,
    ToolState,
    SectionTemplate,
    SECTION_TEMPLATES,
    Header,
    ChecklistItem,
    ChecklistSection,
    MarkupState,
    FormDocument,
    default_document,
)

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
