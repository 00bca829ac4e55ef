"""
Checklist Panel Widget

One group box per checklist section: date, an initials field per item,
notes and the sign-off initials. Edits are written through the
FormController as they are typed.
"""

from typing import Dict, Optional, Tuple

from PyQt6.QtWidgets import (
    QFormLayout, QGridLayout, QGroupBox, QLabel, QLineEdit, QPlainTextEdit, QVBoxLayout, QWidget
)

from ..models.form_document import SECTION_TEMPLATES, SectionTemplate
from ..services.form_controller import FormController


class ChecklistSectionBox(QGroupBox):
    """Editor for one checklist section"""

    def __init__(self, controller: FormController, template: SectionTemplate,
                 parent: Optional[QWidget] = None):
        super().__init__(template.title, parent)
        self._controller = controller
        self._template = template
        self._item_edits: Dict[str, QLineEdit] = {}
        self._signoff_edits: Dict[str, QLineEdit] = {}
        self._build_ui()

    def _build_ui(self):
        layout = QVBoxLayout(self)

        self._date_edit = QLineEdit()
        self._date_edit.setPlaceholderText("YYYY-MM-DD")
        self._date_edit.setMaximumWidth(160)
        self._date_edit.textEdited.connect(
            lambda text: self._controller.set_section_field(self._template.key, 'date', text)
        )
        date_form = QFormLayout()
        date_form.addRow("Date:", self._date_edit)
        layout.addLayout(date_form)

        grid = QGridLayout()
        grid.setColumnStretch(0, 1)
        for row, (item_id, label) in enumerate(self._template.items):
            text = QLabel(label)
            text.setWordWrap(True)
            edit = QLineEdit()
            edit.setPlaceholderText("Initials")
            edit.setMaximumWidth(90)
            edit.textEdited.connect(
                lambda value, item_id=item_id: self._controller.set_item_initials(
                    self._template.key, item_id, value
                )
            )
            self._item_edits[item_id] = edit
            grid.addWidget(text, row, 0)
            grid.addWidget(edit, row, 1)
        layout.addLayout(grid)

        self._notes_edit = QPlainTextEdit()
        self._notes_edit.setPlaceholderText("Notes")
        self._notes_edit.setFixedHeight(60)
        self._notes_edit.textChanged.connect(self._on_notes_changed)
        layout.addWidget(self._notes_edit)

        signoff_form = QFormLayout()
        for field_name, label in self._template.signoffs:
            edit = QLineEdit()
            edit.setPlaceholderText("Initials")
            edit.setMaximumWidth(90)
            edit.textEdited.connect(
                lambda value, field_name=field_name: self._controller.set_section_field(
                    self._template.key, field_name, value
                )
            )
            self._signoff_edits[field_name] = edit
            signoff_form.addRow(f"{label}:", edit)
        layout.addLayout(signoff_form)

    def _on_notes_changed(self):
        text = self._notes_edit.toPlainText()
        section = self._controller.document.section(self._template.key)
        if section.notes != text:
            self._controller.set_section_field(self._template.key, 'notes', text)

    def refresh(self):
        """Load field values from the current document"""
        section = self._controller.document.section(self._template.key)
        self._date_edit.setText(section.date)
        for item in section.items:
            edit = self._item_edits.get(item.id)
            if edit is not None:
                edit.setText(item.initials)
        for field_name, edit in self._signoff_edits.items():
            edit.setText(section.signoffs.get(field_name, ''))
        if self._notes_edit.toPlainText() != section.notes:
            self._notes_edit.setPlainText(section.notes)


class ChecklistPanel(QWidget):
    """All checklist sections stacked vertically"""

    def __init__(self, controller: FormController, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._controller = controller
        self._boxes: Tuple[ChecklistSectionBox, ...] = ()
        self._build_ui()
        self.refresh()

        controller.document_replaced.connect(self.refresh)

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        boxes = []
        for template in SECTION_TEMPLATES:
            box = ChecklistSectionBox(self._controller, template)
            layout.addWidget(box)
            boxes.append(box)
        self._boxes = tuple(boxes)

    def refresh(self):
        for box in self._boxes:
            box.refresh()


__all__ = ['ChecklistSectionBox', 'ChecklistPanel']
