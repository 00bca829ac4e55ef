"""
Markup Toolbar Widget

Two-row toolbar for the markup canvas:
- Legend category buttons (pen colors) and the eraser
- Brush size slider
- Upload / Clear Drawing / Clear Background / Save Drawing / Download PNG
"""

from typing import Dict, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QButtonGroup, QFrame, QHBoxLayout, QLabel, QPushButton, QSlider, QVBoxLayout, QWidget
)

from ..config import Config
from ..markup.legend import get_entry, legend_keys
from ..markup.session import AnnotationSession
from ..models.form_document import MarkupTool


class MarkupToolbar(QWidget):
    """
    Controls bound to an AnnotationSession.

    Tool changes go straight to the session; file actions are emitted
    as signals for the window to handle (they need dialogs).
    """

    upload_requested = pyqtSignal()
    download_requested = pyqtSignal()

    ERASER_ID = 100

    def __init__(self, session: AnnotationSession, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._session = session
        self._category_buttons: Dict[str, QPushButton] = {}

        self._build_ui()
        self._sync_from_session()

        session.tool_state_changed.connect(self._sync_from_session)

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        # Legend + eraser
        tools_row = QHBoxLayout()
        tools_row.setSpacing(4)

        self._tool_group = QButtonGroup(self)
        self._tool_group.setExclusive(True)

        for index, key in enumerate(legend_keys()):
            entry = get_entry(key)
            btn = QPushButton(entry.label)
            btn.setCheckable(True)
            btn.setToolTip(f"Mark {entry.label.lower()} areas")
            btn.setStyleSheet(self._category_style(entry.color))
            self._tool_group.addButton(btn, index)
            self._category_buttons[entry.key] = btn
            tools_row.addWidget(btn)

        sep = QFrame()
        sep.setFrameShape(QFrame.Shape.VLine)
        sep.setStyleSheet("background: #444;")
        tools_row.addWidget(sep)

        self._eraser_btn = QPushButton("Eraser")
        self._eraser_btn.setCheckable(True)
        self._eraser_btn.setToolTip("Erase ink (the background photo is not affected)")
        self._tool_group.addButton(self._eraser_btn, self.ERASER_ID)
        tools_row.addWidget(self._eraser_btn)
        tools_row.addStretch()

        self._tool_group.idClicked.connect(self._on_tool_clicked)
        layout.addLayout(tools_row)

        # Brush size + actions
        actions_row = QHBoxLayout()
        actions_row.setSpacing(6)

        actions_row.addWidget(QLabel("Brush:"))
        self._brush_slider = QSlider(Qt.Orientation.Horizontal)
        self._brush_slider.setRange(Config.MIN_BRUSH_WIDTH, Config.MAX_BRUSH_WIDTH)
        self._brush_slider.setFixedWidth(140)
        self._brush_slider.valueChanged.connect(self._on_brush_changed)
        actions_row.addWidget(self._brush_slider)

        self._brush_label = QLabel()
        self._brush_label.setFixedWidth(36)
        actions_row.addWidget(self._brush_label)

        actions_row.addStretch()

        upload_btn = QPushButton("Upload Image")
        upload_btn.clicked.connect(lambda: self.upload_requested.emit())
        actions_row.addWidget(upload_btn)

        clear_drawing_btn = QPushButton("Clear Drawing")
        clear_drawing_btn.clicked.connect(self._session.clear_drawing)
        actions_row.addWidget(clear_drawing_btn)

        clear_background_btn = QPushButton("Clear Background")
        clear_background_btn.setToolTip("Remove the photo and all drawing")
        clear_background_btn.clicked.connect(self._session.clear_background)
        actions_row.addWidget(clear_background_btn)

        save_btn = QPushButton("Save Drawing")
        save_btn.clicked.connect(self._session.save_drawing)
        actions_row.addWidget(save_btn)

        download_btn = QPushButton("Download PNG")
        download_btn.clicked.connect(lambda: self.download_requested.emit())
        actions_row.addWidget(download_btn)

        layout.addLayout(actions_row)

    @staticmethod
    def _category_style(color: str) -> str:
        return f"""
            QPushButton {{
                border: 2px solid {color};
                border-radius: 3px;
                padding: 4px 8px;
            }}
            QPushButton:checked {{
                background-color: {color};
                color: #111111;
                font-weight: bold;
            }}
        """

    # ==================== Sync ====================

    def _sync_from_session(self):
        """Reflect the session's tool state without feeding it back"""
        state = self._session.tool_state

        if state.tool == MarkupTool.ERASER:
            button = self._eraser_btn
        else:
            button = self._category_buttons.get(state.category_key)
        if button is not None and not button.isChecked():
            button.setChecked(True)

        self._brush_slider.blockSignals(True)
        self._brush_slider.setValue(state.brush_width)
        self._brush_slider.blockSignals(False)
        self._brush_label.setText(f"{state.brush_width}px")

    # ==================== Handlers ====================

    def _on_tool_clicked(self, button_id: int):
        if button_id == self.ERASER_ID:
            self._session.select_eraser()
        else:
            self._session.select_category(legend_keys()[button_id])

    def _on_brush_changed(self, value: int):
        self._brush_label.setText(f"{value}px")
        self._session.set_brush_width(value)


__all__ = ['MarkupToolbar']
