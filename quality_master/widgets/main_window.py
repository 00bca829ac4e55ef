"""
MainWindow - Inspection form window

Layout:
    Header: Production Order | Panel Serial | Submit | Reset
    Scroll area:
        Markup: toolbar + canvas
        Checklist sections
    Status bar: save/import warnings
"""

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QFileDialog, QFormLayout, QGroupBox, QHBoxLayout, QLineEdit, QMainWindow, QMessageBox,
    QPushButton, QScrollArea, QVBoxLayout, QWidget
)

from ..config import Config
from ..markup.session import AnnotationSession
from ..services.export_service import ExportService, generate_export_filename
from ..services.form_controller import FormController
from ..services.remote_record_service import RemoteRecordService
from .checklist_panel import ChecklistPanel
from .markup_canvas import MarkupCanvas
from .markup_toolbar import MarkupToolbar

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tif *.tiff *.webp);;All files (*)"


class MainWindow(QMainWindow):
    """Main application window for one inspection form"""

    def __init__(self, controller: FormController, session: Optional[AnnotationSession] = None,
                 remote_service: Optional[RemoteRecordService] = None,
                 export_service: Optional[ExportService] = None):
        super().__init__()
        self._controller = controller
        self._session = session or AnnotationSession(controller, parent=self)
        self._remote_service = remote_service or RemoteRecordService()
        self._export_service = export_service or ExportService()

        self.setWindowTitle(f"{Config.APP_NAME} - Inspection Form")
        self.resize(Config.DEFAULT_WINDOW_WIDTH, Config.DEFAULT_WINDOW_HEIGHT)

        self._build_ui()
        self._connect_signals()
        self._refresh_header()

    # ==================== UI ====================

    def _build_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)

        # Header
        header_box = QGroupBox("Panel")
        header_layout = QHBoxLayout(header_box)
        form = QFormLayout()

        self._order_edit = QLineEdit()
        self._order_edit.setPlaceholderText("Production order")
        form.addRow("Production Order:", self._order_edit)

        self._serial_edit = QLineEdit()
        self._serial_edit.setPlaceholderText("Panel serial")
        form.addRow("Panel Serial:", self._serial_edit)
        header_layout.addLayout(form, 1)

        self._submit_btn = QPushButton("Submit Record")
        self._submit_btn.setToolTip("Save this form to the shared record store")
        self._submit_btn.setEnabled(self._remote_service.is_configured)
        header_layout.addWidget(self._submit_btn, 0, Qt.AlignmentFlag.AlignTop)

        self._reset_btn = QPushButton("Reset Form")
        header_layout.addWidget(self._reset_btn, 0, Qt.AlignmentFlag.AlignTop)
        layout.addWidget(header_box)

        # Scrollable body
        body = QWidget()
        body_layout = QVBoxLayout(body)

        markup_box = QGroupBox("Markup")
        markup_layout = QVBoxLayout(markup_box)
        self._toolbar = MarkupToolbar(self._session)
        self._canvas = MarkupCanvas(self._session)
        markup_layout.addWidget(self._toolbar)
        markup_layout.addWidget(self._canvas, 1)
        body_layout.addWidget(markup_box)

        self._checklist = ChecklistPanel(self._controller)
        body_layout.addWidget(self._checklist)
        body_layout.addStretch()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(body)
        layout.addWidget(scroll, 1)

        self.setCentralWidget(central)
        self.statusBar()

    def _connect_signals(self):
        self._order_edit.textEdited.connect(self._controller.set_production_order)
        self._serial_edit.textEdited.connect(self._controller.set_panel_serial)
        self._reset_btn.clicked.connect(self._on_reset_clicked)
        self._submit_btn.clicked.connect(self._on_submit_clicked)

        self._toolbar.upload_requested.connect(self._on_upload_requested)
        self._toolbar.download_requested.connect(self._on_download_requested)

        self._controller.document_replaced.connect(self._refresh_header)
        self._controller.persist_failed.connect(self._show_warning)
        self._controller.persist_recovered.connect(
            lambda: self.statusBar().showMessage("Form saved", Config.STATUS_MESSAGE_TIMEOUT_MS)
        )
        self._session.import_failed.connect(self._show_warning)
        self._session.import_finished.connect(self.statusBar().clearMessage)

    def _refresh_header(self):
        header = self._controller.document.header
        self._order_edit.setText(header.production_order)
        self._order_edit.setReadOnly(self._controller.is_order_locked)
        if self._controller.is_order_locked:
            self._order_edit.setToolTip("Set when the form was opened")
        self._serial_edit.setText(header.panel_serial)

    def _show_warning(self, message: str):
        self.statusBar().showMessage(message, Config.STATUS_MESSAGE_TIMEOUT_MS)

    # ==================== Handlers ====================

    def _on_upload_requested(self):
        path, _ = QFileDialog.getOpenFileName(self, "Upload Background Image", "", IMAGE_FILE_FILTER)
        if not path:
            return
        try:
            file_bytes = Path(path).read_bytes()
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            self._show_warning(f"Could not read {Path(path).name}")
            return
        self.statusBar().showMessage("Preparing image...")
        self._session.import_background_async(file_bytes)

    def _on_download_requested(self):
        header = self._controller.document.header
        filename = generate_export_filename(header.production_order, header.panel_serial)
        default_path = Config.get_exports_dir() / filename

        path, _ = QFileDialog.getSaveFileName(
            self, "Download Markup", str(default_path), "PNG image (*.png)"
        )
        if not path:
            return

        # The save dialog already confirmed any overwrite
        written = self._export_service.export_png(
            self._session, header, overwrite=True, path=Path(path)
        )
        if written is None:
            self._show_warning("Could not write the markup image")
        else:
            self.statusBar().showMessage(f"Saved {written.name}", Config.STATUS_MESSAGE_TIMEOUT_MS)

    def _on_reset_clicked(self):
        reply = QMessageBox.question(
            self, "Reset Form",
            "Clear every field and the markup for this production order?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        if reply == QMessageBox.StandardButton.Yes:
            self._controller.reset()
            self.statusBar().showMessage("Form reset", Config.STATUS_MESSAGE_TIMEOUT_MS)

    def _on_submit_clicked(self):
        self._session.save_drawing()
        success, error = self._remote_service.save(
            self._controller.document.header.panel_serial, self._controller.to_record()
        )
        if success:
            QMessageBox.information(self, "Submit Record", "Form saved to the record store.")
        else:
            QMessageBox.warning(self, "Submit Record", f"Could not save the form:\n{error}")

    def closeEvent(self, event):
        """Flush any pending ink snapshot before closing"""
        self._session.pointer_cancel()
        if self._session.snapshot_pending:
            self._session.save_drawing()
        super().closeEvent(event)


__all__ = ['MainWindow']
