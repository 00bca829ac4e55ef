"""
AnnotationSession - Pointer state machine and owner of the markup layers

Holds the background and ink layers, turns pointer events into ink segments,
and snapshots the ink layer into the form document:

    IDLE --pointer_down--> DRAGGING --pointer_move--> DRAGGING
    DRAGGING --pointer_up / pointer_cancel / pointer_leave--> IDLE

While dragging, snapshots are deferred and run at most once per interval.
Releasing the pointer cancels the deferred snapshot and writes one
immediately, so the stored ink always includes the final segment.
"""

import logging
from enum import Enum
from typing import Optional

from PyQt6.QtCore import QObject, QPointF, QRectF, QSize, QThreadPool, pyqtSignal
from PyQt6.QtGui import QColor, QImage, QPainter

from ..config import Config
from ..models.form_document import MarkupState, MarkupTool, ToolState
from ..services.form_controller import FormController
from ..utils.coordinate_utils import fit_rect, map_to_canvas
from ..utils.image_utils import (
    create_layer,
    encode_data_url,
    qimage_from_bytes,
    qimage_from_data_url,
    qimage_to_bytes,
    qimage_to_data_url,
)
from .background_importer import BackgroundImportTask, ImageDecodeError, prepare_background
from .ink_renderer import clear_layer, draw_segment
from .legend import is_valid_key
from .scheduled_task import ScheduledTask

logger = logging.getLogger(__name__)


class DragState(Enum):
    """Pointer drag lifecycle"""
    IDLE = 0
    DRAGGING = 1


class AnnotationSession(QObject):
    """
    Two-layer markup canvas model.

    Widgets forward raw pointer positions plus the rect the canvas is drawn
    into; they never touch the layer buffers directly.
    """

    # Signals
    layers_changed = pyqtSignal()
    tool_state_changed = pyqtSignal()
    snapshot_saved = pyqtSignal()
    import_failed = pyqtSignal(str)  # user-facing message
    import_finished = pyqtSignal()

    def __init__(self, controller: FormController,
                 canvas_size: QSize = QSize(Config.CANVAS_WIDTH, Config.CANVAS_HEIGHT),
                 snapshot_interval_ms: int = Config.SNAPSHOT_INTERVAL_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._controller = controller
        self._canvas_size = QSize(canvas_size)

        self._background = create_layer(canvas_size.width(), canvas_size.height())
        self._ink = create_layer(canvas_size.width(), canvas_size.height())

        # Drag state
        self._drag_state = DragState.IDLE
        self._last_point: Optional[QPointF] = None

        self._snapshot_task = ScheduledTask(snapshot_interval_ms, self.snapshot, self)
        self._pending_imports = set()
        # Bumped whenever the document is replaced; stale uploads are dropped
        self._import_generation = 0

        controller.document_replaced.connect(self.reload_from_document)
        self.reload_from_document()

    # ==================== Properties ====================

    @property
    def canvas_size(self) -> QSize:
        return QSize(self._canvas_size)

    @property
    def background(self) -> QImage:
        return self._background

    @property
    def ink(self) -> QImage:
        return self._ink

    @property
    def markup(self) -> MarkupState:
        return self._controller.document.markup

    @property
    def tool_state(self) -> ToolState:
        return self.markup.tool_state

    @property
    def drag_state(self) -> DragState:
        return self._drag_state

    @property
    def is_dragging(self) -> bool:
        return self._drag_state == DragState.DRAGGING

    @property
    def snapshot_pending(self) -> bool:
        return self._snapshot_task.is_pending

    # ==================== Tool State ====================

    def select_category(self, key: str):
        """Switch to the pen with a legend category"""
        if not is_valid_key(key):
            raise KeyError(f"Unknown legend category: {key}")
        self.markup.tool = MarkupTool.PEN
        self.markup.category_key = key
        self._tool_state_committed()

    def select_eraser(self):
        self.markup.tool = MarkupTool.ERASER
        self._tool_state_committed()

    def set_brush_width(self, width: int):
        self.markup.brush_width = Config.clamp_brush_width(width)
        self._tool_state_committed()

    def _tool_state_committed(self):
        self._controller.commit()
        self.tool_state_changed.emit()

    # ==================== Pointer Events ====================

    def pointer_down(self, pos: QPointF, element_rect: QRectF) -> bool:
        """
        Begin a drag at pos. Nothing is drawn until the first move.

        Returns:
            True if a drag started
        """
        point = map_to_canvas(pos, element_rect, self._canvas_size)
        if point is None:
            return False

        self._drag_state = DragState.DRAGGING
        self._last_point = point
        return True

    def pointer_move(self, pos: QPointF, element_rect: QRectF) -> bool:
        """
        Extend the drag by one segment.

        Returns:
            True if a segment was drawn
        """
        if self._drag_state != DragState.DRAGGING or self._last_point is None:
            return False

        point = map_to_canvas(pos, element_rect, self._canvas_size)
        if point is None:
            return False

        draw_segment(self._ink, self._last_point, point, self.tool_state)
        self._last_point = point
        self._snapshot_task.arm()
        self.layers_changed.emit()
        return True

    def pointer_up(self):
        """End the drag and write the ink layer immediately"""
        if self._drag_state != DragState.DRAGGING:
            return

        self._drag_state = DragState.IDLE
        self._last_point = None
        self._snapshot_task.flush()

    def pointer_cancel(self):
        self.pointer_up()

    def pointer_leave(self):
        self.pointer_up()

    # ==================== Snapshots ====================

    def snapshot(self) -> bool:
        """
        Store the ink layer in the form document and persist it.

        Returns:
            True if the store accepted the write
        """
        ink_url = qimage_to_data_url(self._ink, 'PNG')
        if ink_url is None:
            logger.warning("Ink layer could not be encoded; keeping the last stored ink")
        else:
            self.markup.ink_image = ink_url
        ok = self._controller.commit()
        logger.debug(f"Ink snapshot written (persisted={ok})")
        self.snapshot_saved.emit()
        return ok

    def save_drawing(self) -> bool:
        """Manual save point"""
        self._snapshot_task.cancel()
        return self.snapshot()

    # ==================== Clearing ====================

    def clear_drawing(self):
        """Erase all ink, keep the background"""
        self._snapshot_task.cancel()
        clear_layer(self._ink)
        self.markup.ink_image = None
        self._controller.commit()
        self.layers_changed.emit()

    def clear_background(self):
        """Remove the photo and all ink"""
        self._snapshot_task.cancel()
        clear_layer(self._background)
        clear_layer(self._ink)
        self.markup.background_image = None
        self.markup.ink_image = None
        self._controller.commit()
        self.layers_changed.emit()

    # ==================== Background Import ====================

    def import_background(self, file_bytes: bytes) -> bool:
        """
        Decode, letterbox and install an uploaded photo.

        On failure the previous background is kept and import_failed is emitted.

        Returns:
            True if the background was replaced
        """
        size = (self._canvas_size.width(), self._canvas_size.height())
        try:
            jpeg = prepare_background(file_bytes, size)
        except ImageDecodeError as e:
            self._report_import_failure(str(e))
            return False
        return self._apply_background(jpeg)

    def import_background_async(self, file_bytes: bytes, thread_pool: Optional[QThreadPool] = None):
        """
        Prepare the upload on a worker thread; the canvas is updated when it finishes.
        """
        size = (self._canvas_size.width(), self._canvas_size.height())
        task = BackgroundImportTask(file_bytes, size)
        task.setAutoDelete(False)
        self._pending_imports.add(task)
        generation = self._import_generation

        def on_finished(jpeg: bytes):
            self._pending_imports.discard(task)
            if generation != self._import_generation:
                logger.debug("Dropping upload started before the form was replaced")
                return
            self._apply_background(jpeg)

        def on_failed(message: str):
            self._pending_imports.discard(task)
            if generation != self._import_generation:
                return
            self._report_import_failure(message)

        task.signals.finished.connect(on_finished)
        task.signals.failed.connect(on_failed)
        (thread_pool or QThreadPool.globalInstance()).start(task)

    def _apply_background(self, jpeg: bytes) -> bool:
        image = qimage_from_bytes(jpeg)
        if image is None:
            self._report_import_failure("Could not read the prepared image")
            return False

        self._paint_fitted(self._background, image)
        self.markup.background_image = encode_data_url(jpeg, 'image/jpeg')
        self._controller.commit()
        self.layers_changed.emit()
        self.import_finished.emit()
        logger.info(f"Background replaced ({len(jpeg)} bytes)")
        return True

    def _report_import_failure(self, message: str):
        logger.warning(f"Background import failed: {message}")
        self.import_failed.emit(f"That file could not be used as a background image. ({message})")

    # ==================== Rehydration ====================

    def reload_from_document(self):
        """Rebuild both layers from the document's stored images"""
        self._snapshot_task.cancel()
        self._import_generation += 1
        self._drag_state = DragState.IDLE
        self._last_point = None

        clear_layer(self._background)
        background = qimage_from_data_url(self.markup.background_image)
        if background is not None:
            self._paint_fitted(self._background, background)
        elif self.markup.background_image:
            logger.warning("Stored background image is unreadable; showing an empty canvas")

        clear_layer(self._ink)
        ink = qimage_from_data_url(self.markup.ink_image)
        if ink is not None:
            painter = QPainter(self._ink)
            try:
                painter.drawImage(0, 0, ink)
            finally:
                painter.end()
        elif self.markup.ink_image:
            logger.warning("Stored ink layer is unreadable; starting with empty ink")

        self.layers_changed.emit()
        self.tool_state_changed.emit()

    def _paint_fitted(self, layer: QImage, image: QImage):
        clear_layer(layer)
        target = fit_rect(image.width(), image.height(), layer.width(), layer.height())
        painter = QPainter(layer)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            painter.drawImage(target, image)
        finally:
            painter.end()

    # ==================== Flatten/Export ====================

    def export_flattened(self) -> QImage:
        """
        Composite background then ink onto a fresh opaque buffer.

        Reads the layers only; stored state is untouched.
        """
        output = create_layer(self._canvas_size.width(), self._canvas_size.height(),
                              QColor(255, 255, 255))
        painter = QPainter(output)
        try:
            painter.drawImage(0, 0, self._background)
            painter.drawImage(0, 0, self._ink)
        finally:
            painter.end()
        return output

    def export_png_bytes(self) -> bytes:
        return qimage_to_bytes(self.export_flattened(), 'PNG')


__all__ = ['DragState', 'AnnotationSession']
