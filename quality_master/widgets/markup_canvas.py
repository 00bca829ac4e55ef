"""
Markup Canvas Widget

Displays the background and ink layers of an AnnotationSession, scaled
uniformly into the widget, and forwards mouse input to the session in
widget coordinates together with the rect the canvas occupies.
"""

from typing import Optional

from PyQt6.QtCore import QRectF, QSize, Qt
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import QSizePolicy, QWidget

from ..markup.session import AnnotationSession
from ..utils.coordinate_utils import fit_rect


class MarkupCanvas(QWidget):
    """
    Drawing surface for the markup layers.

    The backing layers keep their fixed resolution; only the display scales.
    """

    def __init__(self, session: AnnotationSession, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._session = session

        self.setMouseTracking(False)
        self.setCursor(Qt.CursorShape.CrossCursor)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(300, 150)

        session.layers_changed.connect(self.update)

    @property
    def session(self) -> AnnotationSession:
        return self._session

    def sizeHint(self) -> QSize:
        return self._session.canvas_size

    def display_rect(self) -> QRectF:
        """Rect, in widget coordinates, that the canvas is drawn into"""
        size = self._session.canvas_size
        return fit_rect(size.width(), size.height(), self.width(), self.height())

    # ==================== Painting ====================

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            rect = self.display_rect()
            if rect.isEmpty():
                return

            painter.fillRect(rect, QColor(255, 255, 255))
            painter.drawImage(rect, self._session.background)
            painter.drawImage(rect, self._session.ink)

            painter.setPen(QPen(QColor('#555555'), 1))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(rect.adjusted(0, 0, -1, -1))
        finally:
            painter.end()

    # ==================== Mouse Events ====================

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            if self._session.pointer_down(event.position(), self.display_rect()):
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._session.is_dragging:
            self._session.pointer_move(event.position(), self.display_rect())
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self._session.is_dragging and event.button() == Qt.MouseButton.LeftButton:
            self._session.pointer_up()
            event.accept()
        else:
            super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        """Leaving the canvas ends the stroke"""
        self._session.pointer_leave()
        super().leaveEvent(event)

    def focusOutEvent(self, event):
        self._session.pointer_cancel()
        super().focusOutEvent(event)


__all__ = ['MarkupCanvas']
