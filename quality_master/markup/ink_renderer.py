"""
Ink renderer - rasterizes stroke segments onto the ink layer

Each pointer-move produces one straight segment; curves come from the
event rate, not from smoothing.
"""

from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtGui import QColor, QImage, QPainter, QPen

from ..models.form_document import MarkupTool, ToolState
from .legend import color_for_key

ERASER_COLOR = QColor(0, 0, 0, 255)


def create_pen(tool_state: ToolState) -> QPen:
    """Create pen for the tool state (round caps and joins, full opacity)"""
    if tool_state.tool == MarkupTool.ERASER:
        color = QColor(ERASER_COLOR)
    else:
        color = QColor(color_for_key(tool_state.category_key))

    pen = QPen(color, tool_state.brush_width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def composition_mode(tool_state: ToolState) -> QPainter.CompositionMode:
    """Pen paints over existing ink; eraser punches alpha out of it"""
    if tool_state.tool == MarkupTool.ERASER:
        return QPainter.CompositionMode.CompositionMode_DestinationOut
    return QPainter.CompositionMode.CompositionMode_SourceOver


def draw_segment(ink: QImage, start: QPointF, end: QPointF, tool_state: ToolState):
    """
    Draw one straight segment onto the ink layer in place.

    Args:
        ink: Ink layer (premultiplied ARGB32)
        start: Segment start in canvas pixels
        end: Segment end in canvas pixels
        tool_state: Tool, category and width active at draw time
    """
    if ink is None or ink.isNull():
        return

    painter = QPainter(ink)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setCompositionMode(composition_mode(tool_state))
        painter.setPen(create_pen(tool_state))
        painter.drawLine(start, end)
    finally:
        painter.end()


def clear_layer(image: QImage):
    """Reset a layer to full transparency"""
    if image is None or image.isNull():
        return
    image.fill(QColor(0, 0, 0, 0))


__all__ = ['create_pen', 'composition_mode', 'draw_segment', 'clear_layer']
