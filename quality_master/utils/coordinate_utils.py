"""
Coordinate conversion for the markup canvas.

The canvas is displayed at whatever size the layout gives it, while both
layers keep a fixed backing resolution. Pointer positions must be converted
from widget space into backing pixel space before drawing.
"""

from typing import Optional

from PyQt6.QtCore import QPointF, QRectF, QSize


def scale_factors(element_rect: QRectF, canvas_size: QSize) -> Optional[tuple]:
    """
    Get the (x, y) factors from rendered element size to backing size.

    Returns:
        (scale_x, scale_y), or None if the element has no usable geometry
    """
    if element_rect is None or not element_rect.isValid():
        return None
    if element_rect.width() <= 0 or element_rect.height() <= 0:
        return None
    return (
        canvas_size.width() / element_rect.width(),
        canvas_size.height() / element_rect.height(),
    )


def map_to_canvas(pos: QPointF, element_rect: QRectF, canvas_size: QSize) -> Optional[QPointF]:
    """
    Map a pointer position into canvas pixel space.

    Horizontal and vertical factors are computed independently, so the
    mapping stays correct when the element is stretched non-uniformly.

    Args:
        pos: Pointer position in the same space as element_rect
        element_rect: Rectangle the canvas is rendered into
        canvas_size: Backing pixel size of the canvas layers

    Returns:
        Point in canvas pixels, or None if the element is not laid out yet
    """
    factors = scale_factors(element_rect, canvas_size)
    if factors is None:
        return None

    scale_x, scale_y = factors
    return QPointF(
        (pos.x() - element_rect.x()) * scale_x,
        (pos.y() - element_rect.y()) * scale_y,
    )


def fit_rect(source_width: int, source_height: int,
             frame_width: int, frame_height: int) -> QRectF:
    """
    Largest rect with the source aspect ratio that fits inside the frame, centered.

    Used both for letterboxing uploaded photos into the canvas and for
    laying the canvas out inside its widget.
    """
    if source_width <= 0 or source_height <= 0:
        return QRectF()

    scale = min(frame_width / source_width, frame_height / source_height)
    width = source_width * scale
    height = source_height * scale
    return QRectF(
        (frame_width - width) / 2,
        (frame_height - height) / 2,
        width,
        height,
    )


__all__ = ['scale_factors', 'map_to_canvas', 'fit_rect']
