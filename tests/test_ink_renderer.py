"""Tests for segment rasterization on the ink layer"""

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QColor, QImage, QPainter

from quality_master.markup.ink_renderer import clear_layer, composition_mode, create_pen, draw_segment
from quality_master.models.form_document import MarkupTool, ToolState
from quality_master.utils.image_utils import create_layer

PEN_HIGH = ToolState(MarkupTool.PEN, 'HIGH', 10)
ERASER = ToolState(MarkupTool.ERASER, 'HIGH', 20)


def test_pen_uses_category_color_with_round_caps():
    pen = create_pen(PEN_HIGH)
    assert pen.color().name() == '#ff4da6'
    assert pen.widthF() == 10
    assert composition_mode(PEN_HIGH) == QPainter.CompositionMode.CompositionMode_SourceOver
    assert composition_mode(ERASER) == QPainter.CompositionMode.CompositionMode_DestinationOut


def test_pen_segment_is_opaque_on_centerline_and_leaves_rest_transparent():
    ink = create_layer(900, 450)
    draw_segment(ink, QPointF(100, 100), QPointF(300, 100), PEN_HIGH)

    center = ink.pixelColor(200, 100)
    assert center.alpha() == 255
    assert center.name() == '#ff4da6'
    assert ink.pixelColor(200, 200).alpha() == 0
    assert ink.pixelColor(600, 100).alpha() == 0


def test_eraser_clears_ink_on_its_path():
    ink = create_layer(900, 450)
    draw_segment(ink, QPointF(100, 100), QPointF(300, 100), PEN_HIGH)
    assert ink.pixelColor(150, 100).alpha() == 255

    draw_segment(ink, QPointF(150, 60), QPointF(150, 140), ERASER)

    assert ink.pixelColor(150, 100).alpha() == 0
    # Ink away from the eraser path is untouched
    assert ink.pixelColor(250, 100).alpha() == 255


def test_eraser_over_the_pen_path_clears_the_centerline():
    ink = create_layer(900, 450)
    path = [QPointF(100, 100), QPointF(300, 100), QPointF(300, 250)]
    for start, end in zip(path, path[1:]):
        draw_segment(ink, start, end, PEN_HIGH)

    same_width_eraser = ToolState(MarkupTool.ERASER, 'HIGH', PEN_HIGH.brush_width)
    for start, end in zip(path, path[1:]):
        draw_segment(ink, start, end, same_width_eraser)

    for x in (100, 150, 200, 250, 300):
        assert ink.pixelColor(x, 100).alpha() == 0
    for y in (150, 200, 250):
        assert ink.pixelColor(300, y).alpha() == 0


def test_eraser_on_empty_layer_stays_transparent():
    ink = create_layer(100, 100)
    draw_segment(ink, QPointF(10, 50), QPointF(90, 50), ERASER)
    assert ink.pixelColor(50, 50).alpha() == 0


def test_later_pen_color_wins_over_earlier():
    ink = create_layer(200, 200)
    draw_segment(ink, QPointF(20, 100), QPointF(180, 100), PEN_HIGH)
    draw_segment(ink, QPointF(100, 20), QPointF(100, 180), ToolState(MarkupTool.PEN, 'SAND', 10))
    assert ink.pixelColor(100, 100).name() == '#1f77b4'


def test_null_image_is_ignored():
    draw_segment(QImage(), QPointF(0, 0), QPointF(10, 10), PEN_HIGH)


def test_clear_layer():
    ink = create_layer(50, 50, QColor(255, 0, 0))
    clear_layer(ink)
    assert ink.pixelColor(25, 25).alpha() == 0
