"""Tests for layer encoding helpers"""

from PyQt6.QtGui import QColor

from quality_master.utils.image_utils import (
    create_layer, decode_data_url, encode_data_url, qimage_from_data_url, qimage_to_data_url
)


def test_new_layer_is_transparent():
    layer = create_layer(20, 10)
    assert (layer.width(), layer.height()) == (20, 10)
    assert layer.pixelColor(5, 5).alpha() == 0


def test_data_url_wraps_payload():
    url = encode_data_url(b'\x00\x01', 'image/png')
    assert url == 'data:image/png;base64,AAE='
    assert decode_data_url(url) == b'\x00\x01'


def test_invalid_data_urls_decode_to_none():
    assert decode_data_url(None) is None
    assert decode_data_url('') is None
    assert decode_data_url('http://example.test/a.png') is None
    assert decode_data_url('data:image/png,plain') is None
    assert decode_data_url('data:image/png;base64,@@@') is None
    assert qimage_from_data_url('data:image/png;base64,AAE=') is None


def test_png_layer_keeps_transparency():
    layer = create_layer(10, 10)
    layer.setPixelColor(3, 3, QColor(255, 0, 0))
    url = qimage_to_data_url(layer, 'PNG')
    assert url.startswith('data:image/png;base64,')

    restored = qimage_from_data_url(url)
    assert restored.pixelColor(3, 3).name() == '#ff0000'
    assert restored.pixelColor(0, 0).alpha() == 0
