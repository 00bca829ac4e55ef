"""Utility functions for Quality Master"""

from .coordinate_utils import scale_factors, map_to_canvas, fit_rect
from .image_utils import (
    create_layer,
    qimage_to_bytes,
    qimage_from_bytes,
    encode_data_url,
    decode_data_url,
    qimage_to_data_url,
    qimage_from_data_url,
)

__all__ = [
    # Coordinates
    'scale_factors',
    'map_to_canvas',
    'fit_rect',
    # Images
    'create_layer',
    'qimage_to_bytes',
    'qimage_from_bytes',
    'encode_data_url',
    'decode_data_url',
    'qimage_to_data_url',
    'qimage_from_data_url',
]
