"""
Image utilities for layer encoding and decoding

Layers live in memory as QImage and are persisted inside the form document
as data URLs, so everything here converts between those two shapes.
"""

import base64
import binascii
import logging
from typing import Optional

from PyQt6.QtCore import QBuffer, QByteArray, QIODevice
from PyQt6.QtGui import QImage, QColor

logger = logging.getLogger(__name__)

MIME_TYPES = {
    'PNG': 'image/png',
    'JPEG': 'image/jpeg',
}


def create_layer(width: int, height: int, fill: Optional[QColor] = None) -> QImage:
    """
    Create a layer buffer

    Args:
        width: Layer width in pixels
        height: Layer height in pixels
        fill: Fill color (transparent if None)

    Returns:
        Premultiplied ARGB32 QImage
    """
    image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(fill if fill is not None else QColor(0, 0, 0, 0))
    return image


def qimage_to_bytes(image: QImage, fmt: str = 'PNG', quality: int = -1) -> bytes:
    """
    Encode QImage into PNG/JPEG bytes

    Args:
        image: Source image
        fmt: 'PNG' or 'JPEG'
        quality: Encoder quality 0-100 (-1 = Qt default)

    Returns:
        Encoded bytes (empty if encoding failed)
    """
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    ok = image.save(buffer, fmt, quality)
    buffer.close()
    if not ok:
        logger.warning(f"Could not encode {image.width()}x{image.height()} image as {fmt}")
        return b''
    return bytes(data)


def qimage_from_bytes(data: bytes) -> Optional[QImage]:
    """
    Decode PNG/JPEG bytes into a QImage

    Returns:
        QImage or None if the data is not a decodable image
    """
    if not data:
        return None
    image = QImage.fromData(data)
    if image.isNull():
        return None
    return image


def encode_data_url(data: bytes, mime_type: str) -> str:
    """Wrap encoded image bytes in a base64 data URL"""
    encoded = base64.b64encode(data).decode('ascii')
    return f"data:{mime_type};base64,{encoded}"


def decode_data_url(url: Optional[str]) -> Optional[bytes]:
    """
    Extract the payload of a base64 data URL

    Returns:
        Raw bytes, or None if the value is empty or not a base64 data URL
    """
    if not url or not isinstance(url, str) or not url.startswith('data:'):
        return None

    header, sep, payload = url.partition(',')
    if not sep or ';base64' not in header:
        return None

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None


def qimage_to_data_url(image: QImage, fmt: str = 'PNG', quality: int = -1) -> Optional[str]:
    """Encode QImage as a data URL (None if encoding failed)"""
    data = qimage_to_bytes(image, fmt, quality)
    if not data:
        return None
    return encode_data_url(data, MIME_TYPES.get(fmt.upper(), 'application/octet-stream'))


def qimage_from_data_url(url: Optional[str]) -> Optional[QImage]:
    """Decode a data URL into a QImage (None if missing or corrupt)"""
    data = decode_data_url(url)
    if data is None:
        return None
    return qimage_from_bytes(data)


__all__ = [
    'create_layer',
    'qimage_to_bytes',
    'qimage_from_bytes',
    'encode_data_url',
    'decode_data_url',
    'qimage_to_data_url',
    'qimage_from_data_url',
]
