"""
Background importer - fits uploaded photos into the fixed canvas frame

Phone photos arrive at many megapixels. They are letterboxed into the canvas
frame and re-encoded as JPEG before they reach the form document, which keeps
the stored record small.

Pattern: Background processing with QRunnable workers
"""

import io
import logging
from typing import Tuple

import cv2
import numpy as np
from PIL import Image, ImageOps
from PyQt6.QtCore import QObject, QRunnable, pyqtSignal

from ..config import Config
from ..utils.coordinate_utils import fit_rect

logger = logging.getLogger(__name__)


class ImageDecodeError(ValueError):
    """Uploaded bytes are not a decodable image"""


def decode_upload(file_bytes: bytes) -> np.ndarray:
    """
    Decode uploaded image bytes into an RGB array.

    EXIF orientation is applied; transparent images are blended over the
    letterbox color.

    Raises:
        ImageDecodeError: If the bytes are not a readable image
    """
    if not file_bytes:
        raise ImageDecodeError("Empty file")

    try:
        with Image.open(io.BytesIO(file_bytes)) as image:
            image.load()
            image = ImageOps.exif_transpose(image)
            rgba = np.asarray(image.convert('RGBA'), dtype=np.float32)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e

    if rgba.shape[0] == 0 or rgba.shape[1] == 0:
        raise ImageDecodeError("Image has no pixels")

    # Alpha blend: result = rgb * alpha + fill * (1 - alpha)
    alpha = rgba[:, :, 3:4] / 255.0
    fill = np.array(Config.BACKGROUND_FILL, dtype=np.float32)
    rgb = rgba[:, :, :3] * alpha + fill * (1 - alpha)
    return np.clip(rgb + 0.5, 0, 255).astype(np.uint8)


def letterbox(rgb: np.ndarray, canvas_size: Tuple[int, int]) -> np.ndarray:
    """
    Scale an RGB array uniformly into the canvas frame and center it.

    Args:
        rgb: Source pixels (H, W, 3)
        canvas_size: (width, height) of the frame

    Returns:
        Array of exactly (canvas_height, canvas_width, 3)
    """
    canvas_width, canvas_height = canvas_size
    source_height, source_width = rgb.shape[:2]

    rect = fit_rect(source_width, source_height, canvas_width, canvas_height)
    width = min(canvas_width, max(1, int(round(rect.width()))))
    height = min(canvas_height, max(1, int(round(rect.height()))))
    x = (canvas_width - width) // 2
    y = (canvas_height - height) // 2

    if (width, height) != (source_width, source_height):
        # INTER_AREA for downscaling, cubic when a small photo is enlarged
        interpolation = cv2.INTER_AREA if width < source_width else cv2.INTER_CUBIC
        rgb = cv2.resize(rgb, (width, height), interpolation=interpolation)

    frame = np.empty((canvas_height, canvas_width, 3), dtype=np.uint8)
    frame[:, :] = Config.BACKGROUND_FILL
    frame[y:y + height, x:x + width] = rgb
    return frame


def encode_jpeg(rgb: np.ndarray, quality: int) -> bytes:
    """Encode an RGB array as JPEG bytes"""
    bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
    ok, buffer = cv2.imencode('.jpg', bgr, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    if not ok:
        raise ImageDecodeError("Could not re-encode image")
    return buffer.tobytes()


def prepare_background(
    file_bytes: bytes,
    canvas_size: Tuple[int, int] = (Config.CANVAS_WIDTH, Config.CANVAS_HEIGHT),
    quality: int = Config.BACKGROUND_JPEG_QUALITY
) -> bytes:
    """
    Turn an uploaded file into a canvas-sized JPEG.

    Args:
        file_bytes: Raw uploaded file
        canvas_size: (width, height) of the canvas frame
        quality: JPEG quality 0-100

    Returns:
        JPEG bytes of exactly canvas_size

    Raises:
        ImageDecodeError: If the upload cannot be decoded
    """
    rgb = decode_upload(file_bytes)
    framed = letterbox(rgb, canvas_size)
    jpeg = encode_jpeg(framed, quality)
    logger.debug(
        f"Background prepared: {rgb.shape[1]}x{rgb.shape[0]} -> "
        f"{canvas_size[0]}x{canvas_size[1]} ({len(file_bytes)} -> {len(jpeg)} bytes)"
    )
    return jpeg


class BackgroundImportSignals(QObject):
    """Signals for BackgroundImportTask"""

    finished = pyqtSignal(bytes)  # jpeg bytes
    failed = pyqtSignal(str)  # error message


class BackgroundImportTask(QRunnable):
    """
    Background task that decodes, letterboxes and re-encodes an upload.

    Usage:
        task = BackgroundImportTask(file_bytes, (900, 450))
        task.signals.finished.connect(on_ready)
        QThreadPool.globalInstance().start(task)
    """

    def __init__(self, file_bytes: bytes, canvas_size: Tuple[int, int],
                 quality: int = Config.BACKGROUND_JPEG_QUALITY):
        super().__init__()
        self.file_bytes = file_bytes
        self.canvas_size = canvas_size
        self.quality = quality
        self.signals = BackgroundImportSignals()

    def run(self):
        """Execute background preparation"""
        try:
            jpeg = prepare_background(self.file_bytes, self.canvas_size, self.quality)
        except ImageDecodeError as e:
            self.signals.failed.emit(str(e))
            return
        self.signals.finished.emit(jpeg)


__all__ = [
    'ImageDecodeError',
    'decode_upload',
    'letterbox',
    'encode_jpeg',
    'prepare_background',
    'BackgroundImportSignals',
    'BackgroundImportTask',
]
