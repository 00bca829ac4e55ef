"""
Export Service - Writes the flattened markup as a PNG file

Output filename: markup[_{production_order}][_{panel_serial}].png
"""

import logging
import re
from pathlib import Path
from typing import Optional

from ..config import Config
from ..models.form_document import Header

logger = logging.getLogger(__name__)

# Characters that are not allowed in Windows, macOS or Linux filenames
_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
MAX_SEGMENT_LENGTH = 50


def _filename_segment(value: Optional[str]) -> str:
    """Header value reduced to a filename-safe segment ('' if nothing is left)"""
    segment = _UNSAFE_CHARS.sub('_', (value or '').strip())
    segment = re.sub(r'_+', '_', segment).strip(' .')
    return segment[:MAX_SEGMENT_LENGTH]


def generate_export_filename(production_order: Optional[str], panel_serial: Optional[str]) -> str:
    """
    Build the export filename from the form header.

    Empty segments are left out, so a blank form exports as markup.png.

    Examples:
        >>> generate_export_filename('PO-100', 'SN7')
        'markup_PO-100_SN7.png'
        >>> generate_export_filename('', 'SN7')
        'markup_SN7.png'
    """
    parts = ['markup']
    for value in (production_order, panel_serial):
        segment = _filename_segment(value)
        if segment:
            parts.append(segment)
    return '_'.join(parts) + '.png'


def next_free_path(path: Path) -> Path:
    """path itself, or path with _2, _3, ... before the suffix if taken"""
    candidate = path
    counter = 2
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        counter += 1
    return candidate


class ExportService:
    """
    Saves flattened markup images to disk.

    Usage:
        service = ExportService()
        path = service.export_png(session, controller.document.header)
    """

    def export_png(self, session, header: Header, folder: Optional[Path] = None,
                   overwrite: bool = False, path: Optional[Path] = None) -> Optional[Path]:
        """
        Flatten the session's layers and write them as PNG.

        Args:
            session: AnnotationSession to flatten
            header: Form header used for the filename
            folder: Output folder (defaults to Config.get_exports_dir())
            overwrite: Replace an existing file instead of numbering a new one
            path: Exact destination chosen by the user; folder and the
                generated filename are ignored when given

        Returns:
            Path written, or None if encoding or writing failed
        """
        png_bytes = session.export_png_bytes()
        if not png_bytes:
            logger.error("Flattened markup could not be encoded as PNG")
            return None

        if path is None:
            if folder is None:
                folder = Config.get_exports_dir()
            filename = generate_export_filename(header.production_order, header.panel_serial)
            path = Path(folder) / filename
        return self.write_png(png_bytes, path, overwrite)

    def write_png(self, png_bytes: bytes, path: Path, overwrite: bool = True) -> Optional[Path]:
        """
        Write PNG bytes to an explicit path.

        The bytes go to a sibling .tmp file that replaces the target only once
        fully written, so an interrupted export never leaves a truncated PNG.
        """
        path = Path(path)
        tmp_path = path.with_name(path.name + '.tmp')
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if not overwrite:
                path = next_free_path(path)
                tmp_path = path.with_name(path.name + '.tmp')
            tmp_path.write_bytes(png_bytes)
            tmp_path.replace(path)
        except OSError as e:
            logger.error(f"Failed to export markup to {path}: {e}")
            self._discard(tmp_path)
            return None

        logger.info(f"Exported markup: {path} ({len(png_bytes)} bytes)")
        return path

    @staticmethod
    def _discard(tmp_path: Path):
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temp file {tmp_path}: {e}")


__all__ = ['generate_export_filename', 'next_free_path', 'ExportService']
