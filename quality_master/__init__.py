"""
Quality Master

Panel quality inspection form with a two-layer photo markup canvas.
"""

__version__ = "1.0.0"
__author__ = "Building Composites"

from .config import Config

__all__ = [
    'Config',
]
