"""
Global configuration for Quality Master

Canvas geometry, markup defaults, persistence limits and per-user paths.
"""

import json
import os
import sys
from pathlib import Path
from typing import Final, Optional


class Config:
    """Central configuration class for all application settings"""

    # Application metadata
    APP_NAME: Final[str] = "Quality Master"
    APP_VERSION: Final[str] = "1.0.0"
    APP_AUTHOR: Final[str] = "Building Composites"

    # Paths
    APP_ROOT: Final[Path] = Path(__file__).parent

    # Markup canvas (fixed backing resolution, both layers)
    CANVAS_WIDTH: Final[int] = 900
    CANVAS_HEIGHT: Final[int] = 450

    # Brush settings
    MIN_BRUSH_WIDTH: Final[int] = 2
    MAX_BRUSH_WIDTH: Final[int] = 30
    DEFAULT_BRUSH_WIDTH: Final[int] = 6
    DEFAULT_CATEGORY: Final[str] = "HIGH"

    # Persistence
    SNAPSHOT_INTERVAL_MS: Final[int] = 350  # Max one ink snapshot per interval while dragging
    BACKGROUND_JPEG_QUALITY: Final[int] = 80
    BACKGROUND_FILL: Final[tuple] = (255, 255, 255)  # Letterbox color (RGB)
    STORE_QUOTA_BYTES: Final[int] = 5 * 1024 * 1024  # Same budget as browser local storage
    FORM_SCHEMA_VERSION: Final[int] = 10
    NO_ORDER_SCOPE: Final[str] = "NO_PO"
    DEFAULT_STORE_NAME: Final[str] = "form_state.db"

    # Remote upsert endpoint
    REMOTE_SAVE_URL_ENV: Final[str] = "QUALITY_MASTER_SAVE_URL"
    REMOTE_TIMEOUT_SEC: Final[int] = 10

    # Scope selector fallback (when --po is not given)
    PRODUCTION_ORDER_ENV: Final[str] = "QUALITY_MASTER_PO"

    # Window settings
    DEFAULT_WINDOW_WIDTH: Final[int] = 1100
    DEFAULT_WINDOW_HEIGHT: Final[int] = 900
    STATUS_MESSAGE_TIMEOUT_MS: Final[int] = 6000

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """
        Get user data directory.

        Uses system AppData/Local (Windows) or .local/share (Linux)
        so saved forms persist across application updates.
        """
        # Portable mode: keep everything next to the application
        portable_flag = cls.APP_ROOT.parent / 'portable.txt'
        if portable_flag.exists():
            user_dir = cls.APP_ROOT.parent / 'data'
        elif sys.platform == 'win32':
            base_path = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~')))
            user_dir = base_path / 'QualityMaster'
        elif sys.platform == 'darwin':
            user_dir = Path.home() / 'Library' / 'Application Support' / 'QualityMaster'
        else:
            user_dir = Path.home() / '.local' / 'share' / 'QualityMaster'

        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_store_path(cls) -> Path:
        """Get full path to the form state database"""
        return cls.get_user_data_dir() / cls.DEFAULT_STORE_NAME

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get log directory"""
        return cls.get_user_data_dir() / 'logs'

    @classmethod
    def get_exports_dir(cls) -> Path:
        """Get default folder for flattened markup exports"""
        exports_dir = cls.get_user_data_dir() / 'exports'
        exports_dir.mkdir(parents=True, exist_ok=True)
        return exports_dir

    @classmethod
    def get_settings_file(cls) -> Path:
        """Get settings JSON file path"""
        return cls.get_user_data_dir() / 'settings.json'

    @classmethod
    def load_settings(cls) -> dict:
        """
        Load user settings

        Returns:
            dict: Settings, or an empty dict if the file is missing or invalid
        """
        settings_file = cls.get_settings_file()
        if settings_file.exists():
            try:
                with open(settings_file, 'r', encoding='utf-8') as f:
                    settings = json.load(f)
                if isinstance(settings, dict):
                    return settings
            except (OSError, json.JSONDecodeError):
                pass
        return {}

    @classmethod
    def get_remote_save_url(cls) -> Optional[str]:
        """
        Get the remote upsert endpoint.

        The environment variable wins over the settings file.
        """
        url = os.environ.get(cls.REMOTE_SAVE_URL_ENV, '').strip()
        if url:
            return url
        url = str(cls.load_settings().get('remote_save_url', '') or '').strip()
        return url or None

    @classmethod
    def clamp_brush_width(cls, width: int) -> int:
        """Clamp a brush width to the supported range"""
        return max(cls.MIN_BRUSH_WIDTH, min(cls.MAX_BRUSH_WIDTH, int(width)))


# Export for convenient imports
__all__ = ['Config']
