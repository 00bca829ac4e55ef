"""
Logging setup for Quality Master

Everything goes to quality_master.log at DEBUG; the terminal gets INFO and up.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "quality_master.log"
FILE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
CONSOLE_FORMAT = '[%(levelname)s] %(message)s'

# Third-party loggers that flood DEBUG output while decoding images
QUIET_LOGGERS = ('PIL',)


class LoggingConfig:
    """Process-wide logging configuration"""

    _log_file_path: Optional[Path] = None

    @classmethod
    def setup_logging(cls, log_dir: Path, console_level: int = logging.INFO):
        """Attach file and console handlers to the root logger (once per process)"""
        if cls._log_file_path is not None:
            return

        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root.addHandler(console_handler)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.INFO)

        cls._log_file_path = log_file

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        return logging.getLogger(name)

    @classmethod
    def get_log_file_path(cls) -> Optional[Path]:
        return cls._log_file_path


__all__ = ['LoggingConfig']
