"""
Quality Master - Main Entry Point

Panel quality inspection form with a two-layer photo markup canvas.

Usage:
    python -m quality_master.main [--po ORDER]
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from .config import Config
from .utils.logging_config import LoggingConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(prog='quality_master', description=Config.APP_NAME)
    parser.add_argument(
        '--po', dest='production_order', default=None,
        help="Production order to open; locks the order field "
             f"(falls back to ${Config.PRODUCTION_ORDER_ENV})"
    )
    parser.add_argument(
        '--store', dest='store_path', default=None,
        help="Path of the form state database"
    )
    args, _qt_args = parser.parse_known_args(argv)
    return args


def resolve_production_order(cli_value: Optional[str]) -> Optional[str]:
    """The --po argument wins over the environment variable"""
    for value in (cli_value, os.environ.get(Config.PRODUCTION_ORDER_ENV)):
        value = (value or '').strip()
        if value:
            return value
    return None


def setup_application() -> QApplication:
    """
    Initialize and configure the Qt application

    Returns:
        Configured QApplication instance
    """
    app = QApplication(sys.argv)
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    app.setOrganizationName(Config.APP_AUTHOR)
    return app


def main():
    """
    Main entry point for Quality Master

    Creates the application, opens the form for the selected production
    order, and runs the event loop.
    """
    args = parse_args(sys.argv[1:])

    # Setup logging first
    LoggingConfig.setup_logging(Config.get_log_dir())

    logger = LoggingConfig.get_logger(__name__)
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")
    logger.info(f"Log file: {LoggingConfig.get_log_file_path()}")

    production_order = resolve_production_order(args.production_order)
    store_path = Path(args.store_path) if args.store_path else Config.get_store_path()
    logger.info(f"Form store: {store_path}")
    logger.info(f"Production order: {production_order or '(none)'}")

    app = setup_application()

    from .services.form_store import FormStateStore
    from .services.form_controller import FormController
    from .widgets.main_window import MainWindow

    store = FormStateStore(store_path)
    controller = FormController(store, locked_production_order=production_order)
    window = MainWindow(controller)
    window.show()

    logger.info("Application started successfully!")

    exit_code = app.exec()
    store.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
