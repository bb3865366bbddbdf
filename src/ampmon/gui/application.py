"""Qt application entry point for the AmpMon desktop GUI.

This module wires up argument parsing and logging, loads the persisted
settings, builds the :class:`~ampmon.gui.main_window.MainWindow`, and runs the
Qt event loop with asyncio on top of it (``PySide6.QtAsyncio``). All GUI
launches, whether through ``python main.py`` or
``python -m ampmon.gui.application``, flow through ``main()`` here.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Tuple

from PySide6 import QtAsyncio
from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication, QMainWindow

from ..config.app_config import AppConfig, load_settings
from ..config.runtime import load_config_or_default
from .main_window import MainWindow

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AmpMon amplifier monitor")
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Amplifier base URL (default: value stored in settings.json)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Optional YAML file with poll interval / peak hold settings",
    )
    parser.add_argument(
        "--show-page",
        action="store_true",
        help="Show the amplifier's own web page next to the dashboard",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: INFO)",
    )
    return parser


def _parse_cli_args(
    argv: list[str],
) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def build_app_config(args: argparse.Namespace) -> AppConfig:
    """Merge persisted settings, the optional YAML tuning file and CLI overrides."""
    settings = load_settings()
    if args.url:
        settings.amplifier_url = args.url
    return AppConfig(settings=settings, monitor=load_config_or_default(args.config))


def create_app(
    argv: list[str] | None = None,
    *,
    app_config: AppConfig | None = None,
    show_page: bool = False,
) -> Tuple[QApplication, QMainWindow]:
    """
    Create the QApplication and main AmpMon window.

    Returns
    -------
    app:
        The QApplication instance (owned by caller).
    window:
        The main window, not yet started.
    """
    qt_args = argv if argv is not None else sys.argv
    app = QApplication.instance() or QApplication(qt_args)

    # Suppress noisy QObject::connect warnings from QStyleHints and similar internals
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")

    window = MainWindow(app_config=app_config, show_page=show_page)
    return app, window


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app_config = build_app_config(args)
    logger.info("Monitoring amplifier at %s", app_config.amplifier_url)
    _app, win = create_app(qt_argv, app_config=app_config, show_page=args.show_page)

    win.show()

    async def _start() -> None:
        # Poll loop tasks must be created on the Qt-backed asyncio loop.
        win.start()

    QtAsyncio.run(_start(), keep_running=True, handle_sigint=True)


if __name__ == "__main__":
    main()
