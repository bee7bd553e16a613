"""File-only logging setup.

The TUI owns stdout/stderr, so records never go to the terminal. A file
handler is attached when a log file is configured or the level is more
verbose than the default; otherwise the package logger stays silent.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import DEFAULT_LOG_LEVEL, Settings

APP_NAME = "slingshot"
LOG_FILENAME = "slingshot.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def configure_logging(settings: Settings) -> Path | None:
    """Attach a file handler to the ``slingshot`` logger per ``settings``.

    Returns the log file in use, or ``None`` when logging stays disabled or
    the file cannot be opened.
    """
    package_logger = logging.getLogger(APP_NAME)
    package_logger.setLevel(settings.log_level)
    log_path = settings.log_file
    if log_path is None and settings.log_level >= DEFAULT_LOG_LEVEL:
        return None
    if log_path is None:
        log_path = default_log_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return log_path


__all__ = ["APP_NAME", "LOG_FILENAME", "default_log_path", "configure_logging"]
