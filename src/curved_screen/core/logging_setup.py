# core/logging_setup.py
"""
Logging for curved_screen, with a custom COORD level for per-segment geometry.

Library modules only ask for a logger:

    from curved_screen.core.logging_setup import get_logger
    logger = get_logger(__name__)
    logger.coord("Per-segment position/rotation detail")

Importing the package never touches handlers or files. Applications (the
command line entry point, or a host that wants our output) call
setup_logging() once; it attaches a file and a console handler to the
"curved_screen" logger only, so the host's root configuration is left alone.

Default display levels: ERROR, WARNING, INFO
Per-segment geometry: set_display_levels(["ERROR", "WARNING", "INFO", "COORD"])
The log file lives in ~/.curvedscreen unless CURVED_SCREEN_LOG_DIR is set.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import List, Union, Optional

# Between INFO (20) and WARNING (30)
COORD_LEVEL = 25
logging.addLevelName(COORD_LEVEL, "COORD")

PACKAGE_LOGGER = "curved_screen"
DEFAULT_DISPLAY_LEVELS = ["ERROR", "WARNING", "INFO"]
LOG_FILE_NAME = "curvedscreen.log"
LOG_DIR_ENV = "CURVED_SCREEN_LOG_DIR"

_log_path: Optional[Path] = None
_pending_levels: Optional[List[str]] = None


def coord(self, message, *args, **kwargs):
    """Log at COORD level"""
    if self.isEnabledFor(COORD_LEVEL):
        self._log(COORD_LEVEL, message, args, **kwargs)


logging.Logger.coord = coord

# Silent until an application configures output
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class LevelFilter(logging.Filter):
    """
    Pass only the listed levels, which may be non-contiguous
    (e.g. ERROR and INFO without COORD).
    """

    def __init__(self, allowed_levels: List[Union[int, str]]):
        super().__init__()
        self.allowed_levels = set()
        for level in allowed_levels:
            if isinstance(level, str):
                name = level.upper()
                number = COORD_LEVEL if name == "COORD" else logging.getLevelName(name)
                if isinstance(number, str):  # unknown name
                    continue
            else:
                number = int(level)
            self.allowed_levels.add(number)

    def filter(self, record):
        return record.levelno in self.allowed_levels


def log_directory() -> Path:
    override = os.environ.get(LOG_DIR_ENV)
    return Path(override) if override else Path.home() / ".curvedscreen"


def _owned_handlers(logger: logging.Logger) -> List[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_curved_screen", False)]


def setup_logging(
        display_levels: Optional[List[str]] = None,
        log_dir: Optional[Path] = None,
        clear_log: bool = True
) -> Path:
    """
    Attach file and console handlers to the package logger.

    Args:
        display_levels: Level names to show; defaults to levels set earlier
                        through set_display_levels(), else DEFAULT_DISPLAY_LEVELS
        log_dir: Directory for the log file (default: log_directory())
        clear_log: Start with an empty log file

    Returns:
        Path to the log file. Calling again returns the same path without
        reconfiguring; use shutdown_logging() first to start over.
    """
    global _log_path

    if _log_path is not None:
        return _log_path

    if display_levels is None:
        display_levels = _pending_levels or DEFAULT_DISPLAY_LEVELS

    log_dir = Path(log_dir) if log_dir is not None else log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(1)  # handlers filter
    logger.propagate = False

    level_filter = LevelFilter(display_levels)

    file_handler = logging.FileHandler(log_path, mode="w" if clear_log else "a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    for handler in (file_handler, console_handler):
        handler.setLevel(1)
        handler.addFilter(level_filter)
        handler._curved_screen = True
        logger.addHandler(handler)

    _log_path = log_path
    return log_path


def shutdown_logging():
    """Detach and close the handlers added by setup_logging()"""
    global _log_path, _pending_levels

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _owned_handlers(logger):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _log_path = None
    _pending_levels = None


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module. Has no side effects; output appears once an
    application calls setup_logging().
    """
    return logging.getLogger(name)


def set_display_levels(levels: List[str]):
    """
    Change which log levels are displayed.

    Before setup_logging() the levels are remembered and applied at setup.

    Example:
        set_display_levels(["ERROR", "WARNING"])
        set_display_levels(["ERROR", "WARNING", "INFO", "COORD", "DEBUG"])
    """
    global _pending_levels

    if _log_path is None:
        _pending_levels = list(levels)
        return

    new_filter = LevelFilter(levels)
    for handler in _owned_handlers(logging.getLogger(PACKAGE_LOGGER)):
        handler.filters = [f for f in handler.filters if not isinstance(f, LevelFilter)]
        handler.addFilter(new_filter)
