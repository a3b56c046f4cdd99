"""
Logging configuration for podcast-dl.

All modules log through ``logging.getLogger(__name__)``; this module only
attaches handlers to the ``podcast_dl`` logger. Handlers from the stdlib
serialize ``emit`` with a per-handler lock, so concurrent sync workers can
share them.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from podcast_dl.config import LOG_FILE_NAME

CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

PACKAGE_LOGGER = "podcast_dl"

# Marks handlers installed here so a second call replaces them.
_HANDLER_FLAG = "_podcast_dl_handler"


def configure_logging(
    log_folder: Optional[Path] = None,
    level: Union[int, str] = "INFO",
) -> logging.Logger:
    """
    Configure console and file logging for the package.

    Args:
        log_folder: Folder for ``podcast.log``; no file handler when None
        level: Console log level name or number

    Returns:
        The configured package logger

    Raises:
        OSError: If the log folder cannot be created
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()

    if isinstance(level, str):
        level = level.upper()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    setattr(console, _HANDLER_FLAG, True)
    logger.addHandler(console)

    if log_folder is not None:
        log_folder = Path(log_folder)
        log_folder.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_folder / LOG_FILE_NAME, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        setattr(file_handler, _HANDLER_FLAG, True)
        logger.addHandler(file_handler)

    return logger
