"""Logging configuration for ordertrack."""

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .utils import data_dir

LOGGER_NAME = "ordertrack"
LOG_FILE = "ordertrack.log"


def setup_logging(log_dir: Path | None = None, console: bool = True) -> logging.Logger:
    """
    Configure the package logger.

    Writes to a daily rotating file (7 days kept) under the data directory
    and, optionally, to stderr. The level comes from ORDERTRACK_LOG_LEVEL
    (default WARNING). Safe to call more than once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level_name = os.environ.get("ORDERTRACK_LOG_LEVEL", "WARNING").upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))

    # Avoid duplicate handlers if called more than once
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    else:
        logger.addHandler(logging.NullHandler())

    log_dir = log_dir or data_dir() / "logs"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_dir / LOG_FILE,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
    except OSError as e:
        logger.warning("File logging disabled: %s", e)
        return logger

    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    return logger
