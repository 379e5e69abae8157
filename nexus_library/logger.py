import logging
import sys
from pathlib import Path

import appdirs

from .constants import APP_AUTHOR, APP_NAME, LOG_FILE_NAME

LOGGER_NAME = "NexusLibrary"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def get_log_path(log_file_name: str = LOG_FILE_NAME) -> Path:
    """Log file location: beside a frozen executable, else the per-user log directory"""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent / log_file_name

    log_dir = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / log_file_name


def setup_logger(log_file_name: str = LOG_FILE_NAME) -> logging.Logger:
    """
    Configure the shared library logger once and return it.

    Later calls return the configured logger without adding handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    for handler in (
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(get_log_path(log_file_name), encoding="utf-8"),
    ):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Records stay out of the root logger
    logger.propagate = False
    return logger
