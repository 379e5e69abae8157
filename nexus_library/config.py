import os
from pathlib import Path

import appdirs

from .constants import APP_AUTHOR, APP_NAME, DB_FILE_NAME, DB_PATH_ENV_VAR
from .logger import setup_logger

logger = setup_logger()


def get_data_dir() -> Path:
    """Per-user data directory, created on first access"""
    data_dir = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """
    Locate the database file.

    The NEXUS_DB_PATH environment variable wins when set; otherwise the
    database lives in the per-user data directory.
    """
    override = os.environ.get(DB_PATH_ENV_VAR)
    if override:
        db_path = Path(override).expanduser()
        logger.debug(f"Using database path from {DB_PATH_ENV_VAR}: {db_path}")
        return db_path
    return get_data_dir() / DB_FILE_NAME
