"""
Database Manager for the game library
SQLite-based persistent storage for games, ignored games and settings

Every store operation opens its own connection through session(), runs a
single transaction and closes the connection again. No connection is held
between calls, so store methods are safe to call from any worker thread.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, List, Optional

from nexus_library.exceptions import AmbiguousResultError
from nexus_library.logger import setup_logger
from nexus_library.models import StoreOutcome, StoreResult

logger = setup_logger()


class DatabaseManager:
    """
    Owns the database file location and schema.

    Constructed once at startup and handed to each repository.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self.initialized = False
        logger.info(f"Database path: {self.db_path}")

    def initialize(self):
        """Create the database file and schema if needed"""
        if self.initialized:
            return
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._create_schema()
        self.initialized = True
        logger.info("Database initialized successfully")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def session(self):
        """
        Open a connection for a single transaction.

        Commits when the block exits normally. Any exception rolls the
        transaction back and is re-raised to the caller.

        Usage:
            with db_manager.session() as conn:
                conn.execute(...)
        """
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as e:
            logger.warning(f"Constraint violation, rolling back: {e}")
            conn.rollback()
            raise
        except Exception as e:
            logger.error(f"Database transaction failed: {e}", exc_info=True)
            conn.rollback()
            raise
        finally:
            conn.close()

    def attempt(self, operation: Callable, *args, **kwargs) -> StoreResult:
        """
        Run a store operation and report its outcome instead of raising.

        Constraint violations map to ALREADY_EXISTS and other storage errors
        to FAILED. An operation that itself returns a StoreOutcome has that
        outcome passed through.
        """
        try:
            value = operation(*args, **kwargs)
        except sqlite3.IntegrityError as e:
            return StoreResult(StoreOutcome.ALREADY_EXISTS, error=str(e))
        except sqlite3.Error as e:
            return StoreResult(StoreOutcome.FAILED, error=str(e))

        if isinstance(value, StoreOutcome):
            return StoreResult(value)
        return StoreResult(StoreOutcome.SUCCESS, value)

    def _create_schema(self):
        """Create database schema"""
        conn = self._connect()
        cursor = conn.cursor()

        try:
            # Games table; unique_id is indexed but not unique, duplicates
            # are collapsed by the library service
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS games (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    platform TEXT NOT NULL,
                    unique_id TEXT,
                    install_path TEXT,
                    executable_path TEXT,
                    favorite BOOLEAN NOT NULL DEFAULT 0,
                    cover_image_url TEXT,
                    description TEXT,
                    developer TEXT,
                    release_date TEXT,
                    added_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    last_played TIMESTAMP
                )
            """)

            # Games the user chose to hide from the library and from scans
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS ignored_games (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    install_path TEXT,
                    unique_id TEXT,
                    ignored_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            # Key/value application settings, values are JSON
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_games_unique_id ON games(unique_id)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_games_platform ON games(platform)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_games_title ON games(title COLLATE NOCASE)")

            # Natural keys: unique id when present, otherwise install path
            cursor.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS ux_ignored_games_unique_id
                ON ignored_games(unique_id)
                WHERE unique_id IS NOT NULL
            """)
            cursor.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS ux_ignored_games_install_path
                ON ignored_games(install_path)
                WHERE unique_id IS NULL AND install_path IS NOT NULL
            """)

            conn.commit()
            logger.info("Database schema created successfully")

        except Exception as e:
            logger.error(f"Error creating database schema: {e}", exc_info=True)
            conn.rollback()
            raise
        finally:
            conn.close()


def unique_row(rows: List[sqlite3.Row], table: str, column: str, value) -> Optional[sqlite3.Row]:
    """
    Reduce a lookup result to at most one row.

    Callers should fetch two rows at most; a second row means the natural
    key is not unique in storage and is reported rather than resolved.
    """
    if not rows:
        return None
    if len(rows) > 1:
        raise AmbiguousResultError(table, column, value)
    return rows[0]
