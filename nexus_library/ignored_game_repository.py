"""
Repository for IgnoredGame database operations

Each method is one transaction on its own connection. Natural keys (unique
id, install path) are enforced by partial unique indexes, so saving a game
that is already ignored fails with sqlite3.IntegrityError.
"""

import sqlite3
from typing import List, Optional, Set

from nexus_library.database import DatabaseManager, unique_row
from nexus_library.models import IgnoredGame, StoreOutcome, StoreResult


class IgnoredGameRepository:
    """Repository for IgnoredGame database operations"""

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> IgnoredGame:
        return IgnoredGame(
            id=row["id"],
            title=row["title"],
            install_path=row["install_path"],
            unique_id=row["unique_id"],
        )

    def save(self, entry: IgnoredGame) -> IgnoredGame:
        """
        Insert a new entry or update an existing one by id.

        New entries get their id assigned in place. Storage errors are
        rolled back and re-raised.
        """
        with self._db.session() as conn:
            if entry.id is None:
                cursor = conn.execute(
                    "INSERT INTO ignored_games (title, install_path, unique_id) VALUES (?, ?, ?)",
                    (entry.title, entry.install_path, entry.unique_id),
                )
                new_id = cursor.lastrowid
            else:
                conn.execute("""
                    INSERT INTO ignored_games (id, title, install_path, unique_id)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        title = excluded.title,
                        install_path = excluded.install_path,
                        unique_id = excluded.unique_id
                """, (entry.id, entry.title, entry.install_path, entry.unique_id))
                new_id = entry.id

        entry.id = new_id
        return entry

    def try_save(self, entry: IgnoredGame) -> StoreResult:
        """Save, reporting ALREADY_EXISTS/FAILED instead of raising"""
        return self._db.attempt(self.save, entry)

    def find_by_id(self, entry_id: int) -> Optional[IgnoredGame]:
        with self._db.session() as conn:
            row = conn.execute("SELECT * FROM ignored_games WHERE id = ?", (entry_id,)).fetchone()
        return self._row_to_entry(row) if row else None

    def find_by_unique_id(self, unique_id: str) -> Optional[IgnoredGame]:
        """Raises AmbiguousResultError if the unique id matches several rows"""
        with self._db.session() as conn:
            rows = conn.execute(
                "SELECT * FROM ignored_games WHERE unique_id = ? LIMIT 2", (unique_id,)
            ).fetchall()
        row = unique_row(rows, "ignored_games", "unique_id", unique_id)
        return self._row_to_entry(row) if row else None

    def find_by_install_path(self, install_path: str) -> Optional[IgnoredGame]:
        """Raises AmbiguousResultError if the path matches several rows"""
        with self._db.session() as conn:
            rows = conn.execute(
                "SELECT * FROM ignored_games WHERE install_path = ? LIMIT 2", (install_path,)
            ).fetchall()
        row = unique_row(rows, "ignored_games", "install_path", install_path)
        return self._row_to_entry(row) if row else None

    def find_all(self) -> List[IgnoredGame]:
        """All ignored games ordered by title"""
        with self._db.session() as conn:
            rows = conn.execute(
                "SELECT * FROM ignored_games ORDER BY title COLLATE NOCASE, id"
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def is_ignored(self, unique_id: str) -> bool:
        with self._db.session() as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM ignored_games WHERE unique_id = ?", (unique_id,)
            ).fetchone()[0]
        return count > 0

    def find_all_unique_ids(self) -> Set[str]:
        """Unique ids of every ignored game, for scans to skip"""
        with self._db.session() as conn:
            rows = conn.execute(
                "SELECT unique_id FROM ignored_games WHERE unique_id IS NOT NULL"
            ).fetchall()
        return {row[0] for row in rows}

    def delete(self, entry_id: int) -> StoreOutcome:
        """Delete by id; deleting a missing id is a no-op"""
        with self._db.session() as conn:
            cursor = conn.execute("DELETE FROM ignored_games WHERE id = ?", (entry_id,))
            deleted = cursor.rowcount
        return StoreOutcome.SUCCESS if deleted else StoreOutcome.NOT_FOUND

    def delete_entry(self, entry: Optional[IgnoredGame]) -> StoreOutcome:
        if entry is None or entry.id is None:
            return StoreOutcome.NOT_FOUND
        return self.delete(entry.id)

    def delete_by_unique_id(self, unique_id: str) -> StoreOutcome:
        with self._db.session() as conn:
            cursor = conn.execute("DELETE FROM ignored_games WHERE unique_id = ?", (unique_id,))
            deleted = cursor.rowcount
        return StoreOutcome.SUCCESS if deleted else StoreOutcome.NOT_FOUND

    def count(self) -> int:
        with self._db.session() as conn:
            return conn.execute("SELECT COUNT(*) FROM ignored_games").fetchone()[0]
