"""
Repository for Game database operations
Same discipline as the ignored-games store: one connection and one
transaction per call.
"""

import sqlite3
from datetime import datetime
from typing import List, Optional

from nexus_library.database import DatabaseManager
from nexus_library.models import Game, Platform, StoreOutcome, StoreResult

_COLUMNS = (
    "title",
    "platform",
    "unique_id",
    "install_path",
    "executable_path",
    "favorite",
    "cover_image_url",
    "description",
    "developer",
    "release_date",
    "added_at",
    "last_played",
)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class GameRepository:
    """Repository for Game database operations"""

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager

    @staticmethod
    def _row_to_game(row: sqlite3.Row) -> Game:
        return Game(
            id=row["id"],
            title=row["title"],
            platform=Platform(row["platform"]),
            unique_id=row["unique_id"],
            install_path=row["install_path"],
            executable_path=row["executable_path"],
            favorite=bool(row["favorite"]),
            cover_image_url=row["cover_image_url"],
            description=row["description"],
            developer=row["developer"],
            release_date=row["release_date"],
            added_at=datetime.fromisoformat(row["added_at"]),
            last_played=datetime.fromisoformat(row["last_played"]) if row["last_played"] else None,
        )

    @staticmethod
    def _game_values(game: Game) -> tuple:
        return (
            game.title,
            str(game.platform),
            game.unique_id,
            game.install_path,
            game.executable_path,
            int(game.favorite),
            game.cover_image_url,
            game.description,
            game.developer,
            game.release_date,
            game.added_at.isoformat(),
            game.last_played.isoformat() if game.last_played else None,
        )

    def _select(self, where: str = "", params: tuple = (), order_by: str = "id") -> List[Game]:
        sql = "SELECT * FROM games"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order_by}"
        with self._db.session() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_game(row) for row in rows]

    def save(self, game: Game) -> Game:
        """
        Insert a new game or update an existing one by id.

        New games get their id assigned in place.
        """
        columns = ", ".join(_COLUMNS)
        placeholders = ", ".join("?" for _ in _COLUMNS)

        with self._db.session() as conn:
            if game.id is None:
                cursor = conn.execute(
                    f"INSERT INTO games ({columns}) VALUES ({placeholders})",
                    self._game_values(game),
                )
                new_id = cursor.lastrowid
            else:
                updates = ", ".join(f"{column} = excluded.{column}" for column in _COLUMNS)
                conn.execute(
                    f"INSERT INTO games (id, {columns}) VALUES (?, {placeholders}) "
                    f"ON CONFLICT(id) DO UPDATE SET {updates}",
                    (game.id, *self._game_values(game)),
                )
                new_id = game.id

        game.id = new_id
        return game

    def try_save(self, game: Game) -> StoreResult:
        return self._db.attempt(self.save, game)

    def update(self, game: Game) -> StoreOutcome:
        """
        Overwrite an existing row by id.

        Unlike save, a row deleted in the meantime is not recreated.
        """
        assignments = ", ".join(f"{column} = ?" for column in _COLUMNS)
        with self._db.session() as conn:
            cursor = conn.execute(
                f"UPDATE games SET {assignments} WHERE id = ?",
                (*self._game_values(game), game.id),
            )
            updated = cursor.rowcount
        return StoreOutcome.SUCCESS if updated else StoreOutcome.NOT_FOUND

    def try_update(self, game: Game) -> StoreResult:
        return self._db.attempt(self.update, game)

    def find_all(self) -> List[Game]:
        """All games in storage order"""
        return self._select()

    def find_by_id(self, game_id: int) -> Optional[Game]:
        games = self._select("id = ?", (game_id,))
        return games[0] if games else None

    def find_by_unique_id(self, unique_id: str) -> Optional[Game]:
        """Lowest id wins while duplicates are still present"""
        with self._db.session() as conn:
            row = conn.execute(
                "SELECT * FROM games WHERE unique_id = ? ORDER BY id LIMIT 1", (unique_id,)
            ).fetchone()
        return self._row_to_game(row) if row else None

    def find_by_favorite(self, favorite: bool) -> List[Game]:
        return self._select("favorite = ?", (int(favorite),), order_by="title COLLATE NOCASE, id")

    def find_by_platform(self, platform: Platform) -> List[Game]:
        return self._select("platform = ?", (str(platform),), order_by="title COLLATE NOCASE, id")

    def search_by_title(self, query: str) -> List[Game]:
        """Case-insensitive substring match on the title"""
        pattern = f"%{_escape_like(query)}%"
        return self._select("title LIKE ? ESCAPE '\\'", (pattern,), order_by="title COLLATE NOCASE, id")

    def delete(self, game_id: int) -> StoreOutcome:
        """Delete by id; deleting a missing id is a no-op"""
        with self._db.session() as conn:
            cursor = conn.execute("DELETE FROM games WHERE id = ?", (game_id,))
            deleted = cursor.rowcount
        return StoreOutcome.SUCCESS if deleted else StoreOutcome.NOT_FOUND

    def try_delete(self, game_id: int) -> StoreResult:
        return self._db.attempt(self.delete, game_id)

    def count(self) -> int:
        with self._db.session() as conn:
            return conn.execute("SELECT COUNT(*) FROM games").fetchone()[0]
