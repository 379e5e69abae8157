"""
Library Service
Orchestrates the game and ignored-game stores for the UI.

All methods block on the database and are meant to be called from worker
threads (see SettingsView, which wraps them in asyncio.to_thread).
"""

from typing import Iterable, List, Optional, Set

from nexus_library.game_repository import GameRepository
from nexus_library.ignored_game_repository import IgnoredGameRepository
from nexus_library.logger import setup_logger
from nexus_library.metadata_service import MetadataProvider, needs_cover, needs_description
from nexus_library.models import Game, IgnoredGame, Platform, StoreOutcome

logger = setup_logger()


class LibraryService:
    """
    Read/write operations over the library.

    Constructed once at startup with its collaborators; see
    nexus_library.bootstrap.
    """

    def __init__(
        self,
        game_repository: GameRepository,
        ignored_game_repository: IgnoredGameRepository,
        metadata_provider: MetadataProvider,
    ):
        self.game_repository = game_repository
        self.ignored_game_repository = ignored_game_repository
        self.metadata_provider = metadata_provider

    # ===== Queries =====

    def get_all_games(self) -> List[Game]:
        """
        All games, deduplicated, with metadata backfilled.

        The first game seen for each dedup key is kept. Later ones are
        deleted once the pass over the list has finished.
        """
        unique_games: dict[str, Game] = {}
        duplicate_ids: List[int] = []

        for game in self.game_repository.find_all():
            key = game.dedup_key
            if key not in unique_games:
                unique_games[key] = game
                self.ensure_metadata(game)
            else:
                duplicate_ids.append(game.id)

        for game_id in duplicate_ids:
            result = self.game_repository.try_delete(game_id)
            if result.ok:
                logger.info(f"Removed duplicate game with id: {game_id}")
            else:
                logger.warning(f"Could not remove duplicate game {game_id}: {result.outcome} {result.error or ''}")

        return list(unique_games.values())

    def get_favorite_games(self) -> List[Game]:
        return self._with_metadata(self.game_repository.find_by_favorite(True))

    def search_games(self, query: Optional[str]) -> List[Game]:
        """Title search; a blank query lists the whole library"""
        if query is None or not query.strip():
            return self.get_all_games()
        return self._with_metadata(self.game_repository.search_by_title(query.strip()))

    def get_games_by_platform(self, platform: Platform) -> List[Game]:
        return self._with_metadata(self.game_repository.find_by_platform(platform))

    def get_game_by_id(self, game_id: int) -> Optional[Game]:
        game = self.game_repository.find_by_id(game_id)
        if game is not None:
            self.ensure_metadata(game)
        return game

    def get_game_by_unique_id(self, unique_id: str) -> Optional[Game]:
        game = self.game_repository.find_by_unique_id(unique_id)
        if game is not None:
            self.ensure_metadata(game)
        return game

    def get_game_count(self) -> int:
        return self.game_repository.count()

    def _with_metadata(self, games: List[Game]) -> List[Game]:
        for game in games:
            self.ensure_metadata(game)
        return games

    # ===== Writes =====

    def save_game(self, game: Game) -> Game:
        return self.game_repository.save(game)

    def toggle_favorite(self, game: Game) -> Game:
        game.favorite = not game.favorite
        return self.game_repository.save(game)

    def delete_game(self, game: Optional[Game]):
        if game is not None and game.id is not None:
            self.game_repository.delete(game.id)

    def ensure_metadata(self, game: Optional[Game]):
        """
        Backfill missing cover art and description.

        The cover and description are checked separately and each check
        may invoke the provider. Provider errors are logged and skipped.
        Saved games are written back with an update, so a game deleted
        meanwhile stays deleted; write failures are logged and ignored.
        """
        if game is None:
            return

        needs_update = False

        if needs_cover(game.cover_image_url):
            needs_update |= self._apply_metadata(game)

        if needs_description(game.description):
            needs_update |= self._apply_metadata(game)

        if needs_update and game.id is not None:
            result = self.game_repository.try_update(game)
            if not result.ok:
                logger.debug(f"Metadata update not saved for '{game.title}': {result.outcome} {result.error or ''}")

    def _apply_metadata(self, game: Game) -> bool:
        try:
            self.metadata_provider.apply_metadata(game)
        except Exception as e:
            logger.warning(f"Metadata lookup failed for '{game.title}': {e}")
            return False
        return True

    def clear_all_games(self) -> int:
        """
        Remove every scanned game ahead of a rescan.

        Manually added games are kept.

        Returns:
            Number of games deleted
        """
        removed = 0
        for game in self.game_repository.find_all():
            if game.platform != Platform.MANUAL:
                if self.game_repository.delete(game.id) == StoreOutcome.SUCCESS:
                    removed += 1

        logger.info(f"Cleared {removed} games from the library")
        return removed

    # ===== Ignore / restore =====

    def ignore_game(self, game: Optional[Game]):
        """
        Hide a game: record it as ignored, then remove it from the library.

        The ignored entry and the deletion are separate transactions. An
        entry that cannot be saved (usually because the game is already
        ignored) does not stop the deletion.
        """
        if game is None:
            return

        result = self.ignored_game_repository.try_save(IgnoredGame.from_game(game))
        if result.ok:
            logger.info(f"Game ignored: {game.title}")
        elif result.outcome == StoreOutcome.ALREADY_EXISTS:
            logger.info(f"Game already ignored: {game.title}")
        else:
            logger.error(f"Failed to save ignored game '{game.title}': {result.error}")

        if game.id is not None:
            self.game_repository.delete(game.id)
            logger.info(f"Game removed from library: {game.title}")

    def restore_ignored_game(self, ignored_game: Optional[IgnoredGame]):
        """
        Lift the exclusion on an ignored game.

        The game itself is not recreated; it reappears on the next scan.
        """
        if ignored_game is None or ignored_game.id is None:
            return

        self.ignored_game_repository.delete(ignored_game.id)
        logger.info(f"Game restored (will appear on next scan): {ignored_game.title}")

    def get_all_ignored_games(self) -> List[IgnoredGame]:
        return self.ignored_game_repository.find_all()

    def is_game_ignored(self, unique_id: str) -> bool:
        return self.ignored_game_repository.is_ignored(unique_id)

    def get_ignored_game_ids(self) -> Set[str]:
        return self.ignored_game_repository.find_all_unique_ids()

    def filter_ignored(self, candidates: Iterable[Game]) -> List[Game]:
        """Drop scan candidates whose unique id has been ignored"""
        ignored_ids = self.get_ignored_game_ids()
        return [game for game in candidates if not game.unique_id or game.unique_id not in ignored_ids]
