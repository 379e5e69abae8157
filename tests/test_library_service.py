"""
Tests for LibraryService: dedup, backfill, ignore/restore and bulk clear.
"""

from unittest.mock import patch

from nexus_library.library_service import LibraryService
from nexus_library.metadata_service import FallbackMetadataProvider
from nexus_library.models import Game, IgnoredGame, Platform, StoreOutcome, StoreResult


class TestGetAllGames:
    """Deduplication on load"""

    def test_duplicate_unique_id_keeps_first(self, library_service, game_repository, make_game):
        first = game_repository.save(make_game("A", unique_id="steam:10"))
        second = game_repository.save(make_game("A", unique_id="steam:10"))

        games = library_service.get_all_games()

        assert [g.id for g in games] == [first.id]
        assert game_repository.find_by_id(second.id) is None
        assert game_repository.count() == 1

    def test_count_drops_by_duplicates_minus_one(self, library_service, game_repository, make_game):
        for _ in range(4):
            game_repository.save(make_game("Portal", unique_id="steam:400"))
        game_repository.save(make_game("Other", unique_id="steam:401"))

        games = library_service.get_all_games()

        assert len(games) == 2
        assert game_repository.count() == 2

    def test_fallback_key_is_case_insensitive(self, library_service, game_repository, make_game):
        game_repository.save(make_game("Foo", platform=Platform.EPIC))
        game_repository.save(make_game("foo", platform=Platform.EPIC))

        games = library_service.get_all_games()

        assert [g.title for g in games] == ["Foo"]

    def test_same_title_on_different_platforms_is_kept(self, library_service, game_repository, make_game):
        game_repository.save(make_game("Foo", platform=Platform.EPIC))
        game_repository.save(make_game("Foo", platform=Platform.GOG))

        assert len(library_service.get_all_games()) == 2

    def test_first_seen_order_is_preserved(self, library_service, game_repository, make_game):
        for title, uid in (("C", "steam:3"), ("A", "steam:1"), ("C2", "steam:3"), ("B", "steam:2")):
            game_repository.save(make_game(title, unique_id=uid))

        assert [g.title for g in library_service.get_all_games()] == ["C", "A", "B"]

    def test_failed_duplicate_delete_does_not_abort_listing(self, library_service, game_repository, make_game):
        game_repository.save(make_game("A", unique_id="steam:10"))
        game_repository.save(make_game("A", unique_id="steam:10"))

        failure = StoreResult(StoreOutcome.FAILED, error="database is locked")
        with patch.object(game_repository, "try_delete", return_value=failure) as try_delete:
            games = library_service.get_all_games()

        try_delete.assert_called_once()
        assert len(games) == 1
        assert game_repository.count() == 2

    def test_kept_games_are_backfilled(self, library_service, game_repository, metadata_provider):
        game = game_repository.save(Game(title="Bare", platform=Platform.STEAM))

        games = library_service.get_all_games()

        assert games[0].cover_image_url == "https://img.example.com/Bare.jpg"
        assert game_repository.find_by_id(game.id).description == "About Bare"
        assert metadata_provider.calls == ["Bare"]


class TestEnsureMetadata:
    """Backfill triggers and persistence"""

    def test_complete_game_is_left_alone(self, library_service, metadata_provider, make_game):
        library_service.ensure_metadata(make_game("Done"))

        assert metadata_provider.calls == []

    def test_placeholder_cover_triggers_fetch(self, library_service, metadata_provider, make_game):
        game = make_game("Art", cover_image_url="/assets/images/placeholder-cover.png")

        library_service.ensure_metadata(game)

        assert metadata_provider.calls == ["Art"]
        assert game.cover_image_url.startswith("https://")

    def test_description_checked_independently(self, library_service, metadata_provider, make_game):
        """A provider that leaves the placeholder text causes a second fetch"""
        game = make_game("Text", cover_image_url=None, description="No description yet")

        def cover_only(g):
            metadata_provider.calls.append(g.title)
            g.cover_image_url = "https://img.example.com/x.jpg"

        with patch.object(metadata_provider, "apply_metadata", side_effect=cover_only):
            library_service.ensure_metadata(game)

        assert metadata_provider.calls == ["Text", "Text"]

    def test_unsaved_game_is_not_written(self, library_service, game_repository):
        game = Game(title="Fresh", platform=Platform.STEAM)

        library_service.ensure_metadata(game)

        assert game.id is None
        assert game_repository.count() == 0

    def test_save_failure_is_swallowed(self, library_service, game_repository):
        game = game_repository.save(Game(title="Locked", platform=Platform.STEAM))
        failure = StoreResult(StoreOutcome.FAILED, error="disk I/O error")

        with patch.object(game_repository, "try_update", return_value=failure):
            library_service.ensure_metadata(game)

        assert game.description == "About Locked"

    def test_none_is_ignored(self, library_service, metadata_provider):
        library_service.ensure_metadata(None)
        assert metadata_provider.calls == []

    def test_provider_errors_do_not_abort_listing(self, game_repository, ignored_repository, make_game):
        """A failing metadata source leaves the listing intact"""
        game_repository.save(Game(title="Bare", platform=Platform.STEAM, unique_id="steam:1"))
        game_repository.save(make_game("Complete", unique_id="steam:2"))

        class UnreachableProvider:
            def __init__(self):
                self.calls = 0

            def apply_metadata(self, game):
                self.calls += 1
                raise ConnectionError("metadata API unreachable")

        provider = UnreachableProvider()
        service = LibraryService(game_repository, ignored_repository, provider)

        games = service.get_all_games()

        assert [g.title for g in games] == ["Bare", "Complete"]
        # Cover and description are still checked separately
        assert provider.calls == 2
        assert game_repository.find_by_unique_id("steam:1").cover_image_url is None

    def test_fallback_values_settle_after_first_listing(self, game_repository, ignored_repository):
        """A second listing does not refetch metadata the offline provider already filled"""
        game_repository.save(Game(title="Portal 2", platform=Platform.STEAM, unique_id="steam:620"))
        game_repository.save(Game(title="Homebrew", platform=Platform.MANUAL))
        provider = FallbackMetadataProvider()
        service = LibraryService(game_repository, ignored_repository, provider)
        service.get_all_games()

        with patch.object(provider, "apply_metadata", wraps=provider.apply_metadata) as apply_metadata, \
                patch.object(game_repository, "try_update", wraps=game_repository.try_update) as try_update:
            games = service.get_all_games()

        apply_metadata.assert_not_called()
        try_update.assert_not_called()
        assert all(g.description.endswith("is in your library.") for g in games)

    def test_backfill_does_not_recreate_deleted_game(self, library_service, game_repository):
        """A game removed after it was read stays removed"""
        game = game_repository.save(Game(title="Vanished", platform=Platform.STEAM))
        game_repository.delete(game.id)

        library_service.ensure_metadata(game)

        assert game.cover_image_url == "https://img.example.com/Vanished.jpg"
        assert game_repository.find_by_id(game.id) is None
        assert game_repository.count() == 0


class TestQueries:
    """Filtered listings and single lookups"""

    def test_blank_search_runs_full_listing(self, library_service, game_repository, make_game):
        game_repository.save(make_game("A", unique_id="steam:10"))
        game_repository.save(make_game("A", unique_id="steam:10"))

        assert len(library_service.search_games("   ")) == 1
        assert len(library_service.search_games(None)) == 1
        assert game_repository.count() == 1

    def test_search_trims_query(self, library_service, game_repository, make_game):
        game_repository.save(make_game("Hollow Knight"))
        game_repository.save(make_game("Hades"))

        assert [g.title for g in library_service.search_games("  hollow ")] == ["Hollow Knight"]

    def test_favorites_and_platform(self, library_service, game_repository, make_game):
        game_repository.save(make_game("Fav", favorite=True))
        game_repository.save(make_game("Mine", platform=Platform.MANUAL))

        assert [g.title for g in library_service.get_favorite_games()] == ["Fav"]
        assert [g.title for g in library_service.get_games_by_platform(Platform.MANUAL)] == ["Mine"]

    def test_lookups_return_none_when_missing(self, library_service):
        assert library_service.get_game_by_id(42) is None
        assert library_service.get_game_by_unique_id("steam:42") is None

    def test_lookups_backfill(self, library_service, game_repository, metadata_provider):
        game = game_repository.save(Game(title="Bare", platform=Platform.STEAM, unique_id="steam:5"))

        found = library_service.get_game_by_unique_id("steam:5")

        assert found.id == game.id
        assert found.description == "About Bare"
        assert library_service.get_game_by_id(game.id).description == "About Bare"


class TestWrites:
    """Pass-through writes"""

    def test_toggle_favorite_persists(self, library_service, game_repository, make_game):
        game = library_service.save_game(make_game("Star"))

        library_service.toggle_favorite(game)
        assert game_repository.find_by_id(game.id).favorite is True

        library_service.toggle_favorite(game)
        assert game_repository.find_by_id(game.id).favorite is False

    def test_delete_game_ignores_unsaved(self, library_service, game_repository, make_game):
        game = library_service.save_game(make_game("Keep"))

        library_service.delete_game(None)
        library_service.delete_game(make_game("Unsaved"))
        assert library_service.get_game_count() == 1

        library_service.delete_game(game)
        assert game_repository.count() == 0

    def test_clear_preserves_manual_games(self, library_service, game_repository, make_game):
        manual = game_repository.save(make_game("Homebrew", platform=Platform.MANUAL))
        game_repository.save(make_game("Scanned", platform=Platform.STEAM))
        game_repository.save(make_game("Scanned too", platform=Platform.EPIC))

        assert library_service.clear_all_games() == 2
        assert [g.id for g in game_repository.find_all()] == [manual.id]

        # Second call has nothing left to remove
        assert library_service.clear_all_games() == 0
        assert game_repository.count() == 1


class TestIgnoreRestore:
    """Ignore/restore workflow"""

    def test_ignore_records_entry_and_removes_game(self, library_service, game_repository, ignored_repository, make_game):
        game = game_repository.save(make_game("B", unique_id="steam:20", install_path="/games/B"))

        library_service.ignore_game(game)

        entries = ignored_repository.find_all()
        assert [(e.title, e.install_path, e.unique_id) for e in entries] == [("B", "/games/B", "steam:20")]
        assert game_repository.find_by_id(game.id) is None
        assert library_service.is_game_ignored("steam:20") is True
        assert "steam:20" in library_service.get_ignored_game_ids()
        assert all(g.unique_id != "steam:20" for g in library_service.get_all_games())

    def test_ignore_twice_still_removes_game(self, library_service, game_repository, ignored_repository, make_game):
        """An existing ignored entry does not stop the game being removed"""
        library_service.ignore_game(game_repository.save(make_game("B", unique_id="steam:20")))
        rescanned = game_repository.save(make_game("B", unique_id="steam:20"))

        library_service.ignore_game(rescanned)

        assert ignored_repository.count() == 1
        assert game_repository.count() == 0

    def test_ignore_proceeds_when_entry_cannot_be_saved(self, library_service, game_repository, ignored_repository, make_game):
        """A storage failure on the ignored entry does not stop the game being removed"""
        game = game_repository.save(make_game("B", unique_id="steam:20"))
        failure = StoreResult(StoreOutcome.FAILED, error="database is locked")

        with patch.object(ignored_repository, "try_save", return_value=failure) as try_save:
            library_service.ignore_game(game)

        try_save.assert_called_once()
        assert game_repository.find_by_id(game.id) is None
        assert ignored_repository.count() == 0

    def test_ignore_unsaved_game_only_records_entry(self, library_service, game_repository, ignored_repository, make_game):
        game_repository.save(make_game("Other"))

        library_service.ignore_game(make_game("Candidate", unique_id="gog:7"))

        assert ignored_repository.is_ignored("gog:7")
        assert game_repository.count() == 1

    def test_ignore_none_is_noop(self, library_service, ignored_repository):
        library_service.ignore_game(None)
        assert ignored_repository.count() == 0

    def test_restore_removes_entry_without_recreating_game(self, library_service, game_repository, make_game):
        game = game_repository.save(make_game("B", unique_id="steam:20"))
        library_service.ignore_game(game)
        entry = library_service.get_all_ignored_games()[0]

        library_service.restore_ignored_game(entry)

        assert library_service.get_all_ignored_games() == []
        assert library_service.is_game_ignored("steam:20") is False
        assert game_repository.count() == 0

    def test_restore_without_id_is_noop(self, library_service, ignored_repository):
        ignored_repository.save(IgnoredGame(title="B", unique_id="steam:20"))

        library_service.restore_ignored_game(IgnoredGame(title="B", unique_id="steam:20"))
        library_service.restore_ignored_game(None)

        assert ignored_repository.count() == 1

    def test_filter_ignored_candidates(self, library_service, ignored_repository, make_game):
        ignored_repository.save(IgnoredGame(title="Hidden", unique_id="steam:1"))
        candidates = [
            make_game("Hidden", unique_id="steam:1"),
            make_game("Visible", unique_id="steam:2"),
            make_game("No id"),
        ]

        assert [g.title for g in library_service.filter_ignored(candidates)] == ["Visible", "No id"]
