"""
Pytest fixtures for Nexus Library tests
"""

from unittest.mock import MagicMock

import pytest

from nexus_library.database import DatabaseManager
from nexus_library.game_repository import GameRepository
from nexus_library.ignored_game_repository import IgnoredGameRepository
from nexus_library.library_service import LibraryService
from nexus_library.models import Game, Platform
from nexus_library.settings_repository import SettingsRepository


class RecordingMetadataProvider:
    """Metadata provider that fills fields and counts its calls"""

    def __init__(self):
        self.calls = []

    def apply_metadata(self, game):
        self.calls.append(game.title)
        game.cover_image_url = f"https://img.example.com/{game.title}.jpg"
        game.description = f"About {game.title}"


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(tmp_path / "nexus.db")
    manager.initialize()
    return manager


@pytest.fixture
def game_repository(db_manager):
    return GameRepository(db_manager)


@pytest.fixture
def ignored_repository(db_manager):
    return IgnoredGameRepository(db_manager)


@pytest.fixture
def settings_repository(db_manager):
    return SettingsRepository(db_manager)


@pytest.fixture
def metadata_provider():
    return RecordingMetadataProvider()


@pytest.fixture
def library_service(game_repository, ignored_repository, metadata_provider):
    return LibraryService(game_repository, ignored_repository, metadata_provider)


@pytest.fixture
def make_game():
    """Factory for games that already carry complete metadata"""

    def _make(title, platform=Platform.STEAM, **kwargs):
        kwargs.setdefault("cover_image_url", f"https://img.example.com/{title}.jpg")
        kwargs.setdefault("description", f"About {title}")
        return Game(title=title, platform=platform, **kwargs)

    return _make


@pytest.fixture
def mock_page():
    """Stand-in for ft.Page; records dialogs and updates"""
    return MagicMock()


@pytest.fixture
def mock_logger():
    return MagicMock()
