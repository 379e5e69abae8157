from .version import __version__
from .logger import setup_logger
from .config import get_db_path
from .database import DatabaseManager
from .models import AppSettings, Game, IgnoredGame, Platform, StoreOutcome, StoreResult
from .game_repository import GameRepository
from .ignored_game_repository import IgnoredGameRepository
from .settings_repository import SettingsRepository
from .metadata_service import FallbackMetadataProvider, MetadataProvider
from .library_service import LibraryService
from .bootstrap import AppServices, create_app_services

__all__ = [
    "__version__",
    "setup_logger",
    "get_db_path",
    "DatabaseManager",
    "AppSettings",
    "Game",
    "IgnoredGame",
    "Platform",
    "StoreOutcome",
    "StoreResult",
    "GameRepository",
    "IgnoredGameRepository",
    "SettingsRepository",
    "FallbackMetadataProvider",
    "MetadataProvider",
    "LibraryService",
    "AppServices",
    "create_app_services",
]
