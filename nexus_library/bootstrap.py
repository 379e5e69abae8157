"""
Application wiring.

Builds the database manager, stores and library service once at startup.
The resulting AppServices is passed to every consumer; nothing here is a
global.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from nexus_library.config import get_db_path
from nexus_library.database import DatabaseManager
from nexus_library.game_repository import GameRepository
from nexus_library.ignored_game_repository import IgnoredGameRepository
from nexus_library.library_service import LibraryService
from nexus_library.metadata_service import FallbackMetadataProvider, MetadataProvider
from nexus_library.settings_repository import SettingsRepository


@dataclass
class AppServices:
    db_manager: DatabaseManager
    library_service: LibraryService
    settings_repository: SettingsRepository


def create_app_services(
    db_path: Optional[Path] = None,
    metadata_provider: Optional[MetadataProvider] = None,
) -> AppServices:
    """
    Construct and initialize the service graph.

    Blocks on schema creation; call it from a worker thread when an event
    loop is running.
    """
    db_manager = DatabaseManager(db_path or get_db_path())
    db_manager.initialize()

    library_service = LibraryService(
        GameRepository(db_manager),
        IgnoredGameRepository(db_manager),
        metadata_provider or FallbackMetadataProvider(),
    )
    return AppServices(
        db_manager=db_manager,
        library_service=library_service,
        settings_repository=SettingsRepository(db_manager),
    )
