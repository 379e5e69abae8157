"""
Metadata collaborator for the library service.

The library service only depends on the MetadataProvider protocol.
FallbackMetadataProvider fills what can be derived without network access:
Steam header art from the app id, and generic defaults otherwise. Its
values are final, so a game it has filled is not offered to it again.
"""

from typing import Optional, Protocol

from nexus_library.constants import (
    DEFAULT_COVER_URL,
    DEFAULT_DESCRIPTION,
    DEFAULT_DEVELOPER,
    PLACEHOLDER_COVER_PREFIX,
    PLACEHOLDER_DESCRIPTION_PREFIX,
    STEAM_HEADER_URL,
    STEAM_UNIQUE_ID_PREFIX,
)
from nexus_library.models import Game


class MetadataProvider(Protocol):
    def apply_metadata(self, game: Game) -> None:
        """Fill cover, description, developer and release date in place"""
        ...


def needs_cover(cover_image_url: Optional[str]) -> bool:
    """True when the cover is missing or only a bundled placeholder"""
    return not cover_image_url or cover_image_url.startswith(PLACEHOLDER_COVER_PREFIX)


def needs_description(description: Optional[str]) -> bool:
    return not description or description.startswith(PLACEHOLDER_DESCRIPTION_PREFIX)


def steam_app_id(unique_id: Optional[str]) -> Optional[int]:
    """Extract the Steam app id from a "steam:<id>" unique id"""
    if not unique_id or not unique_id.startswith(STEAM_UNIQUE_ID_PREFIX):
        return None
    app_id = unique_id[len(STEAM_UNIQUE_ID_PREFIX):]
    return int(app_id) if app_id.isdigit() else None


class FallbackMetadataProvider:
    """Offline metadata source used when no remote provider is configured"""

    def apply_metadata(self, game: Game) -> None:
        if needs_cover(game.cover_image_url):
            app_id = steam_app_id(game.unique_id)
            if app_id is not None:
                game.cover_image_url = STEAM_HEADER_URL.format(app_id=app_id)
            else:
                game.cover_image_url = DEFAULT_COVER_URL

        if needs_description(game.description):
            game.description = DEFAULT_DESCRIPTION.format(title=game.title)

        if not game.developer:
            game.developer = DEFAULT_DEVELOPER
