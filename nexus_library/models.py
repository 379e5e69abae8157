"""
msgspec-based data models for the game library.

This module provides:
- The Game and IgnoredGame records returned by the stores
- AppSettings, the persisted user preferences
- StoreOutcome/StoreResult, explicit outcomes for best-effort store calls
- Convenience functions for JSON encoding/decoding
"""

import msgspec
from datetime import datetime
from enum import StrEnum
from typing import Any, Optional


# =============================================================================
# JSON
# =============================================================================

def encode_json(obj) -> bytes:
    """Encode a setting value or Struct to JSON bytes"""
    return msgspec.json.encode(obj)


def decode_json(data: bytes):
    """Decode JSON bytes into plain Python values"""
    return msgspec.json.decode(data)


# =============================================================================
# Library Models
# =============================================================================

class Platform(StrEnum):
    """Launcher or store that owns a game"""
    STEAM = "STEAM"
    EPIC = "EPIC"
    GOG = "GOG"
    EA = "EA"
    UBISOFT = "UBISOFT"
    BATTLE_NET = "BATTLE_NET"
    XBOX = "XBOX"
    # Entered by the user; survives a library clear
    MANUAL = "MANUAL"


class Game(msgspec.Struct):
    """
    Game database model.

    Represents a game discovered by a scan or added by hand. `id` is None
    until the game has been saved.
    """
    title: str
    platform: Platform
    id: Optional[int] = None
    unique_id: Optional[str] = None
    install_path: Optional[str] = None
    executable_path: Optional[str] = None
    favorite: bool = False
    cover_image_url: Optional[str] = None
    description: Optional[str] = None
    developer: Optional[str] = None
    release_date: Optional[str] = None
    added_at: datetime = msgspec.field(default_factory=datetime.now)
    last_played: Optional[datetime] = None

    @property
    def dedup_key(self) -> str:
        """Unique id when known, else the lowercased title/platform pair"""
        if self.unique_id:
            return self.unique_id
        return f"{self.title}_{self.platform}".lower()


class IgnoredGame(msgspec.Struct):
    """
    A game the user chose to hide.

    Snapshot of the game's title, install path and unique id taken when it
    was ignored. Scans skip anything recorded here.
    """
    title: str
    install_path: Optional[str] = None
    unique_id: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_game(cls, game: Game) -> "IgnoredGame":
        return cls(title=game.title, install_path=game.install_path, unique_id=game.unique_id)


class AppSettings(msgspec.Struct):
    """User preferences shown on the settings page"""
    launch_on_startup: bool = False
    close_to_tray: bool = False
    dark_mode: bool = True


# =============================================================================
# Store Results
# =============================================================================

class StoreOutcome(StrEnum):
    SUCCESS = "success"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class StoreResult(msgspec.Struct):
    """
    Outcome of a best-effort store call.

    Returned instead of raising so callers decide, visibly, which failures
    they accept.
    """
    outcome: StoreOutcome
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == StoreOutcome.SUCCESS
