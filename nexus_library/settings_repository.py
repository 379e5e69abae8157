"""
Repository for application settings

Settings are stored one row per AppSettings field with a JSON-encoded
value. Missing rows fall back to the AppSettings defaults.
"""

from typing import Any

import msgspec

from nexus_library.database import DatabaseManager
from nexus_library.logger import setup_logger
from nexus_library.models import AppSettings, decode_json, encode_json

logger = setup_logger()


class SettingsRepository:
    """Repository for AppSettings persistence"""

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager

    def get_settings(self) -> AppSettings:
        with self._db.session() as conn:
            rows = conn.execute("SELECT key, value FROM settings").fetchall()

        known = set(AppSettings.__struct_fields__)
        values = {}
        for row in rows:
            if row["key"] in known:
                values[row["key"]] = decode_json(row["value"].encode("utf-8"))
            else:
                logger.debug(f"Ignoring unknown setting: {row['key']}")

        return msgspec.convert(values, AppSettings)

    def update_setting(self, name: str, value: Any):
        """
        Persist a single setting.

        Raises:
            ValueError: if name is not an AppSettings field
        """
        if name not in AppSettings.__struct_fields__:
            raise ValueError(f"Unknown setting: {name}")

        # Validate against the field type before writing
        msgspec.convert({name: value}, AppSettings)

        with self._db.session() as conn:
            conn.execute("""
                INSERT INTO settings (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
            """, (name, encode_json(value).decode("utf-8")))
