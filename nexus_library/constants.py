APP_NAME = "Nexus"
APP_AUTHOR = "Nexus"

DB_FILE_NAME = "nexus.db"
DB_PATH_ENV_VAR = "NEXUS_DB_PATH"
LOG_FILE_NAME = "nexus_library.log"

# Values starting with these prefixes count as missing metadata
PLACEHOLDER_COVER_PREFIX = "/assets/"
PLACEHOLDER_DESCRIPTION_PREFIX = "No description"

# Final values written by the offline provider; they pass the checks above
DEFAULT_COVER_URL = "/images/default-cover.png"
DEFAULT_DESCRIPTION = "{title} is in your library."
DEFAULT_DEVELOPER = "Unknown"

STEAM_UNIQUE_ID_PREFIX = "steam:"
STEAM_HEADER_URL = "https://cdn.cloudflare.steamstatic.com/steam/apps/{app_id}/header.jpg"
