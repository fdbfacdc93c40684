"""Configuration management for reflect.

All settings come from environment variables. A `.env` file in the working
directory is loaded once on import, without overriding variables that are
already set.
"""

import os

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# Collection names as stored in MongoDB
NOTES_COLLECTION = "notes"
REPORT_COLLECTION = "report"
VIM_COLLECTION = "vim"
COLLECTIONS = (NOTES_COLLECTION, REPORT_COLLECTION, VIM_COLLECTION)

DEFAULT_DB_NAME = "reflect"

# Quiet period before a filter pass runs after the last keystroke
DEFAULT_FILTER_DELAY_MS = 1000

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000

# Returned instead of the real error message outside development
GENERIC_ERROR_MESSAGE = "Something went wrong"
INVALID_DATA_MESSAGE = "Invalid data passed, check the data and try again"


def get_mongo_uri() -> str:
    """Get the MongoDB connection string.

    Raises:
        ConfigurationError: If MONGO_URI is not set.
    """
    uri = os.environ.get("MONGO_URI")
    if not uri:
        raise ConfigurationError(
            "MONGO_URI is not set. Export it or add it to a .env file, e.g.\n"
            "  MONGO_URI=mongodb://localhost:27017"
        )
    return uri


def get_db_name() -> str:
    """Get the MongoDB database name."""
    return os.environ.get("REFLECT_DB_NAME") or DEFAULT_DB_NAME


def is_development() -> bool:
    """True when running with REFLECT_ENV=development."""
    return os.environ.get("REFLECT_ENV", "production").lower() == "development"


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins from REFLECT_CORS_ORIGINS (comma-separated)."""
    raw = os.environ.get("REFLECT_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def get_filter_delay_ms() -> int:
    """Get the debounce delay for interactive filtering.

    Raises:
        ConfigurationError: If REFLECT_FILTER_DELAY_MS is not a non-negative integer.
    """
    raw = os.environ.get("REFLECT_FILTER_DELAY_MS")
    if raw is None or raw == "":
        return DEFAULT_FILTER_DELAY_MS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"REFLECT_FILTER_DELAY_MS must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"REFLECT_FILTER_DELAY_MS must be >= 0, got {value}")
    return value


def get_bind() -> tuple[str, int]:
    """Get (host, port) for the API server from HOST and PORT."""
    host = os.environ.get("HOST", DEFAULT_HOST)
    raw_port = os.environ.get("PORT")
    if not raw_port:
        return host, DEFAULT_PORT
    try:
        return host, int(raw_port)
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer, got {raw_port!r}")
