"""MongoDB connection handling."""

import logging

from pymongo import MongoClient
from pymongo.database import Database

from .config import get_db_name, get_mongo_uri

logger = logging.getLogger(__name__)

# Lazy-initialized client, shared by the API and the CLI
_client: MongoClient | None = None


def get_client() -> MongoClient:
    """Get the MongoClient, connecting lazily on first use."""
    global _client
    if _client is None:
        _client = MongoClient(get_mongo_uri())
        logger.info("Connected MongoDB client")
    return _client


def get_database() -> Database:
    """Get the reflect database."""
    return get_client()[get_db_name()]


def close_client() -> None:
    """Close the shared client if one was opened."""
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("Closed MongoDB client")
