import logging
import threading

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from splitboard.errors import ConfigError, StoreError

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "expense-tracker"

_client = None
_db = None
_mongo_uri = None
_lock = threading.Lock()


def init_mongo(app):
    """Remember the connection string; the client is created on first use."""
    global _mongo_uri
    _mongo_uri = app.config.get("MONGO_URI")


def ensure_connected():
    """Connect to MongoDB once per process. Safe to call from every data-access path."""
    global _client, _db
    if _db is not None:
        return _db

    with _lock:
        if _db is not None:
            return _db
        if not _mongo_uri:
            raise ConfigError("MONGO_URI is not set")

        client = MongoClient(_mongo_uri)
        try:
            client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.error("MongoDB connection error: %s", e)
            raise StoreError(f"MongoDB connection failed: {e}") from e

        # get_default_database() extracts the db name from the URI path,
        # and raises when the URI has none
        try:
            db = client.get_default_database()
        except PyMongoError:
            db = client[DEFAULT_DB_NAME]

        _client, _db = client, db
        logger.info("MongoDB connected to database: %s", _db.name)
        return _db


def disconnect():
    """Close the client; the next ensure_connected() reconnects."""
    global _client, _db
    with _lock:
        if _client is not None:
            _client.close()
            logger.info("MongoDB disconnected")
        _client = None
        _db = None


def get_db():
    """Get the database instance, connecting on first use."""
    return ensure_connected()

