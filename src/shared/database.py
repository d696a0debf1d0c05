"""Document store access — a process-wide MongoDB database handle.

The database is created lazily from settings. Tests (and the management
CLI) can install their own handle with ``use_database``.
"""

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from shared.config import get_settings

PRODUCTS = "products"
CARTS = "carts"
ORDERS = "orders"
USERS = "users"

_database: Database | None = None


def get_database() -> Database:
    """Return the configured database (singleton)."""
    global _database
    if _database is None:
        settings = get_settings()
        client = MongoClient(
            settings.mongo_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=settings.store_timeout_ms,
            connectTimeoutMS=settings.store_timeout_ms,
            socketTimeoutMS=settings.store_timeout_ms,
        )
        _database = client[settings.mongo_database]
    return _database


def use_database(database: Database) -> None:
    """Install an explicit database handle (e.g. a mongomock database in tests)."""
    global _database
    _database = database


def reset_database():
    """Forget the current handle (useful for testing)."""
    global _database
    _database = None


def ensure_indexes(database: Database) -> None:
    """Create the indexes the domain relies on for uniqueness and listing."""
    database[CARTS].create_index([("user_id", ASCENDING)], unique=True)
    database[ORDERS].create_index([("order_number", ASCENDING)], unique=True)
    database[ORDERS].create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    database[ORDERS].create_index([("order_status", ASCENDING)])
    database[USERS].create_index([("email", ASCENDING)], unique=True)
    database[PRODUCTS].create_index([("author", ASCENDING)])


def drop_collections(database: Database) -> None:
    for name in (PRODUCTS, CARTS, ORDERS, USERS):
        database.drop_collection(name)
