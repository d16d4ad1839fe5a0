"""MongoDB connection helpers."""

from __future__ import annotations

from typing import Any, Dict, Tuple

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from app.config import settings

_clients: Dict[Tuple[str, frozenset], MongoClient] = {}


def get_client(uri: str, **kwargs: Any) -> MongoClient:
    """
    Return a cached MongoClient keyed by URI and options.
    PyMongo pools connections per client, so one client per process is enough.
    """
    key = (uri, frozenset(kwargs.items()))
    if key not in _clients:
        _clients[key] = MongoClient(uri, **kwargs)
    return _clients[key]


def get_database() -> Database:
    """Return a MongoDB database handle (non-dependency use)."""
    client = get_client(settings.MONGODB_URI, tz_aware=True)
    return client[settings.MONGODB_DB_NAME]


def get_db():
    """FastAPI dependency that yields a database handle."""
    db = get_database()
    try:
        yield db
    finally:
        # Clients are cached; no explicit close here.
        pass


def ensure_indexes(db: Database) -> None:
    """Create the indexes the application relies on."""
    db.users.create_index([("email", ASCENDING)], unique=True)
    db.users.create_index([("verify_token", ASCENDING)], sparse=True)
    db.orders.create_index([("user", ASCENDING), ("created_at", ASCENDING)])
