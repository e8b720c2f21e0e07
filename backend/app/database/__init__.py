"""
Database module - shared clients, database definitions and startup sync.
"""
from app.database.connections import (
    close_connections,
    get_database,
    get_mongo_client,
    get_redis_client,
)
from app.database.databases import auth_db, campus_db, system_db
from app.database.registry import create_indexes, sync_registry

__all__ = [
    "close_connections",
    "get_database",
    "get_mongo_client",
    "get_redis_client",
    "auth_db",
    "campus_db",
    "system_db",
    "create_indexes",
    "sync_registry",
]
