"""
Tests for database connections and initialization.

These tests cover:
- MongoDB and Redis client creation
- Database registry sync
- Index creation on accounts and user profiles
"""

import pytest
from unittest.mock import AsyncMock, patch, MagicMock

from app.database.databases import auth_db, campus_db, system_db
from app.database.registry import ALL_DB_MANIFESTS, create_indexes, sync_registry


class TestMongoDBConnection:
    """Tests for MongoDB connection handling."""

    @pytest.mark.asyncio
    async def test_get_mongo_client_creates_connection_once(self):
        """get_mongo_client should create the client on first call only."""
        import app.database.connections as conn_module

        with patch("app.database.connections.AsyncIOMotorClient") as mock_client, \
             patch("app.database.connections._mongo_client", None), \
             patch("app.database.connections.get_settings") as mock_settings:

            mock_settings.return_value.mongo_uri = "mongodb://test:27017"
            mock_settings.return_value.mongo_timeout_ms = 1500
            mock_instance = MagicMock()
            mock_client.return_value = mock_instance

            first = await conn_module.get_mongo_client()
            second = await conn_module.get_mongo_client()

            mock_client.assert_called_once_with(
                "mongodb://test:27017", serverSelectionTimeoutMS=1500
            )
            assert first is mock_instance
            assert second is mock_instance

    @pytest.mark.asyncio
    async def test_close_connections_cleans_up(self):
        """close_connections should close and forget both clients."""
        import app.database.connections as conn_module

        mock_mongo = MagicMock()
        mock_redis = AsyncMock()
        conn_module._mongo_client = mock_mongo
        conn_module._redis_client = mock_redis

        await conn_module.close_connections()

        mock_mongo.close.assert_called_once()
        mock_redis.close.assert_called_once()
        assert conn_module._mongo_client is None
        assert conn_module._redis_client is None


class TestRedisConnection:
    """Tests for Redis connection handling."""

    @pytest.mark.asyncio
    async def test_get_redis_client_uses_settings(self):
        import app.database.connections as conn_module

        with patch("app.database.connections.Redis") as mock_redis_cls, \
             patch("app.database.connections._redis_client", None), \
             patch("app.database.connections.get_settings") as mock_settings:

            mock_settings.return_value.redis_host = "localhost"
            mock_settings.return_value.redis_port = 6380
            mock_settings.return_value.redis_timeout_seconds = 2.0
            mock_instance = AsyncMock()
            mock_redis_cls.return_value = mock_instance

            client = await conn_module.get_redis_client()

            mock_redis_cls.assert_called_once_with(
                host="localhost",
                port=6380,
                socket_timeout=2.0,
                decode_responses=True,
            )
            assert client is mock_instance


class TestDatabaseRegistry:
    """Tests for database registry synchronization."""

    @pytest.mark.asyncio
    async def test_registry_lists_every_database(self, mock_async_mongo_client):
        await sync_registry(mock_async_mongo_client)

        registry = mock_async_mongo_client[system_db.DB_NAME][system_db.Collections.DB_REGISTRY]
        names = sorted(await registry.distinct("_id"))
        assert names == sorted(m["db_name"] for m in ALL_DB_MANIFESTS)

        entry = await registry.find_one({"_id": campus_db.DB_NAME})
        assert campus_db.Collections.ADMINS in entry["collections"]
        assert entry["schema_version"] == "1.0"

    @pytest.mark.asyncio
    async def test_registry_writes_metadata_documents(self, mock_async_mongo_client):
        await sync_registry(mock_async_mongo_client)

        meta = await mock_async_mongo_client[campus_db.DB_NAME]["_metadata"].find_one(
            {"_id": "db_metadata"}
        )
        assert meta["db_name"] == campus_db.DB_NAME
        assert meta["created_at"] is not None

    @pytest.mark.asyncio
    async def test_registry_sync_keeps_created_at(self, mock_async_mongo_client):
        await sync_registry(mock_async_mongo_client)
        registry = mock_async_mongo_client[system_db.DB_NAME][system_db.Collections.DB_REGISTRY]
        first = await registry.find_one({"_id": auth_db.DB_NAME})

        await sync_registry(mock_async_mongo_client)
        second = await registry.find_one({"_id": auth_db.DB_NAME})

        assert second["created_at"] == first["created_at"]
        assert await registry.count_documents({}) == len(ALL_DB_MANIFESTS)


class TestIndexCreation:
    """Tests for index creation on collections."""

    @pytest.mark.asyncio
    async def test_account_email_index_is_unique(self, mock_async_mongo_client):
        await create_indexes(mock_async_mongo_client)

        accounts = mock_async_mongo_client[auth_db.DB_NAME][auth_db.Collections.ACCOUNTS]
        indexes = await accounts.index_information()
        email_index = next(idx for idx in indexes.values() if idx["key"] == [("email", 1)])
        assert email_index.get("unique") is True

    @pytest.mark.asyncio
    async def test_user_search_fields_are_indexed(self, mock_async_mongo_client):
        await create_indexes(mock_async_mongo_client)

        users = mock_async_mongo_client[campus_db.DB_NAME][campus_db.Collections.USERS]
        indexes = await users.index_information()
        indexed = {idx["key"][0][0] for idx in indexes.values()}
        assert {"fullName", "email", "matricule", "isVerified"} <= indexed

    @pytest.mark.asyncio
    async def test_create_indexes_is_repeatable(self, mock_async_mongo_client):
        await create_indexes(mock_async_mongo_client)
        await create_indexes(mock_async_mongo_client)

        users = mock_async_mongo_client[campus_db.DB_NAME][campus_db.Collections.USERS]
        assert len(await users.index_information()) == 5  # _id + four
