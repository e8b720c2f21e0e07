"""
Startup housekeeping: database registry and indexes.

Every database the console owns is listed in system_db.db_registry and
carries a `_metadata` document, so operators can see what lives where.
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from app.database.databases import auth_db, campus_db, system_db

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

ALL_DB_MANIFESTS = [
    auth_db.DB_MANIFEST,
    campus_db.DB_MANIFEST,
    system_db.DB_MANIFEST,
]


async def _register_database(client: AsyncIOMotorClient, manifest: dict, now: datetime) -> None:
    db_name = manifest["db_name"]
    registry = client[system_db.DB_NAME][system_db.Collections.DB_REGISTRY]

    await registry.update_one(
        {"_id": db_name},
        {
            "$set": {
                "purpose": manifest["purpose"],
                "collections": manifest["collections"],
                "access_level": manifest["access_level"],
                "schema_version": SCHEMA_VERSION,
                "updated_at": now,
            },
            "$setOnInsert": {"created_at": now},
        },
        upsert=True,
    )
    await client[db_name]["_metadata"].update_one(
        {"_id": "db_metadata"},
        {
            "$set": {"db_name": db_name, "last_updated_at": now},
            "$setOnInsert": {"created_at": now},
        },
        upsert=True,
    )


async def sync_registry(client: AsyncIOMotorClient) -> None:
    """Upsert one registry entry and one _metadata document per database."""
    now = datetime.now(timezone.utc)
    for manifest in ALL_DB_MANIFESTS:
        await _register_database(client, manifest, now)
    logger.debug(f"Registry synced for {len(ALL_DB_MANIFESTS)} databases")


async def create_indexes(client: AsyncIOMotorClient) -> None:
    """
    Create the console's indexes.

    The unique email index on accounts must exist, so its failure
    propagates. The campus_db indexes only speed up search and sorting;
    the collection is shared with other clients that may have created
    them with other options, so failures there are logged and skipped.
    """
    accounts = client[auth_db.DB_NAME][auth_db.Collections.ACCOUNTS]
    await accounts.create_index("email", unique=True)

    campus = client[campus_db.DB_NAME]
    for collection_name, indexes in campus_db.Collections.INDEXES.items():
        for index_def in indexes:
            keys = index_def["keys"]
            options = {k: v for k, v in index_def.items() if k != "keys"}
            try:
                await campus[collection_name].create_index(keys, **options)
            except PyMongoError as e:
                logger.debug(f"Index {keys} on {collection_name} not created: {e}")
