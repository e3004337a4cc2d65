"""MongoDB connection management using Motor (async driver)."""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

import config

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


async def get_database() -> Optional[AsyncIOMotorDatabase]:
    """Get the MongoDB database instance, initializing connection if needed."""
    global _client, _database

    if _database is not None:
        return _database

    if not config.MONGODB_URI:
        logger.warning("MONGODB_URI not set, MongoDB features disabled")
        return None

    try:
        _client = AsyncIOMotorClient(
            config.MONGODB_URI,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            maxPoolSize=10,
            minPoolSize=2,
            maxIdleTimeMS=30000,
            retryWrites=True,
        )
        # Verify connection
        await _client.admin.command("ping")
        _database = _client[config.MONGODB_DB_NAME]
        logger.info(f"Connected to MongoDB database {config.MONGODB_DB_NAME}")
        return _database
    except (ConnectionFailure, ServerSelectionTimeoutError) as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        _client = None
        _database = None
        return None


async def close_connection():
    """Close the MongoDB connection."""
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


async def init_indexes(db: AsyncIOMotorDatabase):
    """Create indexes for slug lookups and listing queries."""
    wallpapers = db.wallpapers

    # At most one record holds a given current slug; records without a slug are exempt
    await wallpapers.create_index(
        "slug",
        unique=True,
        partialFilterExpression={"slug": {"$type": "string"}},
        name="slug_unique",
    )
    await wallpapers.create_index("slug_history")
    await wallpapers.create_index("category")
    await wallpapers.create_index([("created_at", DESCENDING)])
    await wallpapers.create_index([("downloads", DESCENDING)])
    await wallpapers.create_index([("category", ASCENDING), ("created_at", DESCENDING)])

    logger.info("MongoDB indexes created")


async def check_connection() -> bool:
    """Check if MongoDB connection is healthy."""
    if _client is None:
        return False
    try:
        await _client.admin.command("ping")
        return True
    except PyMongoError:
        return False
