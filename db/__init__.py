"""Database package: MongoDB repositories with an in-memory fallback."""

import logging
from typing import Optional, Tuple, Union

import config
from db.base import WallpaperStore
from db.category_repository import CategoryRepository, MemoryCategoryRepository
from db.memory_store import MemoryWallpaperStore
from db.mongodb import get_database, close_connection, init_indexes
from db.wallpaper_repository import WallpaperRepository

logger = logging.getLogger(__name__)

CategoryStore = Union[CategoryRepository, MemoryCategoryRepository]

# Store instances - will be set at startup
_store: Optional[WallpaperStore] = None
_category_store: Optional[CategoryStore] = None


async def init_store() -> Tuple[WallpaperStore, CategoryStore]:
    """Initialize the wallpaper and category stores.

    Uses MongoDB when MONGODB_URI is set and reachable, otherwise an
    in-memory store seeded from SEED_FILE.
    """
    global _store, _category_store

    db = await get_database()
    if db is not None:
        await init_indexes(db)
        _store = WallpaperRepository(db)
        _category_store = CategoryRepository(db)
        logger.info("Using MongoDB wallpaper store")
    else:
        _store = MemoryWallpaperStore.from_file(config.SEED_FILE)
        _category_store = MemoryCategoryRepository()
        logger.info("Using in-memory wallpaper store")
    return _store, _category_store


async def close_store() -> None:
    """Close database connections."""
    global _store, _category_store
    await close_connection()
    _store = None
    _category_store = None


def get_store_backend_name() -> str:
    if isinstance(_store, WallpaperRepository):
        return "mongodb"
    return "memory"


__all__ = [
    "WallpaperStore",
    "WallpaperRepository",
    "MemoryWallpaperStore",
    "CategoryRepository",
    "MemoryCategoryRepository",
    "get_database",
    "close_connection",
    "init_indexes",
    "init_store",
    "close_store",
    "get_store_backend_name",
]
