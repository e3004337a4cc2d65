"""Redis caching layer with same interface as memory cache."""

import json
import logging
from typing import List, Optional, Tuple

import redis.asyncio as redis_async
from redis.exceptions import RedisError

from models.category import Category
from models.wallpaper import Wallpaper

logger = logging.getLogger(__name__)

# TTL values in seconds
RESOLUTION_TTL = 600  # 10 min
LISTING_TTL = 300  # 5 min
CATEGORY_TTL = 600  # 10 min

KEY_PATTERNS = ["resolve:*", "listing:*", "categories:*"]


class RedisCacheManager:
    """Redis-backed cache with same interface as WallpaperCacheManager."""

    def __init__(self):
        self._redis = None
        self._connected = False

    async def connect(self, redis_url: str) -> bool:
        """Connect to Redis. Returns True if successful."""
        try:
            self._redis = redis_async.from_url(
                redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            # Test connection
            await self._redis.ping()
            self._connected = True
            logger.info("Connected to Redis cache")
            return True
        except (RedisError, OSError) as e:
            logger.warning(f"Failed to connect to Redis: {e}")
            self._connected = False
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._connected = False

    def is_connected(self) -> bool:
        """Check if Redis is connected."""
        return self._connected

    # --- Serialization helpers ---
    @staticmethod
    def _serialize_wallpapers(wallpapers: List[Wallpaper]) -> list:
        return [json.loads(w.to_json()) for w in wallpapers]

    @staticmethod
    def _deserialize_wallpapers(data: list) -> List[Wallpaper]:
        return [Wallpaper.from_json(json.dumps(w)) for w in data]

    # --- Identifier Resolution ---
    async def get_resolution(self, identifier: str) -> Optional[Tuple[Wallpaper, str]]:
        """Get cached (wallpaper, matched_by) for an identifier."""
        if not self._connected:
            return None
        try:
            data = await self._redis.get(f"resolve:{identifier}")
            if not data:
                return None
            parsed = json.loads(data)
            return (Wallpaper.from_json(json.dumps(parsed["wallpaper"])), parsed["matched_by"])
        except (RedisError, ValueError, KeyError) as e:
            logger.debug(f"Redis get_resolution error: {e}")
            return None

    async def set_resolution(self, identifier: str, wallpaper: Wallpaper, matched_by: str) -> None:
        if not self._connected:
            return
        try:
            data = json.dumps({
                "wallpaper": json.loads(wallpaper.to_json()),
                "matched_by": matched_by,
            })
            await self._redis.setex(f"resolve:{identifier}", RESOLUTION_TTL, data)
        except RedisError as e:
            logger.debug(f"Redis set_resolution error: {e}")

    # --- Listings ---
    @staticmethod
    def _listing_key(
        category: Optional[str],
        search: Optional[str],
        sort_by: str,
        page: int,
        limit: int,
    ) -> str:
        """Generate cache key for listing query."""
        return f"listing:{category or ''}:{(search or '').lower().strip()}:{sort_by}:{page}:{limit}"

    async def get_listing(
        self,
        category: Optional[str],
        search: Optional[str],
        sort_by: str,
        page: int,
        limit: int,
    ) -> Optional[Tuple[List[Wallpaper], int]]:
        """Get cached listing results (wallpapers, total_count)."""
        if not self._connected:
            return None
        try:
            data = await self._redis.get(self._listing_key(category, search, sort_by, page, limit))
            if not data:
                return None
            parsed = json.loads(data)
            return (self._deserialize_wallpapers(parsed["wallpapers"]), parsed["total"])
        except (RedisError, ValueError, KeyError) as e:
            logger.debug(f"Redis get_listing error: {e}")
            return None

    async def set_listing(
        self,
        category: Optional[str],
        search: Optional[str],
        sort_by: str,
        page: int,
        limit: int,
        wallpapers: List[Wallpaper],
        total: int,
    ) -> None:
        if not self._connected:
            return
        try:
            data = json.dumps({
                "wallpapers": self._serialize_wallpapers(wallpapers),
                "total": total,
            })
            key = self._listing_key(category, search, sort_by, page, limit)
            await self._redis.setex(key, LISTING_TTL, data)
        except RedisError as e:
            logger.debug(f"Redis set_listing error: {e}")

    # --- Categories ---
    async def get_categories(self) -> Optional[List[Category]]:
        if not self._connected:
            return None
        try:
            data = await self._redis.get("categories:all")
            if not data:
                return None
            return [Category.from_json(json.dumps(c)) for c in json.loads(data)]
        except (RedisError, ValueError) as e:
            logger.debug(f"Redis get_categories error: {e}")
            return None

    async def set_categories(self, categories: List[Category]) -> None:
        if not self._connected:
            return
        try:
            data = json.dumps([json.loads(c.to_json()) for c in categories])
            await self._redis.setex("categories:all", CATEGORY_TTL, data)
        except RedisError as e:
            logger.debug(f"Redis set_categories error: {e}")

    # --- Cache Invalidation ---
    async def invalidate_all(self) -> None:
        """Clear all caches - called after any catalog write."""
        if not self._connected:
            return
        try:
            # Delete all keys with our prefixes
            for pattern in KEY_PATTERNS:
                cursor = 0
                while True:
                    cursor, keys = await self._redis.scan(cursor, match=pattern, count=100)
                    if keys:
                        await self._redis.delete(*keys)
                    if cursor == 0:
                        break
        except RedisError as e:
            logger.debug(f"Redis invalidate_all error: {e}")

    async def get_stats(self) -> dict:
        """Get cache statistics for monitoring."""
        if not self._connected:
            return {"connected": False}
        try:
            info = await self._redis.info("keyspace")
            db_info = info.get("db0", {})
            return {
                "connected": True,
                "keys": db_info.get("keys", 0) if isinstance(db_info, dict) else 0,
            }
        except RedisError as e:
            logger.debug(f"Redis get_stats error: {e}")
            return {"connected": False, "error": str(e)}
