"""In-memory caching layer using cachetools TTLCache."""

import asyncio
from typing import List, Optional, Dict, Tuple

from cachetools import TTLCache

from models.category import Category
from models.wallpaper import Wallpaper


class WallpaperCacheManager:
    """Manages all in-memory caches for wallpaper data."""

    def __init__(self):
        # Identifier resolution cache: 500 items, 10 min TTL
        self._resolution_cache: TTLCache = TTLCache(maxsize=500, ttl=600)
        self._resolution_lock = asyncio.Lock()

        # Listing results cache: 100 items, 5 min TTL
        self._listing_cache: TTLCache = TTLCache(maxsize=100, ttl=300)
        self._listing_lock = asyncio.Lock()

        # Category list cache: 1 item, 10 min TTL
        self._category_cache: TTLCache = TTLCache(maxsize=1, ttl=600)
        self._category_lock = asyncio.Lock()

    # --- Identifier Resolution ---
    async def get_resolution(self, identifier: str) -> Optional[Tuple[Wallpaper, str]]:
        """Get cached (wallpaper, matched_by) for an identifier."""
        async with self._resolution_lock:
            return self._resolution_cache.get(identifier)

    async def set_resolution(self, identifier: str, wallpaper: Wallpaper, matched_by: str) -> None:
        async with self._resolution_lock:
            self._resolution_cache[identifier] = (wallpaper, matched_by)

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
        return f"{category or ''}:{(search or '').lower().strip()}:{sort_by}:{page}:{limit}"

    async def get_listing(
        self,
        category: Optional[str],
        search: Optional[str],
        sort_by: str,
        page: int,
        limit: int,
    ) -> Optional[Tuple[List[Wallpaper], int]]:
        """Get cached listing results (wallpapers, total_count)."""
        key = self._listing_key(category, search, sort_by, page, limit)
        async with self._listing_lock:
            return self._listing_cache.get(key)

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
        key = self._listing_key(category, search, sort_by, page, limit)
        async with self._listing_lock:
            self._listing_cache[key] = (wallpapers, total)

    # --- Categories ---
    async def get_categories(self) -> Optional[List[Category]]:
        async with self._category_lock:
            return self._category_cache.get("all")

    async def set_categories(self, categories: List[Category]) -> None:
        async with self._category_lock:
            self._category_cache["all"] = categories

    # --- Cache Invalidation ---
    async def invalidate_all(self) -> None:
        """Clear all caches - called after any catalog write."""
        async with self._resolution_lock:
            self._resolution_cache.clear()
        async with self._listing_lock:
            self._listing_cache.clear()
        async with self._category_lock:
            self._category_cache.clear()

    async def get_stats(self) -> Dict[str, Dict[str, int]]:
        """Get cache statistics for monitoring."""
        return {
            "resolution": {
                "size": len(self._resolution_cache),
                "maxsize": self._resolution_cache.maxsize,
            },
            "listing": {
                "size": len(self._listing_cache),
                "maxsize": self._listing_cache.maxsize,
            },
            "categories": {
                "size": len(self._category_cache),
                "maxsize": self._category_cache.maxsize,
            },
        }


# Global instance
memory_cache = WallpaperCacheManager()
