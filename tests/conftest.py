"""Shared pytest fixtures and configuration."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Set

import pytest

from db.memory_store import MemoryWallpaperStore
from db.category_repository import MemoryCategoryRepository
from services.category_service import CategoryService
from services.slug_service import SlugService


class CountingStore(MemoryWallpaperStore):
    """Memory store that records every write."""

    def __init__(self, wallpapers=None):
        super().__init__(wallpapers)
        self.writes: List[str] = []

    async def update(self, wallpaper_id: str, fields: Dict[str, Any]) -> None:
        self.writes.append(wallpaper_id)
        await super().update(wallpaper_id, fields)

    async def create(self, fields: Dict[str, Any]):
        self.writes.append(fields.get("title", ""))
        return await super().create(fields)


class FlakyStore(MemoryWallpaperStore):
    """Memory store whose updates fail for chosen ids."""

    def __init__(self, wallpapers=None, failing_ids: Optional[Set[str]] = None):
        super().__init__(wallpapers)
        self.failing_ids = failing_ids or set()

    async def update(self, wallpaper_id: str, fields: Dict[str, Any]) -> None:
        if wallpaper_id in self.failing_ids:
            raise ConnectionError(f"write conflict on {wallpaper_id}")
        await super().update(wallpaper_id, fields)


@pytest.fixture
def sample_wallpapers() -> List[Dict[str, Any]]:
    """Seed wallpapers: some slugged, some legacy records without slugs."""
    return [
        {
            "id": "1",
            "title": "NEON CITY",
            "slug": "neon-city",
            "slug_history": ["neon-city"],
            "category": "abstract",
            "tags": ["neon", "city", "urban"],
            "downloads": 120,
            "likes": 10,
            "image_url": "https://images.example.com/neon-city.jpg",
            "created_at": datetime(2024, 1, 1),
        },
        {
            "id": "2",
            "title": "MOUNTAIN PEAK",
            "slug": "mountain-peak",
            "slug_history": ["mountain", "mountain-peak"],
            "custom_slug": True,
            "category": "nature",
            "tags": ["mountain", "snow"],
            "downloads": 300,
            "likes": 25,
            "resolution": "1440x2560",
            "image_url": "https://images.example.com/mountain-peak.jpg",
            "created_at": datetime(2024, 1, 2),
        },
        {
            "id": "42",
            "title": "Dark Forest",
            "category": "dark",
            "tags": ["forest", "night"],
            "downloads": 50,
            "device_type": "desktop",
            "resolution": "1920x1080",
            "created_at": datetime(2024, 1, 3),
        },
        {
            "id": "43",
            "title": "The Wolf in the Snow",
            "category": "wildlife",
            "tags": ["wolf", "snow"],
            "created_at": datetime(2024, 1, 4),
        },
    ]


@pytest.fixture
def store(sample_wallpapers) -> MemoryWallpaperStore:
    """In-memory store seeded with sample wallpapers."""
    return MemoryWallpaperStore(sample_wallpapers)


@pytest.fixture
def empty_store() -> MemoryWallpaperStore:
    return MemoryWallpaperStore()


@pytest.fixture
def slug_service(store: MemoryWallpaperStore) -> SlugService:
    return SlugService(store, search_history=True)


@pytest.fixture
def category_repo() -> MemoryCategoryRepository:
    return MemoryCategoryRepository()


@pytest.fixture
def category_service(store, category_repo) -> CategoryService:
    return CategoryService(store, category_repo)


@pytest.fixture
def counting_store(sample_wallpapers) -> CountingStore:
    """Seeded store that records writes."""
    return CountingStore(sample_wallpapers)


@pytest.fixture
def flaky_store(sample_wallpapers) -> FlakyStore:
    """Seeded store whose updates to wallpaper 42 fail."""
    return FlakyStore(sample_wallpapers, failing_ids={"42"})
