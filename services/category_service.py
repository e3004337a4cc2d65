"""Category listing: predefined, admin-created and wallpaper-derived categories."""

import dataclasses
import logging
from typing import Dict, List, Optional

from db.base import WallpaperStore
from models.category import Category, PREDEFINED_BY_SLUG, PREDEFINED_CATEGORIES
from utils.slug import SlugOptions, generate_slug

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTIONS = ["1080x1920", "1440x2560", "2160x3840"]
DEFAULT_DEVICE_TYPES = ["phone", "tablet", "desktop"]


def _resolution_area(resolution: str) -> int:
    try:
        width, height = resolution.lower().split("x")
        return int(width) * int(height)
    except ValueError:
        return 0


class CategoryService:
    """Merges category metadata with live wallpaper counts."""

    def __init__(self, store: WallpaperStore, category_repo):
        self.store = store
        self.category_repo = category_repo

    @staticmethod
    def normalize_slug(value: str) -> str:
        """Category slug for free-form input: "Sci Fi" -> "sci-fi"."""
        return generate_slug(value, SlugOptions(remove_stop_words=False))

    async def list_categories(self) -> List[Category]:
        """All categories, most populated first."""
        counts = await self.store.category_counts()
        categories: Dict[str, Category] = {}

        for predefined in PREDEFINED_CATEGORIES:
            categories[predefined.slug] = dataclasses.replace(
                predefined, count=counts.get(predefined.slug, 0)
            )
        for custom in await self.category_repo.get_all():
            if custom.slug not in categories:
                categories[custom.slug] = dataclasses.replace(
                    custom, count=counts.get(custom.slug, 0)
                )
        for slug, count in counts.items():
            if slug not in categories:
                categories[slug] = Category.dynamic(slug, count)

        return sorted(categories.values(), key=lambda c: (-c.count, c.name.lower()))

    async def get_category(self, slug: str) -> Optional[Category]:
        for category in await self.list_categories():
            if category.slug == slug:
                return category
        return None

    async def featured_categories(self) -> List[Category]:
        return [c for c in await self.list_categories() if c.featured]

    async def create_category(
        self, slug: str, name: Optional[str] = None, description: str = ""
    ) -> Optional[Category]:
        """Create a custom category. Returns None if the slug is already taken."""
        slug = self.normalize_slug(slug)
        if slug in PREDEFINED_BY_SLUG:
            return None

        category = Category(
            slug=slug,
            name=name or slug.upper(),
            description=description or f"{slug.capitalize()} wallpapers",
        )
        if not await self.category_repo.create(category):
            return None
        logger.info(f"Created category {slug}")
        return category

    async def ensure_category(self, slug: str) -> bool:
        """Create the category if it does not exist yet. Returns True if created."""
        if slug in PREDEFINED_BY_SLUG:
            return False
        if await self.category_repo.get_by_slug(slug):
            return False
        return await self.create_category(slug) is not None

    async def category_stats(self) -> Dict[str, int]:
        categories = await self.list_categories()
        predefined = sum(1 for c in categories if c.is_predefined)
        return {
            "total_categories": len(categories),
            "predefined_categories": predefined,
            "dynamic_categories": len(categories) - predefined,
            "total_wallpapers": sum(c.count for c in categories),
        }

    async def dynamic_options(self) -> Dict[str, List[str]]:
        """Resolutions (largest first) and device types in use."""
        resolutions = await self.store.distinct("resolution")
        device_types = await self.store.distinct("device_type")
        return {
            "resolutions": sorted(resolutions, key=_resolution_area, reverse=True)
            or list(DEFAULT_RESOLUTIONS),
            "device_types": sorted(device_types) or list(DEFAULT_DEVICE_TYPES),
        }
