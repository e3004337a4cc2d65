"""Repository for admin-created categories."""

import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from models.category import Category

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Custom categories stored in MongoDB, keyed by slug."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.categories = db.categories

    async def get_all(self) -> List[Category]:
        cursor = self.categories.find({}).sort("name", 1)
        docs = await cursor.to_list(length=500)
        return [Category.from_document(doc) for doc in docs]

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        doc = await self.categories.find_one({"_id": slug})
        return Category.from_document(doc) if doc else None

    async def create(self, category: Category) -> bool:
        """Insert a category. Returns False if the slug is already taken."""
        try:
            await self.categories.insert_one(category.to_document())
            return True
        except DuplicateKeyError:
            logger.info(f"Category already exists: {category.slug}")
            return False

    async def delete(self, slug: str) -> bool:
        result = await self.categories.delete_one({"_id": slug})
        return result.deleted_count > 0


class MemoryCategoryRepository:
    """Category repository used alongside the in-memory wallpaper store."""

    def __init__(self):
        self._categories = {}

    async def get_all(self) -> List[Category]:
        return sorted(self._categories.values(), key=lambda c: c.name)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        return self._categories.get(slug)

    async def create(self, category: Category) -> bool:
        if category.slug in self._categories:
            return False
        self._categories[category.slug] = category
        return True

    async def delete(self, slug: str) -> bool:
        return self._categories.pop(slug, None) is not None
