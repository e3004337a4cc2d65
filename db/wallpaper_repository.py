"""Wallpaper repository for MongoDB operations."""

import logging
import re
from typing import List, Optional, Dict, Any
from datetime import datetime

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from db.base import WallpaperStore
from errors import DuplicateSlugError, RecordNotFound
from models.wallpaper import Wallpaper

logger = logging.getLogger(__name__)


class WallpaperRepository(WallpaperStore):
    """Repository for wallpaper database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.wallpapers = db.wallpapers

    @staticmethod
    def _build_query(
        category: Optional[str] = None,
        search: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if category:
            query["category"] = category
        if exclude_id:
            query["_id"] = {"$ne": exclude_id}
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [
                {"title": pattern},
                {"category": pattern},
                {"tags": pattern},
            ]
        return query

    async def find_all(self) -> List[Wallpaper]:
        cursor = self.wallpapers.find({}).sort("created_at", DESCENDING)
        docs = await cursor.to_list(length=None)
        return [Wallpaper.from_document(doc) for doc in docs]

    async def find_by_id(self, wallpaper_id: str) -> Optional[Wallpaper]:
        doc = await self.wallpapers.find_one({"_id": wallpaper_id})
        return Wallpaper.from_document(doc) if doc else None

    async def find_by_slug(self, slug: str) -> Optional[Wallpaper]:
        doc = await self.wallpapers.find_one({"slug": slug})
        return Wallpaper.from_document(doc) if doc else None

    async def find_by_slug_history(self, slug: str) -> Optional[Wallpaper]:
        doc = await self.wallpapers.find_one(
            {"slug_history": slug},
            sort=[("updated_at", DESCENDING)],
        )
        return Wallpaper.from_document(doc) if doc else None

    async def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        query: Dict[str, Any] = {"slug": slug}
        if exclude_id:
            query["_id"] = {"$ne": exclude_id}
        return await self.wallpapers.count_documents(query, limit=1) > 0

    async def create(self, fields: Dict[str, Any]) -> Wallpaper:
        doc = dict(fields)
        doc["_id"] = str(doc.pop("id", "") or doc.get("_id") or ObjectId())
        now = datetime.utcnow()
        doc.setdefault("slug_history", [doc["slug"]] if doc.get("slug") else [])
        doc.setdefault("custom_slug", False)
        doc.setdefault("downloads", 0)
        doc.setdefault("likes", 0)
        doc.setdefault("created_at", now)
        doc.setdefault("updated_at", now)

        try:
            await self.wallpapers.insert_one(doc)
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key creating wallpaper {doc['_id']}: {e}")
            raise DuplicateSlugError(doc.get("slug") or "") from e
        return Wallpaper.from_document(doc)

    async def update(self, wallpaper_id: str, fields: Dict[str, Any]) -> None:
        changes = {k: v for k, v in fields.items() if k not in ("_id", "id")}
        changes.setdefault("updated_at", datetime.utcnow())
        try:
            result = await self.wallpapers.update_one(
                {"_id": wallpaper_id},
                {"$set": changes},
            )
        except DuplicateKeyError as e:
            raise DuplicateSlugError(changes.get("slug") or "") from e
        if result.matched_count == 0:
            raise RecordNotFound(wallpaper_id)

    async def delete(self, wallpaper_id: str) -> bool:
        result = await self.wallpapers.delete_one({"_id": wallpaper_id})
        return result.deleted_count > 0

    async def increment(self, wallpaper_id: str, field_name: str, amount: int = 1) -> None:
        doc = await self.wallpapers.find_one_and_update(
            {"_id": wallpaper_id},
            {"$inc": {field_name: amount}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise RecordNotFound(wallpaper_id)

    async def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        exclude_id: Optional[str] = None,
        sort_by: str = "created_at",
        skip: int = 0,
        limit: int = 12,
    ) -> List[Wallpaper]:
        query = self._build_query(category, search, exclude_id)

        # Sort options
        sort_field = {
            "created_at": [("created_at", DESCENDING)],
            "downloads": [("downloads", DESCENDING), ("created_at", DESCENDING)],
            "likes": [("likes", DESCENDING), ("created_at", DESCENDING)],
            "title": [("title", ASCENDING)],
        }.get(sort_by, [("created_at", DESCENDING)])

        cursor = self.wallpapers.find(query).sort(sort_field).skip(skip).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [Wallpaper.from_document(doc) for doc in docs]

    async def count(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> int:
        return await self.wallpapers.count_documents(
            self._build_query(category, search, exclude_id)
        )

    async def category_counts(self) -> Dict[str, int]:
        pipeline = [
            {"$match": {"category": {"$nin": [None, ""]}}},
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
        ]
        cursor = self.wallpapers.aggregate(pipeline)
        results = await cursor.to_list(length=None)
        return {doc["_id"]: doc["count"] for doc in results}

    async def distinct(self, field_name: str) -> List[str]:
        values = await self.wallpapers.distinct(field_name)
        return sorted([v for v in values if v])

    async def total_downloads(self) -> int:
        pipeline = [{"$group": {"_id": None, "total": {"$sum": "$downloads"}}}]
        cursor = self.wallpapers.aggregate(pipeline)
        results = await cursor.to_list(length=1)
        return results[0]["total"] if results else 0
