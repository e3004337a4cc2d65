"""In-memory wallpaper store, used when MongoDB is not configured."""

import asyncio
import copy
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

from db.base import WallpaperStore
from errors import DuplicateSlugError, RecordNotFound
from models.wallpaper import Wallpaper

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "created_at": ("created_at", True),
    "downloads": ("downloads", True),
    "likes": ("likes", True),
    "title": ("title", False),
}


class MemoryWallpaperStore(WallpaperStore):
    """Dict-backed store with a slug index kept in step with every write."""

    def __init__(self, wallpapers: Optional[Iterable[Dict[str, Any]]] = None):
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._slug_index: Dict[str, str] = {}
        for fields in wallpapers or []:
            self._insert(fields)

    @classmethod
    def from_file(cls, path: Path) -> "MemoryWallpaperStore":
        """Load seed wallpapers from a JSON file (a list, or {"wallpapers": [...]})."""
        if not path.exists():
            logger.warning(f"Seed file {path} not found, starting with an empty store")
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("wallpapers", [])
        store = cls(data)
        logger.info(f"Loaded {len(store._docs)} wallpapers from {path}")
        return store

    def _insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        doc = copy.deepcopy(fields)
        wallpaper_id = str(doc.pop("id", "") or doc.get("_id") or ObjectId())
        if wallpaper_id in self._docs:
            raise ValueError(f"Wallpaper id already exists: {wallpaper_id}")

        slug = doc.get("slug") or None
        if slug and slug in self._slug_index:
            raise DuplicateSlugError(slug, self._slug_index[slug])

        now = datetime.utcnow()
        doc["_id"] = wallpaper_id
        doc["slug"] = slug
        doc.setdefault("slug_history", [slug] if slug else [])
        doc.setdefault("custom_slug", False)
        doc.setdefault("downloads", 0)
        doc.setdefault("likes", 0)
        doc.setdefault("created_at", now)
        doc.setdefault("updated_at", now)

        self._docs[wallpaper_id] = doc
        if slug:
            self._slug_index[slug] = wallpaper_id
        return doc

    def _get(self, wallpaper_id: str) -> Optional[Wallpaper]:
        doc = self._docs.get(wallpaper_id)
        return Wallpaper.from_document(copy.deepcopy(doc)) if doc else None

    @staticmethod
    def _matches(
        doc: Dict[str, Any],
        category: Optional[str],
        search: Optional[str],
        exclude_id: Optional[str],
    ) -> bool:
        if category and doc.get("category") != category:
            return False
        if exclude_id and doc["_id"] == exclude_id:
            return False
        if search:
            return Wallpaper.from_document(doc).matches_search(search)
        return True

    async def find_all(self) -> List[Wallpaper]:
        await asyncio.sleep(0)
        docs = sorted(
            self._docs.values(),
            key=lambda d: d.get("created_at") or datetime.min,
            reverse=True,
        )
        return [Wallpaper.from_document(copy.deepcopy(d)) for d in docs]

    async def find_by_id(self, wallpaper_id: str) -> Optional[Wallpaper]:
        await asyncio.sleep(0)
        return self._get(wallpaper_id)

    async def find_by_slug(self, slug: str) -> Optional[Wallpaper]:
        await asyncio.sleep(0)
        wallpaper_id = self._slug_index.get(slug)
        return self._get(wallpaper_id) if wallpaper_id else None

    async def create(self, fields: Dict[str, Any]) -> Wallpaper:
        await asyncio.sleep(0)
        doc = self._insert(fields)
        return Wallpaper.from_document(copy.deepcopy(doc))

    async def update(self, wallpaper_id: str, fields: Dict[str, Any]) -> None:
        await asyncio.sleep(0)
        doc = self._docs.get(wallpaper_id)
        if doc is None:
            raise RecordNotFound(wallpaper_id)

        changes = {k: copy.deepcopy(v) for k, v in fields.items() if k not in ("_id", "id")}
        if "slug" in changes:
            new_slug = changes["slug"] or None
            holder = self._slug_index.get(new_slug) if new_slug else None
            if holder is not None and holder != wallpaper_id:
                raise DuplicateSlugError(new_slug, holder)
            old_slug = doc.get("slug")
            if old_slug and self._slug_index.get(old_slug) == wallpaper_id:
                del self._slug_index[old_slug]
            if new_slug:
                self._slug_index[new_slug] = wallpaper_id
            changes["slug"] = new_slug

        changes.setdefault("updated_at", datetime.utcnow())
        doc.update(changes)

    async def delete(self, wallpaper_id: str) -> bool:
        await asyncio.sleep(0)
        doc = self._docs.pop(wallpaper_id, None)
        if doc is None:
            return False
        slug = doc.get("slug")
        if slug and self._slug_index.get(slug) == wallpaper_id:
            del self._slug_index[slug]
        return True

    async def increment(self, wallpaper_id: str, field_name: str, amount: int = 1) -> None:
        await asyncio.sleep(0)
        doc = self._docs.get(wallpaper_id)
        if doc is None:
            raise RecordNotFound(wallpaper_id)
        doc[field_name] = (doc.get(field_name) or 0) + amount

    async def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        exclude_id: Optional[str] = None,
        sort_by: str = "created_at",
        skip: int = 0,
        limit: int = 12,
    ) -> List[Wallpaper]:
        await asyncio.sleep(0)
        key, reverse = SORT_FIELDS.get(sort_by, SORT_FIELDS["created_at"])
        docs = [d for d in self._docs.values() if self._matches(d, category, search, exclude_id)]
        if key == "created_at":
            docs.sort(key=lambda d: d.get("created_at") or datetime.min, reverse=reverse)
        elif key == "title":
            docs.sort(key=lambda d: (d.get("title") or "").lower(), reverse=reverse)
        else:
            docs.sort(key=lambda d: d.get(key) or 0, reverse=reverse)
        return [Wallpaper.from_document(copy.deepcopy(d)) for d in docs[skip:skip + limit]]

    async def count(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> int:
        await asyncio.sleep(0)
        return sum(1 for d in self._docs.values() if self._matches(d, category, search, exclude_id))

    async def category_counts(self) -> Dict[str, int]:
        await asyncio.sleep(0)
        counts: Dict[str, int] = {}
        for doc in self._docs.values():
            category = doc.get("category")
            if category:
                counts[category] = counts.get(category, 0) + 1
        return counts

    async def distinct(self, field_name: str) -> List[str]:
        await asyncio.sleep(0)
        values = set()
        for doc in self._docs.values():
            value = doc.get(field_name)
            if isinstance(value, list):
                values.update(v for v in value if v)
            elif value:
                values.add(value)
        return sorted(values)

    async def total_downloads(self) -> int:
        await asyncio.sleep(0)
        return sum(doc.get("downloads") or 0 for doc in self._docs.values())
