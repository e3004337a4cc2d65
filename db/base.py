from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Dict, Any

from models.wallpaper import Wallpaper


class WallpaperStore(ABC):
    """Base class for wallpaper record stores."""

    @abstractmethod
    async def find_all(self) -> List[Wallpaper]:
        """Every wallpaper, newest first."""
        pass

    @abstractmethod
    async def find_by_id(self, wallpaper_id: str) -> Optional[Wallpaper]:
        pass

    async def find_by_slug(self, slug: str) -> Optional[Wallpaper]:
        """Wallpaper whose current slug is exactly `slug`.

        Scans find_all(); stores with a slug index override this.
        """
        for wallpaper in await self.find_all():
            if wallpaper.slug == slug:
                return wallpaper
        return None

    async def find_by_slug_history(self, slug: str) -> Optional[Wallpaper]:
        """Most recently updated wallpaper that once held `slug`."""
        candidates = [w for w in await self.find_all() if slug in w.slug_history]
        if not candidates:
            return None
        return max(candidates, key=lambda w: w.updated_at or w.created_at or datetime.min)

    async def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        """True if a wallpaper other than `exclude_id` currently holds `slug`."""
        holder = await self.find_by_slug(slug)
        return holder is not None and holder.id != exclude_id

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> Wallpaper:
        """Insert a wallpaper and return it with its assigned id.

        Raises DuplicateSlugError if another record holds the slug.
        """
        pass

    @abstractmethod
    async def update(self, wallpaper_id: str, fields: Dict[str, Any]) -> None:
        """Apply a partial update.

        Raises RecordNotFound for an unknown id and DuplicateSlugError if
        the new slug is held by another record.
        """
        pass

    @abstractmethod
    async def delete(self, wallpaper_id: str) -> bool:
        pass

    @abstractmethod
    async def increment(self, wallpaper_id: str, field_name: str, amount: int = 1) -> None:
        """Atomically add `amount` to a counter field (downloads, likes)."""
        pass

    @abstractmethod
    async def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        exclude_id: Optional[str] = None,
        sort_by: str = "created_at",
        skip: int = 0,
        limit: int = 12,
    ) -> List[Wallpaper]:
        """Filtered, paginated wallpapers."""
        pass

    @abstractmethod
    async def count(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> int:
        pass

    @abstractmethod
    async def category_counts(self) -> Dict[str, int]:
        """Number of wallpapers per category."""
        pass

    @abstractmethod
    async def distinct(self, field_name: str) -> List[str]:
        """Distinct non-empty values of a field."""
        pass

    @abstractmethod
    async def total_downloads(self) -> int:
        pass
