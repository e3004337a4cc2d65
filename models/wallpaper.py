from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime

from dataclasses_json import dataclass_json

DEFAULT_RESOLUTION = "1080x1920"
DEFAULT_DEVICE_TYPE = "phone"


@dataclass_json
@dataclass
class Wallpaper:
    title: str
    id: str = ""
    category: str = ""
    slug: Optional[str] = None
    slug_history: List[str] = field(default_factory=list)
    custom_slug: bool = False
    tags: List[str] = field(default_factory=list)
    resolution: str = DEFAULT_RESOLUTION
    device_type: str = DEFAULT_DEVICE_TYPE
    downloads: int = 0
    likes: int = 0
    image_url: str = ""
    r2_key: Optional[str] = None
    file_size: str = "0 MB"
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def canonical_url(self) -> str:
        """Get the canonical URL path for this wallpaper."""
        return f"/wallpaper/{self.slug or self.id}"

    @property
    def download_filename(self) -> str:
        """Attachment filename used by the download endpoint."""
        stem = "_".join(self.title.split()) or "wallpaper"
        return f"{stem}_{self.resolution}.jpg"

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match on title, category and tags."""
        term = term.lower()
        return (
            term in self.title.lower()
            or term in self.category.lower()
            or any(term in tag.lower() for tag in self.tags)
        )

    def to_document(self) -> Dict[str, Any]:
        """Convert to MongoDB document."""
        return {
            "_id": self.id,
            "title": self.title,
            "category": self.category,
            "slug": self.slug,
            "slug_history": self.slug_history,
            "custom_slug": self.custom_slug,
            "tags": self.tags,
            "resolution": self.resolution,
            "device_type": self.device_type,
            "downloads": self.downloads,
            "likes": self.likes,
            "image_url": self.image_url,
            "r2_key": self.r2_key,
            "file_size": self.file_size,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> Optional["Wallpaper"]:
        """Create Wallpaper instance from MongoDB document."""
        if not doc:
            return None
        return cls(
            id=str(doc.get("_id", "")),
            title=doc.get("title", ""),
            category=doc.get("category", ""),
            slug=doc.get("slug") or None,
            slug_history=list(doc.get("slug_history") or []),
            custom_slug=bool(doc.get("custom_slug", False)),
            tags=list(doc.get("tags") or []),
            resolution=doc.get("resolution") or DEFAULT_RESOLUTION,
            device_type=doc.get("device_type") or DEFAULT_DEVICE_TYPE,
            downloads=doc.get("downloads", 0),
            likes=doc.get("likes", 0),
            image_url=doc.get("image_url", ""),
            r2_key=doc.get("r2_key"),
            file_size=doc.get("file_size", "0 MB"),
            description=doc.get("description", ""),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_api(self) -> Dict[str, Any]:
        """JSON-ready dict including the canonical URL."""
        data = self.to_dict()
        data["canonical_url"] = self.canonical_url
        return data
