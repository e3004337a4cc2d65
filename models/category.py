"""Wallpaper category model and the categories that ship with the site."""

from dataclasses import dataclass
from typing import Dict, Any, Optional
from datetime import datetime

from dataclasses_json import dataclass_json


@dataclass_json
@dataclass
class Category:
    """A wallpaper category, predefined or created by an admin."""
    slug: str
    name: str
    description: str = ""
    seo_title: str = ""
    count: int = 0
    featured: bool = False
    is_predefined: bool = False
    created_at: Optional[datetime] = None

    @property
    def canonical_url(self) -> str:
        return f"/category/{self.slug}"

    def to_document(self) -> Dict[str, Any]:
        """Convert to MongoDB document."""
        return {
            "_id": self.slug,
            "name": self.name,
            "description": self.description,
            "seo_title": self.seo_title,
            "count": self.count,
            "featured": self.featured,
            "created_at": self.created_at or datetime.utcnow(),
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> Optional["Category"]:
        """Create from MongoDB document."""
        if not doc:
            return None
        return cls(
            slug=doc.get("_id", ""),
            name=doc.get("name", ""),
            description=doc.get("description", ""),
            seo_title=doc.get("seo_title", ""),
            count=doc.get("count", 0),
            featured=doc.get("featured", False),
            is_predefined=False,
            created_at=doc.get("created_at"),
        )

    @classmethod
    def dynamic(cls, slug: str, count: int = 0) -> "Category":
        """Build metadata for a category that only exists on wallpapers."""
        name = " ".join(word.capitalize() for word in slug.split("-"))
        return cls(
            slug=slug,
            name=name,
            description=f"Beautiful {name.lower()} wallpapers with high-quality designs and vibrant colors",
            seo_title=f"{name} Wallpapers - Free Mobile & Desktop Backgrounds",
            count=count,
        )


PREDEFINED_CATEGORIES = [
    Category(
        slug="abstract",
        name="Abstract",
        description="Abstract and artistic wallpapers with unique patterns and designs",
        seo_title="Abstract Wallpapers - Artistic & Creative Backgrounds",
        featured=True,
        is_predefined=True,
    ),
    Category(
        slug="nature",
        name="Nature",
        description="Beautiful nature wallpapers featuring landscapes, mountains, and outdoor scenes",
        seo_title="Nature Wallpapers - Landscape & Outdoor Backgrounds",
        featured=True,
        is_predefined=True,
    ),
    Category(
        slug="minimal",
        name="Minimal",
        description="Clean and minimalist wallpapers with simple, elegant designs",
        seo_title="Minimal Wallpapers - Clean & Simple Backgrounds",
        featured=True,
        is_predefined=True,
    ),
    Category(
        slug="space",
        name="Space",
        description="Space and astronomy wallpapers featuring galaxies, nebulae, and cosmic scenes",
        seo_title="Space Wallpapers - Galaxy & Astronomy Backgrounds",
        is_predefined=True,
    ),
    Category(
        slug="dark",
        name="Dark",
        description="Dark themed wallpapers perfect for OLED displays and night viewing",
        seo_title="Dark Wallpapers - OLED & Night Mode Backgrounds",
        featured=True,
        is_predefined=True,
    ),
    Category(
        slug="colorful",
        name="Colorful",
        description="Vibrant and colorful wallpapers with bright, eye-catching designs",
        seo_title="Colorful Wallpapers - Vibrant & Bright Backgrounds",
        is_predefined=True,
    ),
    Category(
        slug="animals",
        name="Animals",
        description="Wildlife and animal wallpapers featuring pets, wild animals, and creatures",
        seo_title="Animal Wallpapers - Wildlife & Pet Backgrounds",
        is_predefined=True,
    ),
    Category(
        slug="cars",
        name="Cars",
        description="Automotive wallpapers featuring sports cars, supercars, and vehicles",
        seo_title="Car Wallpapers - Automotive & Vehicle Backgrounds",
        is_predefined=True,
    ),
    Category(
        slug="architecture",
        name="Architecture",
        description="Architectural wallpapers featuring buildings, structures, and urban designs",
        seo_title="Architecture Wallpapers - Building & Urban Backgrounds",
        is_predefined=True,
    ),
]

PREDEFINED_BY_SLUG: Dict[str, Category] = {c.slug: c for c in PREDEFINED_CATEGORIES}
