"""Slug lifecycle: uniqueness, identifier resolution and backfill."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import config
from db.base import WallpaperStore
from errors import DuplicateSlugError, RecordNotFound, SlugGenerationExhausted
from models.wallpaper import Wallpaper
from utils.slug import clean_user_slug, generate_slug, parse_legacy_identifier

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 100
MAX_WRITE_RETRIES = 10

MATCHED_BY_SLUG = "slug"
MATCHED_BY_HISTORY = "slug_history"
MATCHED_BY_ID = "id"
MATCHED_BY_LEGACY_ID = "legacy_id"


@dataclass
class Resolution:
    """A resolved identifier and how it was matched."""
    wallpaper: Wallpaper
    matched_by: str

    @property
    def canonical_url(self) -> str:
        return self.wallpaper.canonical_url

    @property
    def canonical_identifier(self) -> str:
        return self.wallpaper.slug or self.wallpaper.id

    @property
    def should_redirect(self) -> bool:
        """True when the identifier used is not the canonical one."""
        return self.matched_by != MATCHED_BY_SLUG and self.wallpaper.slug is not None


@dataclass
class BackfillResult:
    updated_count: int = 0
    errors: List[str] = field(default_factory=list)


class SlugService:
    """Generates unique slugs and resolves identifiers against a wallpaper store."""

    def __init__(self, store: WallpaperStore, search_history: Optional[bool] = None):
        self.store = store
        self.search_history = (
            config.SLUG_HISTORY_LOOKUP if search_history is None else search_history
        )

    # --- Uniqueness ---
    async def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        """Check if another wallpaper currently holds this slug."""
        return await self.store.slug_exists(slug, exclude_id)

    async def generate_unique_slug(self, base_slug: str, exclude_id: Optional[str] = None) -> str:
        """
        Return base_slug, or base_slug-N for the smallest free N in 1..99.

        The base and its suffixed candidates make 100 attempts in all;
        SlugGenerationExhausted is raised when every one is taken.
        """
        if not await self.slug_exists(base_slug, exclude_id):
            return base_slug

        for counter in range(1, MAX_SLUG_ATTEMPTS):
            candidate = f"{base_slug}-{counter}"
            if not await self.slug_exists(candidate, exclude_id):
                return candidate

        logger.warning(f"Slug candidates exhausted for base '{base_slug}'")
        raise SlugGenerationExhausted(base_slug, MAX_SLUG_ATTEMPTS)

    # --- Resolution ---
    async def resolve_identifier(self, identifier: str) -> Optional[Resolution]:
        """
        Resolve a path segment to a wallpaper.

        Lookup order: current slug, slug history (if enabled), raw id,
        legacy "wallpaper-<id>". Returns None when nothing matches.
        """
        if not identifier:
            return None

        try:
            wallpaper = await self.store.find_by_slug(identifier)
            if wallpaper:
                return Resolution(wallpaper, MATCHED_BY_SLUG)

            if self.search_history:
                wallpaper = await self.store.find_by_slug_history(identifier)
                if wallpaper:
                    return Resolution(wallpaper, MATCHED_BY_HISTORY)

            wallpaper = await self.store.find_by_id(identifier)
            if wallpaper:
                return Resolution(wallpaper, MATCHED_BY_ID)

            legacy_id = parse_legacy_identifier(identifier)
            if legacy_id:
                wallpaper = await self.store.find_by_id(legacy_id)
                if wallpaper:
                    return Resolution(wallpaper, MATCHED_BY_LEGACY_ID)
        except Exception as e:
            logger.error(f"Store error resolving identifier '{identifier}': {e}")
            raise

        return None

    # --- Writes ---
    async def create_wallpaper(
        self, fields: Dict[str, Any], custom_slug: Optional[str] = None
    ) -> Wallpaper:
        """Create a wallpaper with a fresh unique slug.

        An operator-supplied slug is cleaned and marks the record custom.
        """
        if custom_slug:
            base_slug = clean_user_slug(custom_slug)
        else:
            base_slug = generate_slug(fields.get("title", ""))

        for _ in range(MAX_WRITE_RETRIES):
            slug = await self.generate_unique_slug(base_slug)
            record = dict(fields)
            record.update({
                "slug": slug,
                "slug_history": [slug],
                "custom_slug": bool(custom_slug),
            })
            try:
                wallpaper = await self.store.create(record)
            except DuplicateSlugError:
                logger.info(f"Slug '{slug}' taken concurrently, retrying")
                continue
            logger.info(f"Created wallpaper {wallpaper.id} with slug '{slug}'")
            return wallpaper

        raise SlugGenerationExhausted(base_slug, MAX_WRITE_RETRIES)

    async def update_slug(
        self,
        wallpaper_id: str,
        new_slug: str,
        fields: Optional[Dict[str, Any]] = None,
    ) -> Wallpaper:
        """Give a wallpaper an operator-chosen slug, keeping the old one in history.

        Other field changes in `fields` go out in the same write, so nothing
        is saved when no slug can be assigned.
        """
        wallpaper = await self.store.find_by_id(wallpaper_id)
        if wallpaper is None:
            raise RecordNotFound(wallpaper_id)

        base_slug = clean_user_slug(new_slug)

        for _ in range(MAX_WRITE_RETRIES):
            slug = await self.generate_unique_slug(base_slug, exclude_id=wallpaper_id)
            changes = dict(fields or {})
            if slug != wallpaper.slug:
                history = list(wallpaper.slug_history)
                if wallpaper.slug and wallpaper.slug not in history:
                    history.append(wallpaper.slug)
                history.append(slug)
                changes.update({"slug": slug, "slug_history": history})
            if not wallpaper.custom_slug:
                changes["custom_slug"] = True
            if not changes:
                return wallpaper

            try:
                await self.store.update(wallpaper_id, changes)
            except DuplicateSlugError:
                logger.info(f"Slug '{slug}' taken concurrently, retrying")
                continue
            if slug != wallpaper.slug:
                logger.info(f"Wallpaper {wallpaper_id} slug changed '{wallpaper.slug}' -> '{slug}'")
            return await self.store.find_by_id(wallpaper_id)

        raise SlugGenerationExhausted(base_slug, MAX_WRITE_RETRIES)

    # --- Migration ---
    async def backfill_missing_slugs(self) -> BackfillResult:
        """Give every wallpaper without a slug one derived from its title.

        Records are processed one at a time; a failure is recorded and the
        batch continues.
        """
        result = BackfillResult()
        wallpapers = await self.store.find_all()

        for wallpaper in wallpapers:
            if wallpaper.slug:
                continue
            try:
                base_slug = generate_slug(wallpaper.title)
                slug = await self.generate_unique_slug(base_slug, exclude_id=wallpaper.id)
                await self.store.update(wallpaper.id, {
                    "slug": slug,
                    "slug_history": [slug],
                    "custom_slug": False,
                })
                result.updated_count += 1
                logger.info(f"Added slug '{slug}' to {wallpaper.title}")
            except Exception as e:
                logger.error(f"Failed to add slug to {wallpaper.title} ({wallpaper.id}): {e}")
                result.errors.append(f"Failed to add slug to {wallpaper.title}")

        logger.info(
            f"Slug backfill finished: {result.updated_count} updated, {len(result.errors)} errors"
        )
        return result

    async def migration_status(self, sample_size: int = 5) -> Dict[str, Any]:
        """Summarize how many wallpapers still lack a slug."""
        wallpapers = await self.store.find_all()
        with_slug = [w for w in wallpapers if w.slug]
        without_slug = [w for w in wallpapers if not w.slug]
        return {
            "total": len(wallpapers),
            "with_slugs": len(with_slug),
            "without_slugs": len(without_slug),
            "needs_migration": bool(without_slug),
            "sample_with_slugs": [
                {"id": w.id, "title": w.title, "slug": w.slug} for w in with_slug[:sample_size]
            ],
            "sample_without_slugs": [
                {"id": w.id, "title": w.title} for w in without_slug[:sample_size]
            ],
        }
