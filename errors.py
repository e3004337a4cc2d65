"""Exceptions raised by the catalog and its slug subsystem."""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog errors."""


class SlugGenerationExhausted(CatalogError):
    """No free slug could be found within the attempt bound."""

    def __init__(self, base_slug: str, attempts: int):
        self.base_slug = base_slug
        self.attempts = attempts
        super().__init__(
            f"Could not generate a unique slug for '{base_slug}' after {attempts} attempts"
        )


class RecordNotFound(CatalogError):
    """A wallpaper id did not match any record."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Wallpaper not found: {identifier}")


class DuplicateSlugError(CatalogError):
    """A write would give two records the same current slug."""

    def __init__(self, slug: str, holder_id: Optional[str] = None):
        self.slug = slug
        self.holder_id = holder_id
        super().__init__(f"Slug already in use: {slug}")


class StoreUnavailable(CatalogError):
    """The record store is not configured or cannot be reached."""
