"""Catalog services built on top of the wallpaper store."""

from services.slug_service import SlugService, Resolution, BackfillResult
from services.redirect_service import RedirectService
from services.category_service import CategoryService
from services.bulk_import import BulkImporter, ImportSummary, CSVFormatError

__all__ = [
    "SlugService",
    "Resolution",
    "BackfillResult",
    "RedirectService",
    "CategoryService",
    "BulkImporter",
    "ImportSummary",
    "CSVFormatError",
]
