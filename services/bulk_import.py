"""CSV bulk import of wallpapers."""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dataclasses_json import dataclass_json

from services.category_service import CategoryService
from services.slug_service import SlugService
from models.wallpaper import DEFAULT_DEVICE_TYPE, DEFAULT_RESOLUTION

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("title", "image_url", "category")

# Accept the camelCase headers of older export files
COLUMN_ALIASES = {
    "imageUrl": "image_url",
    "deviceType": "device_type",
    "customSlug": "custom_slug",
}


class CSVFormatError(ValueError):
    """The uploaded file is not a usable CSV."""


@dataclass_json
@dataclass
class ImportRowResult:
    row_number: int
    success: bool
    wallpaper_id: Optional[str] = None
    slug: Optional[str] = None
    error: Optional[str] = None


@dataclass_json
@dataclass
class ImportSummary:
    total_rows: int = 0
    successful: int = 0
    failed: int = 0
    created_categories: List[str] = field(default_factory=list)
    results: List[ImportRowResult] = field(default_factory=list)


class BulkImporter:
    """Creates one wallpaper per CSV row; a bad row never stops the import."""

    def __init__(self, slug_service: SlugService, category_service: CategoryService):
        self.slug_service = slug_service
        self.category_service = category_service

    @staticmethod
    def parse_rows(text: str) -> List[Dict[str, str]]:
        """Parse CSV text into rows keyed by normalized column name."""
        reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
        if not reader.fieldnames:
            raise CSVFormatError("CSV file is empty")

        rows = []
        try:
            for raw in reader:
                row = {}
                for key, value in raw.items():
                    if key is None:
                        continue
                    key = key.strip()
                    row[COLUMN_ALIASES.get(key, key)] = (value or "").strip()
                if any(row.values()):
                    rows.append(row)
        except csv.Error as e:
            raise CSVFormatError(f"Invalid CSV format: {e}") from e
        return rows

    async def import_csv(self, text: str) -> ImportSummary:
        rows = self.parse_rows(text)
        if not rows:
            raise CSVFormatError("CSV file has no data rows")

        summary = ImportSummary(total_rows=len(rows))
        for index, row in enumerate(rows):
            # Header is row 1
            row_number = index + 2
            result = await self._import_row(row_number, row, summary)
            summary.results.append(result)
            if result.success:
                summary.successful += 1
            else:
                summary.failed += 1

        logger.info(
            f"Bulk import finished: {summary.successful} imported, {summary.failed} failed, "
            f"{len(summary.created_categories)} new categories"
        )
        return summary

    async def _import_row(
        self, row_number: int, row: Dict[str, str], summary: ImportSummary
    ) -> ImportRowResult:
        missing = [column for column in REQUIRED_COLUMNS if not row.get(column)]
        if missing:
            return ImportRowResult(
                row_number=row_number,
                success=False,
                error=f"Missing required fields: {', '.join(missing)}",
            )

        try:
            category = self.category_service.normalize_slug(row["category"])
            if await self.category_service.ensure_category(category):
                summary.created_categories.append(category)

            tags = [t.strip().lower() for t in row.get("tags", "").split(",") if t.strip()]
            fields: Dict[str, Any] = {
                "title": row["title"].upper(),
                "category": category,
                "image_url": row["image_url"],
                "tags": tags,
                "resolution": row.get("resolution") or DEFAULT_RESOLUTION,
                "device_type": row.get("device_type") or DEFAULT_DEVICE_TYPE,
                "description": row.get("description")
                or f"{row['title']} wallpaper in {category} category",
                "file_size": "0 MB",
            }
            wallpaper = await self.slug_service.create_wallpaper(
                fields, custom_slug=row.get("custom_slug") or None
            )
        except Exception as e:
            logger.error(f"Error processing row {row_number}: {e}")
            return ImportRowResult(row_number=row_number, success=False, error=str(e))

        return ImportRowResult(
            row_number=row_number,
            success=True,
            wallpaper_id=wallpaper.id,
            slug=wallpaper.slug,
        )
