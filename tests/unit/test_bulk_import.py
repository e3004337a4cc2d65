"""Unit tests for CSV bulk import."""

import pytest

from errors import SlugGenerationExhausted
from services.bulk_import import BulkImporter, CSVFormatError

SAMPLE_CSV = (
    "title,image_url,category,tags\n"
    'Aurora Sky,https://cdn.example.com/a.jpg,Northern Lights,"Sky, Aurora"\n'
    "Missing Image,,nature,\n"
    "Neon City,https://cdn.example.com/n.jpg,abstract,\n"
)


@pytest.fixture
def importer(slug_service, category_service) -> BulkImporter:
    return BulkImporter(slug_service, category_service)


class TestParseRows:
    """Test CSV parsing."""

    def test_strips_bom_and_maps_aliases(self) -> None:
        rows = BulkImporter.parse_rows(
            "\ufefftitle,imageUrl,category,customSlug\nX,https://x/x.jpg,nature,My Slug\n"
        )
        assert rows == [{
            "title": "X",
            "image_url": "https://x/x.jpg",
            "category": "nature",
            "custom_slug": "My Slug",
        }]

    def test_skips_blank_rows(self) -> None:
        rows = BulkImporter.parse_rows("title,image_url,category\n,,\nA,u,c\n")
        assert len(rows) == 1

    def test_empty_file(self) -> None:
        with pytest.raises(CSVFormatError):
            BulkImporter.parse_rows("")


class TestImportCsv:
    """Test import_csv."""

    @pytest.mark.asyncio
    async def test_imports_rows_and_reports_failures(self, importer, store) -> None:
        summary = await importer.import_csv(SAMPLE_CSV)

        assert summary.total_rows == 3
        assert summary.successful == 2
        assert summary.failed == 1
        assert summary.created_categories == ["northern-lights"]

        failed = summary.results[1]
        assert failed.row_number == 3
        assert failed.error == "Missing required fields: image_url"

        aurora = await store.find_by_slug("aurora-sky")
        assert aurora.title == "AURORA SKY"
        assert aurora.category == "northern-lights"
        assert aurora.tags == ["sky", "aurora"]
        assert aurora.description == "Aurora Sky wallpaper in northern-lights category"

        assert summary.results[2].slug == "neon-city-1"

    @pytest.mark.asyncio
    async def test_custom_slug_column(self, importer, store) -> None:
        summary = await importer.import_csv(
            "title,imageUrl,category,customSlug\nX,https://x/x.jpg,nature,My Slug\n"
        )
        wallpaper = await store.find_by_id(summary.results[0].wallpaper_id)

        assert wallpaper.slug == "my-slug"
        assert wallpaper.custom_slug is True

    @pytest.mark.asyncio
    async def test_header_only_rejected(self, importer) -> None:
        with pytest.raises(CSVFormatError):
            await importer.import_csv("title,image_url,category\n")

    @pytest.mark.asyncio
    async def test_row_error_does_not_stop_import(self, importer, slug_service, monkeypatch) -> None:
        create = slug_service.create_wallpaper

        async def failing_create(fields, custom_slug=None):
            if fields["title"] == "BAD":
                raise SlugGenerationExhausted("bad", 10)
            return await create(fields, custom_slug)

        monkeypatch.setattr(slug_service, "create_wallpaper", failing_create)
        summary = await importer.import_csv(
            "title,image_url,category\nBad,u1,nature\nGood,u2,nature\n"
        )

        assert summary.successful == 1
        assert summary.failed == 1
        assert "bad" in summary.results[0].error
        assert summary.results[1].slug == "good"

    @pytest.mark.asyncio
    async def test_summary_serializes(self, importer) -> None:
        summary = await importer.import_csv(SAMPLE_CSV)
        data = summary.to_dict()

        assert data["successful"] == 2
        assert data["results"][0]["success"] is True
