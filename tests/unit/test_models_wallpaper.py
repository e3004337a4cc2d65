"""Unit tests for the wallpaper, category and redirect models."""

from models.category import Category
from models.wallpaper import DEFAULT_DEVICE_TYPE, DEFAULT_RESOLUTION, Wallpaper


class TestWallpaper:
    """Test Wallpaper."""

    def test_canonical_url_prefers_slug(self) -> None:
        assert Wallpaper(title="A", id="7", slug="neon").canonical_url == "/wallpaper/neon"
        assert Wallpaper(title="A", id="7").canonical_url == "/wallpaper/7"

    def test_download_filename(self) -> None:
        wallpaper = Wallpaper(title="NEON  CITY", resolution="1440x2560")
        assert wallpaper.download_filename == "NEON_CITY_1440x2560.jpg"

    def test_matches_search(self) -> None:
        wallpaper = Wallpaper(title="Neon City", category="abstract", tags=["Urban"])

        assert wallpaper.matches_search("neon")
        assert wallpaper.matches_search("ABSTR")
        assert wallpaper.matches_search("urban")
        assert not wallpaper.matches_search("forest")

    def test_from_document_defaults(self) -> None:
        wallpaper = Wallpaper.from_document({"_id": "abc", "title": "X", "slug": ""})

        assert wallpaper.id == "abc"
        assert wallpaper.slug is None
        assert wallpaper.slug_history == []
        assert wallpaper.resolution == DEFAULT_RESOLUTION
        assert wallpaper.device_type == DEFAULT_DEVICE_TYPE

    def test_from_empty_document(self) -> None:
        assert Wallpaper.from_document({}) is None

    def test_document_keeps_id(self) -> None:
        wallpaper = Wallpaper(title="X", id="abc", slug="x", slug_history=["x"])
        doc = wallpaper.to_document()

        assert doc["_id"] == "abc"
        assert Wallpaper.from_document(doc) == wallpaper

    def test_to_api_includes_canonical_url(self) -> None:
        data = Wallpaper(title="X", id="abc", slug="x").to_api()

        assert data["canonical_url"] == "/wallpaper/x"
        assert data["slug"] == "x"


class TestCategory:
    """Test Category."""

    def test_dynamic_category_metadata(self) -> None:
        category = Category.dynamic("northern-lights", 3)

        assert category.name == "Northern Lights"
        assert category.count == 3
        assert category.is_predefined is False
        assert category.canonical_url == "/category/northern-lights"

    def test_document_keyed_by_slug(self) -> None:
        category = Category(slug="retro", name="RETRO")
        doc = category.to_document()

        assert doc["_id"] == "retro"
        assert Category.from_document(doc).slug == "retro"
