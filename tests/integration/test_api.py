"""Integration tests for the HTTP API over an in-memory store."""

from unittest.mock import MagicMock

import pytest
import requests
from fastapi.testclient import TestClient

import api
import cache
import config
from cache.memory_cache import WallpaperCacheManager
from db.category_repository import MemoryCategoryRepository
from errors import SlugGenerationExhausted
from storage.r2 import R2Storage

ADMIN_KEY = "test-admin-key"
ADMIN_HEADERS = {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def bucket_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(store, bucket_client, monkeypatch) -> TestClient:
    """API client wired to the seeded memory store and a mocked bucket."""
    monkeypatch.setattr(config, "ADMIN_ACCESS_KEY", ADMIN_KEY)
    monkeypatch.setattr(cache, "_cache_manager", WallpaperCacheManager())
    storage = R2Storage(bucket_client, "wallpapers-bucket", "https://img.example.com")
    api.configure_services(store, MemoryCategoryRepository(), storage)
    return TestClient(api.app)


class TestWallpaperPage:
    """Test canonical resolution of /wallpaper/<identifier>."""

    def test_canonical_slug(self, client) -> None:
        response = client.get("/wallpaper/neon-city")

        assert response.status_code == 200
        data = response.json()
        assert data["wallpaper"]["id"] == "1"
        assert data["canonical_url"] == f"{config.BASE_URL}/wallpaper/neon-city"

    @pytest.mark.parametrize("identifier", ["2", "mountain", "wallpaper-2"])
    def test_non_canonical_redirects(self, client, identifier: str) -> None:
        response = client.get(f"/wallpaper/{identifier}", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "/wallpaper/mountain-peak"

    def test_unslugged_record_served_by_id(self, client) -> None:
        response = client.get("/wallpaper/wallpaper-42", follow_redirects=False)

        assert response.status_code == 200
        assert response.json()["wallpaper"]["id"] == "42"

    def test_not_found(self, client) -> None:
        assert client.get("/wallpaper/missing").status_code == 404

    def test_lookup_reports_match(self, client) -> None:
        data = client.get("/api/wallpapers/lookup/2").json()

        assert data["redirect"] is True
        assert data["wallpaper"]["matched_by"] == "id"
        assert data["wallpaper"]["canonical_url"] == "/wallpaper/mountain-peak"


class TestListing:
    """Test listing, search and category endpoints."""

    def test_filter_and_paginate(self, client) -> None:
        data = client.get("/api/wallpapers", params={"category": "nature"}).json()

        assert [w["slug"] for w in data["wallpapers"]] == ["mountain-peak"]
        assert data["pagination"]["total"] == 1
        assert data["pagination"]["has_next"] is False

    def test_search(self, client) -> None:
        data = client.get("/api/wallpapers", params={"search": "snow"}).json()
        assert {w["id"] for w in data["wallpapers"]} == {"2", "43"}

    def test_search_term_is_normalized(self, client) -> None:
        data = client.get("/api/wallpapers", params={"search": "  NEON  "}).json()

        assert [w["id"] for w in data["wallpapers"]] == ["1"]
        assert data["pagination"]["total"] == 1
        excluded = client.get("/api/wallpapers", params={"search": "  NEON  ", "exclude": "2"}).json()
        assert [w["id"] for w in excluded["wallpapers"]] == ["1"]

    def test_invalid_sort(self, client) -> None:
        assert client.get("/api/wallpapers", params={"sort": "random"}).status_code == 422

    def test_categories(self, client) -> None:
        data = client.get("/api/categories").json()

        assert data["total"] == 10
        assert client.get("/api/categories/nature").json()["pagination"]["total"] == 1
        assert client.get("/api/categories/unknown").status_code == 404

    def test_search_suggestions(self, client) -> None:
        assert client.get("/api/search/suggestions", params={"q": "sn"}).json() == {
            "suggestions": ["snow"]
        }

    def test_stats(self, client) -> None:
        data = client.get("/api/stats").json()

        assert data["total_wallpapers"] == 4
        assert data["total_downloads"] == 470

    def test_health(self, client) -> None:
        data = client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert data["cache_backend"] == "memory"
        assert data["storage_configured"] is True


class TestEngagement:
    """Test likes and downloads."""

    def test_like_and_unlike(self, client) -> None:
        assert client.post("/api/wallpapers/neon-city/like").json()["likes"] == 11
        assert client.post("/api/wallpapers/neon-city/unlike").json()["likes"] == 10

    def test_download_counts_and_names_file(self, client, store, monkeypatch) -> None:
        upstream = MagicMock(content=b"jpeg-bytes", headers={"Content-Type": "image/jpeg"})
        monkeypatch.setattr(requests, "get", MagicMock(return_value=upstream))

        response = client.get("/api/download/neon-city")

        assert response.status_code == 200
        assert response.content == b"jpeg-bytes"
        assert 'filename="NEON_CITY_1080x1920.jpg"' in response.headers["content-disposition"]
        data = client.get("/api/wallpapers/by-id/1").json()
        assert data["wallpaper"]["downloads"] == 121

    def test_download_upstream_failure(self, client, monkeypatch) -> None:
        monkeypatch.setattr(
            requests, "get", MagicMock(side_effect=requests.ConnectionError("unreachable"))
        )
        assert client.get("/api/download/neon-city").status_code == 502


class TestSeoRoutes:
    """Test redirect check, sitemap and robots."""

    def test_redirect_check(self, client) -> None:
        assert client.get("/api/redirect/check", params={"path": "/wallpaper/2"}).json() == {
            "redirect": True,
            "to": "/wallpaper/mountain-peak",
            "type": "301",
        }
        assert client.get(
            "/api/redirect/check", params={"path": "/wallpaper/neon-city"}
        ).json() == {"redirect": False}

    def test_sitemap_lists_canonical_urls(self, client) -> None:
        body = client.get("/sitemap.xml").text

        assert f"{config.BASE_URL}/wallpaper/neon-city" in body
        assert f"{config.BASE_URL}/wallpaper/42" in body
        assert f"{config.BASE_URL}/category/nature" in body

    def test_robots(self, client) -> None:
        assert "Sitemap:" in client.get("/robots.txt").text


class TestAdminAuth:
    """Test the admin gate."""

    def test_rejects_missing_key(self, client) -> None:
        assert client.get("/api/admin/migrate-slugs").status_code == 403
        assert client.get("/api/admin/migrate-slugs", headers={"X-Admin-Key": "wrong"}).status_code == 403

    def test_login_cookie(self, client) -> None:
        assert client.post("/api/admin/login", data={"key": "wrong"}).status_code == 403
        assert client.post("/api/admin/login", data={"key": ADMIN_KEY}).status_code == 200
        assert client.get("/api/admin/migrate-slugs").status_code == 200


class TestAdminWallpapers:
    """Test admin writes."""

    def test_upload_creates_record(self, client, bucket_client) -> None:
        response = client.post(
            "/api/admin/wallpapers/upload",
            headers=ADMIN_HEADERS,
            files={"file": ("waves.png", b"png-bytes", "image/png")},
            data={"title": "Ocean Waves", "category": "Nature", "tags": "Sea, Blue"},
        )

        assert response.status_code == 200
        wallpaper = response.json()["wallpaper"]
        assert wallpaper["slug"] == "ocean-waves"
        assert wallpaper["title"] == "OCEAN WAVES"
        assert wallpaper["tags"] == ["sea", "blue"]
        assert wallpaper["image_url"].startswith("https://img.example.com/wallpapers/ocean-waves-")
        bucket_client.put_object.assert_called_once()

    def test_multi_word_category_matches_its_page(self, client) -> None:
        response = client.post(
            "/api/admin/wallpapers/upload",
            headers=ADMIN_HEADERS,
            files={"file": ("ship.png", b"png-bytes", "image/png")},
            data={"title": "Star Ship", "category": "Sci Fi"},
        )

        assert response.json()["wallpaper"]["category"] == "sci-fi"
        page = client.get("/api/categories/sci-fi").json()
        assert page["pagination"]["total"] == 1
        assert page["category"]["slug"] == "sci-fi"

        client.put("/api/admin/wallpapers/1", headers=ADMIN_HEADERS, json={"category": "Sci Fi"})
        assert client.get("/api/categories/sci-fi").json()["pagination"]["total"] == 2

    def test_upload_rejects_file_type(self, client) -> None:
        response = client.post(
            "/api/admin/wallpapers/upload",
            headers=ADMIN_HEADERS,
            files={"file": ("a.gif", b"gif", "image/gif")},
            data={"title": "A", "category": "nature"},
        )
        assert response.status_code == 400

    def test_upload_exhaustion_cleans_up_blob(self, client, bucket_client, monkeypatch) -> None:
        async def exhausted(fields, custom_slug=None):
            raise SlugGenerationExhausted("ocean", 100)

        monkeypatch.setattr(api.slug_service, "create_wallpaper", exhausted)
        response = client.post(
            "/api/admin/wallpapers/upload",
            headers=ADMIN_HEADERS,
            files={"file": ("a.png", b"png", "image/png")},
            data={"title": "Ocean", "category": "nature"},
        )

        assert response.status_code == 409
        assert response.json()["success"] is False
        bucket_client.delete_object.assert_called_once()

    def test_update_slug_keeps_old_url_working(self, client) -> None:
        response = client.put(
            "/api/admin/wallpapers/1", headers=ADMIN_HEADERS, json={"slug": "Neon Nights"}
        )

        assert response.json()["wallpaper"]["slug"] == "neon-nights"
        old = client.get("/wallpaper/neon-city", follow_redirects=False)
        assert old.status_code == 301
        assert old.headers["location"] == "/wallpaper/neon-nights"

    def test_failed_slug_change_saves_nothing(self, client, monkeypatch) -> None:
        async def exhausted(base_slug, exclude_id=None):
            raise SlugGenerationExhausted(base_slug, 100)

        monkeypatch.setattr(api.slug_service, "generate_unique_slug", exhausted)
        response = client.put(
            "/api/admin/wallpapers/1",
            headers=ADMIN_HEADERS,
            json={"title": "Renamed", "slug": "whatever"},
        )

        assert response.status_code == 409
        wallpaper = client.get("/api/admin/wallpapers/1", headers=ADMIN_HEADERS).json()["wallpaper"]
        assert wallpaper["title"] == "NEON CITY"
        assert wallpaper["slug"] == "neon-city"

    def test_update_missing_record(self, client) -> None:
        response = client.put("/api/admin/wallpapers/999", headers=ADMIN_HEADERS, json={"title": "X"})
        assert response.status_code == 404

    def test_delete(self, client) -> None:
        assert client.delete("/api/admin/wallpapers/1", headers=ADMIN_HEADERS).json() == {"success": True}
        assert client.get("/wallpaper/neon-city").status_code == 404
        assert client.delete("/api/admin/wallpapers/1", headers=ADMIN_HEADERS).status_code == 404

    def test_bulk_import(self, client) -> None:
        csv_text = "title,image_url,category\nAurora,https://x/a.jpg,space\nBroken,,space\n"
        response = client.post(
            "/api/admin/wallpapers/bulk-import",
            headers=ADMIN_HEADERS,
            files={"file": ("batch.csv", csv_text.encode("utf-8"), "text/csv")},
        )

        summary = response.json()["summary"]
        assert summary["successful"] == 1
        assert summary["failed"] == 1
        assert client.get("/wallpaper/aurora").status_code == 200

    def test_bulk_import_rejects_non_csv(self, client) -> None:
        response = client.post(
            "/api/admin/wallpapers/bulk-import",
            headers=ADMIN_HEADERS,
            files={"file": ("batch.txt", b"x", "text/plain")},
        )
        assert response.status_code == 400


class TestAdminSlugs:
    """Test slug migration, validation and redirects."""

    def test_migration_status_and_backfill(self, client) -> None:
        status = client.get("/api/admin/migrate-slugs", headers=ADMIN_HEADERS).json()
        assert status["without_slugs"] == 2

        result = client.post("/api/admin/migrate-slugs", headers=ADMIN_HEADERS).json()
        assert result == {"success": True, "updated_count": 2, "errors": []}

        response = client.get("/wallpaper/wallpaper-42", follow_redirects=False)
        assert response.headers["location"] == "/wallpaper/dark-forest"

    def test_validate_slug(self, client) -> None:
        data = client.post(
            "/api/admin/slugs/validate",
            headers=ADMIN_HEADERS,
            json={"slug": "Neon City", "title": "Neon City At Night"},
        ).json()

        assert data["slug"] == "neon-city"
        assert data["is_valid"] is True
        assert data["available"] is False
        assert data["suggestions"]

    def test_custom_redirect_rule(self, client) -> None:
        response = client.post(
            "/api/admin/redirects",
            headers=ADMIN_HEADERS,
            json={"from_path": "/wallpaper/neon-city", "to_path": "/wallpaper/mountain-peak", "type": "302"},
        )
        assert response.json()["redirect"]["type"] == "302"

        page = client.get("/wallpaper/neon-city", follow_redirects=False)
        assert page.status_code == 302
        assert page.headers["location"] == "/wallpaper/mountain-peak"

        listing = client.get("/api/admin/redirects", headers=ADMIN_HEADERS).json()
        assert len(listing["custom_redirects"]) == 1
        assert listing["legacy_redirects"]

    def test_invalid_redirect_type(self, client) -> None:
        response = client.post(
            "/api/admin/redirects",
            headers=ADMIN_HEADERS,
            json={"from_path": "/a", "to_path": "/b", "type": "307"},
        )
        assert response.status_code == 400

    def test_dynamic_options(self, client) -> None:
        data = client.get("/api/admin/dynamic-options", headers=ADMIN_HEADERS).json()
        assert data["resolutions"][0] == "1440x2560"
