"""Unit tests for RedirectService."""

import pytest

from services.redirect_service import RedirectService


@pytest.fixture
def redirect_service(slug_service) -> RedirectService:
    return RedirectService(slug_service)


class TestRules:
    """Test custom rule management."""

    def test_rejects_unknown_type(self, redirect_service) -> None:
        with pytest.raises(ValueError):
            redirect_service.add_rule("/old", "/new", "307")

    def test_add_toggle_remove(self, redirect_service) -> None:
        redirect_service.add_rule("/old", "/new")
        assert [r.from_path for r in redirect_service.active_rules()] == ["/old"]

        assert redirect_service.toggle_rule("/old") is True
        assert redirect_service.active_rules() == []
        assert redirect_service.custom_rule("/old") is None

        assert redirect_service.remove_rule("/old") is True
        assert redirect_service.remove_rule("/old") is False
        assert redirect_service.toggle_rule("/old") is False

    def test_rule_to_dict(self, redirect_service) -> None:
        rule = redirect_service.add_rule("/old", "/new", "302")
        data = rule.to_dict()

        assert data["from"] == "/old"
        assert data["to"] == "/new"
        assert rule.status_code == 302


class TestGetRedirect:
    """Test get_redirect."""

    @pytest.mark.asyncio
    async def test_custom_rule_wins(self, redirect_service) -> None:
        redirect_service.add_rule("/wallpaper/neon-city", "/wallpaper/mountain-peak", "302")
        rule = await redirect_service.get_redirect("/wallpaper/neon-city")

        assert rule.to_path == "/wallpaper/mountain-peak"
        assert rule.status_code == 302

    @pytest.mark.asyncio
    async def test_inactive_rule_ignored(self, redirect_service) -> None:
        redirect_service.add_rule("/wallpaper/neon-city", "/elsewhere")
        redirect_service.toggle_rule("/wallpaper/neon-city")

        assert await redirect_service.get_redirect("/wallpaper/neon-city") is None

    @pytest.mark.asyncio
    async def test_id_path_redirects_to_canonical(self, redirect_service) -> None:
        rule = await redirect_service.get_redirect("/wallpaper/2")

        assert rule.to_path == "/wallpaper/mountain-peak"
        assert rule.status_code == 301

    @pytest.mark.asyncio
    async def test_old_slug_redirects(self, redirect_service) -> None:
        rule = await redirect_service.get_redirect("/wallpaper/mountain")
        assert rule.to_path == "/wallpaper/mountain-peak"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/wallpaper/neon-city",
        "/wallpaper/42",
        "/wallpaper/missing",
        "/about",
        "/wallpaper/a/b",
    ])
    async def test_no_redirect(self, redirect_service, path: str) -> None:
        assert await redirect_service.get_redirect(path) is None


class TestLegacyRedirects:
    """Test generate_legacy_redirects."""

    @pytest.mark.asyncio
    async def test_maps_old_paths(self, redirect_service) -> None:
        redirects = await redirect_service.generate_legacy_redirects()
        pairs = {(r["from"], r["to"]) for r in redirects}

        assert pairs == {
            ("/wallpaper/1", "/wallpaper/neon-city"),
            ("/wallpaper/wallpaper-1", "/wallpaper/neon-city"),
            ("/wallpaper/2", "/wallpaper/mountain-peak"),
            ("/wallpaper/wallpaper-2", "/wallpaper/mountain-peak"),
            ("/wallpaper/mountain", "/wallpaper/mountain-peak"),
        }

    @pytest.mark.asyncio
    async def test_includes_backfilled_records(self, redirect_service, slug_service) -> None:
        await slug_service.backfill_missing_slugs()
        redirects = await redirect_service.generate_legacy_redirects()

        assert {"from": "/wallpaper/42", "to": "/wallpaper/dark-forest", "title": "Dark Forest"} in redirects
