"""Custom redirect rules and canonical redirects for legacy wallpaper URLs."""

import logging
import re
from typing import Dict, List, Optional

from models.redirect import REDIRECT_TYPES, RedirectRule
from services.slug_service import SlugService

logger = logging.getLogger(__name__)

WALLPAPER_PATH = re.compile(r"^/wallpaper/([^/]+)$")


class RedirectService:
    """Holds in-process redirect rules and computes legacy redirects."""

    def __init__(self, slug_service: SlugService):
        self.slug_service = slug_service
        self._rules: Dict[str, RedirectRule] = {}

    def add_rule(self, from_path: str, to_path: str, type: str = "301") -> RedirectRule:
        if type not in REDIRECT_TYPES:
            raise ValueError(f"Unsupported redirect type: {type}")
        rule = RedirectRule(from_path=from_path, to_path=to_path, type=type)
        self._rules[from_path] = rule
        logger.info(f"Added {type} redirect {from_path} -> {to_path}")
        return rule

    def remove_rule(self, from_path: str) -> bool:
        return self._rules.pop(from_path, None) is not None

    def toggle_rule(self, from_path: str) -> bool:
        rule = self._rules.get(from_path)
        if rule is None:
            return False
        rule.active = not rule.active
        return True

    def active_rules(self) -> List[RedirectRule]:
        return [rule for rule in self._rules.values() if rule.active]

    def custom_rule(self, path: str) -> Optional[RedirectRule]:
        """Active custom rule for a path, if any."""
        rule = self._rules.get(path)
        return rule if rule and rule.active else None

    async def get_redirect(self, path: str) -> Optional[RedirectRule]:
        """
        Redirect target for a path, or None.

        Active custom rules win; otherwise /wallpaper/<identifier> paths
        that resolve to a wallpaper under a non-canonical identifier are
        sent to the canonical path.
        """
        rule = self.custom_rule(path)
        if rule:
            return rule

        match = WALLPAPER_PATH.match(path)
        if not match:
            return None

        resolution = await self.slug_service.resolve_identifier(match.group(1))
        if resolution and resolution.should_redirect:
            return RedirectRule(from_path=path, to_path=resolution.canonical_url)
        return None

    async def generate_legacy_redirects(self) -> List[Dict[str, str]]:
        """Every old URL of every slugged wallpaper mapped to its canonical path."""
        wallpapers = await self.slug_service.store.find_all()
        current_slugs = {w.slug for w in wallpapers if w.slug}
        redirects = []
        for wallpaper in wallpapers:
            if not wallpaper.slug:
                continue
            target = wallpaper.canonical_url
            old_paths = [f"/wallpaper/{wallpaper.id}"]
            if wallpaper.id.isdigit():
                old_paths.append(f"/wallpaper/wallpaper-{wallpaper.id}")
            old_paths.extend(
                f"/wallpaper/{old}" for old in wallpaper.slug_history if old not in current_slugs
            )
            for old_path in dict.fromkeys(old_paths):
                redirects.append({"from": old_path, "to": target, "title": wallpaper.title})
        return redirects
