"""URL slug generation utilities for SEO-friendly wallpaper URLs."""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Pattern

from slugify import slugify, smart_truncate

FALLBACK_SLUG = "untitled"
DEFAULT_MAX_LENGTH = 60
USER_SLUG_MAX_LENGTH = 100
LEGACY_PREFIX = "wallpaper-"

# Articles, conjunctions, prepositions and auxiliaries dropped for SEO
STOP_WORDS = frozenset([
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "must", "can", "this", "that", "these", "those",
])

VALID_SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


@dataclass(frozen=True)
class SlugOptions:
    """Options for generate_slug."""
    max_length: int = DEFAULT_MAX_LENGTH
    separator: str = "-"
    lowercase: bool = True
    remove_stop_words: bool = True


@dataclass
class SlugValidation:
    """Result of validating an operator-supplied slug."""
    is_valid: bool
    slug: str
    errors: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


@lru_cache(maxsize=8)
def _unsafe_chars(separator: str) -> Pattern:
    """Pattern matching everything that is not alphanumeric, whitespace or the separator."""
    pattern = rf"[^\w\s{re.escape(separator)}]"
    if separator != "_":
        # \w keeps underscores, which are not alphanumeric
        pattern += "|_"
    return re.compile(pattern)


def generate_slug(text: str, options: Optional[SlugOptions] = None) -> str:
    """
    Generate a URL-friendly slug from a title.

    Examples:
        "Sunset Over The Mountains!!" -> "sunset-over-mountains"
        "Neon City" -> "neon-city"
        "!!!" -> "untitled"
    """
    options = options or SlugOptions()
    max_length = max(1, options.max_length)
    separator = options.separator or "-"

    if not isinstance(text, str):
        text = str(text) if text else ""

    slug = text.lower() if options.lowercase else text

    if options.remove_stop_words:
        slug = " ".join(word for word in slug.split() if word.lower() not in STOP_WORDS)

    slug = _unsafe_chars(separator).sub("", slug)

    # Transliterates to ASCII and collapses whitespace/separator runs
    slug = slugify(slug, separator=separator, lowercase=options.lowercase)
    slug = smart_truncate(slug, max_length, separator=separator)

    return slug or FALLBACK_SLUG[:max_length]


def clean_user_slug(user_slug: str) -> str:
    """Normalize a slug typed by an operator, keeping stop words."""
    return generate_slug(
        user_slug,
        SlugOptions(max_length=USER_SLUG_MAX_LENGTH, remove_stop_words=False),
    )


def validate_slug(slug: str) -> SlugValidation:
    """Validate a slug according to SEO best practices."""
    errors = []
    suggestions = []

    if len(slug) < 3:
        errors.append("Slug must be at least 3 characters long")
    if len(slug) > USER_SLUG_MAX_LENGTH:
        errors.append(f"Slug should not exceed {USER_SLUG_MAX_LENGTH} characters")
    if not VALID_SLUG_PATTERN.match(slug):
        errors.append("Slug can only contain lowercase letters, numbers, and hyphens")
    if "--" in slug:
        errors.append("Slug should not contain consecutive hyphens")
    if slug.startswith("-") or slug.endswith("-"):
        errors.append("Slug should not start or end with hyphens")

    if "wallpaper" in slug:
        suggestions.append('Consider removing "wallpaper" from slug for conciseness')
    if len(slug.split("-")) > 6:
        suggestions.append("Consider shortening slug for better readability")

    return SlugValidation(
        is_valid=not errors,
        slug=slug,
        errors=errors,
        suggestions=suggestions,
    )


def generate_slug_suggestions(title: str) -> List[str]:
    """Return up to five distinct slug candidates for a title."""
    candidates = [
        generate_slug(title, SlugOptions(max_length=50)),
        generate_slug(title, SlugOptions(max_length=30)),
        generate_slug(title, SlugOptions(max_length=50, remove_stop_words=False)),
        # Very short version for social media
        generate_slug(title, SlugOptions(max_length=25)),
    ]
    unique = list(dict.fromkeys(c for c in candidates if c))
    return unique[:5]


def extract_keywords(slug: str) -> List[str]:
    """Extract SEO keywords from a slug."""
    return [
        word for word in slug.split("-")
        if len(word) > 2 and word not in STOP_WORDS
    ]


def parse_legacy_identifier(identifier: str) -> Optional[str]:
    """
    Extract the record id from a legacy identifier.

    Examples:
        "wallpaper-42" -> "42"
        "wallpaper-" -> None
        "sunset" -> None
    """
    if identifier.startswith(LEGACY_PREFIX):
        suffix = identifier[len(LEGACY_PREFIX):]
        return suffix or None
    return None
