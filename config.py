"""Runtime configuration read from the environment (and an optional .env file)."""

import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent

# Load .env file
load_dotenv(ROOT_DIR / ".env")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# MongoDB
MONGODB_URI = os.getenv("MONGODB_URI")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "wallpapers")

# Used when MongoDB is not configured
SEED_FILE = Path(os.getenv("SEED_FILE", str(ROOT_DIR / "data" / "seed_wallpapers.json")))

# Redis (optional, falls back to in-memory cache)
REDIS_URL = os.getenv("REDIS_URL")

# Site
BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")
SITE_NAME = os.getenv("SITE_NAME", "WallpapersVerse")

# Admin configuration
ADMIN_ACCESS_KEY = os.getenv("ADMIN_ACCESS_KEY", "")

# Cloudflare R2 (S3-compatible object storage)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID", "")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID", "")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY", "")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "")
R2_PUBLIC_URL = os.getenv("R2_PUBLIC_URL", "")

# Resolve old slugs through slug history before falling back to ids
SLUG_HISTORY_LOOKUP = _env_flag("SLUG_HISTORY_LOOKUP", True)
