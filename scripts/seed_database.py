#!/usr/bin/env python3
"""
Seed MongoDB with the sample wallpapers in data/seed_wallpapers.json.

Usage:
    python scripts/seed_database.py
    python scripts/seed_database.py --file path/to/wallpapers.json

Existing wallpapers (same id) are left untouched. Seed entries without a
slug are stored without one; run scripts/migrate_slugs.py afterwards.

Requirements:
    - MONGODB_URI environment variable must be set
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from db.mongodb import get_database, close_connection, init_indexes
from db.wallpaper_repository import WallpaperRepository
from errors import DuplicateSlugError


async def seed(seed_file: Path) -> bool:
    """Insert seed wallpapers that are not in the database yet."""
    if not seed_file.exists():
        print(f"Error: Seed file not found at {seed_file}")
        return False

    with open(seed_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    wallpapers = data.get("wallpapers", []) if isinstance(data, dict) else data
    print(f"Found {len(wallpapers)} wallpapers in {seed_file}.")

    print("\nConnecting to MongoDB...")
    db = await get_database()
    if db is None:
        print("Error: Failed to connect to MongoDB.")
        return False

    try:
        await init_indexes(db)
        repo = WallpaperRepository(db)
        created = skipped = 0
        for fields in wallpapers:
            if fields.get("id") and await repo.find_by_id(str(fields["id"])):
                skipped += 1
                continue
            try:
                await repo.create(fields)
                created += 1
            except DuplicateSlugError as e:
                print(f"Warning: {fields.get('title')}: {e}")
                skipped += 1

        print(f"\nSeeding complete!")
        print(f"  - Created: {created}")
        print(f"  - Skipped: {skipped}")
        print(f"  - Total in database: {await repo.count()}")
        return True
    finally:
        await close_connection()


def main():
    parser = argparse.ArgumentParser(description="Seed MongoDB with sample wallpapers")
    parser.add_argument("--file", type=Path, default=config.SEED_FILE, help="Seed JSON file")
    args = parser.parse_args()

    if not config.MONGODB_URI:
        print("\nError: MONGODB_URI environment variable not set.")
        sys.exit(1)

    success = asyncio.run(seed(args.file))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
