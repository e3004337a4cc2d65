#!/usr/bin/env python3
"""
Add SEO slugs to wallpapers stored in MongoDB that do not have one yet.

Usage:
    python scripts/migrate_slugs.py            # Show status, then backfill
    python scripts/migrate_slugs.py --status   # Show status only

Requirements:
    - MONGODB_URI environment variable must be set
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from db.mongodb import get_database, close_connection, init_indexes
from db.wallpaper_repository import WallpaperRepository
from services.slug_service import SlugService


async def migrate(status_only: bool) -> bool:
    """Report slug coverage and backfill missing slugs."""
    print("\nConnecting to MongoDB...")
    db = await get_database()
    if db is None:
        print("Error: Failed to connect to MongoDB.")
        print("Make sure MONGODB_URI is set in your .env file.")
        return False

    try:
        await init_indexes(db)
        service = SlugService(WallpaperRepository(db))

        status = await service.migration_status()
        print(f"\nTotal wallpapers: {status['total']}")
        print(f"  - With slugs: {status['with_slugs']}")
        print(f"  - Without slugs: {status['without_slugs']}")
        for sample in status["sample_without_slugs"]:
            print(f"    * {sample['title']} ({sample['id']})")

        if status_only:
            return True
        if not status["needs_migration"]:
            print("\nNothing to migrate.")
            return True

        print("\nBackfilling slugs...")
        result = await service.backfill_missing_slugs()
        print(f"\nMigration complete!")
        print(f"  - Updated: {result.updated_count} wallpapers")
        if result.errors:
            print(f"  - Errors: {len(result.errors)}")
            for error in result.errors:
                print(f"    * {error}")
        return not result.errors
    finally:
        await close_connection()


def main():
    """Entry point for slug migration script."""
    parser = argparse.ArgumentParser(description="Backfill wallpaper slugs in MongoDB")
    parser.add_argument("--status", action="store_true", help="Only report slug coverage")
    args = parser.parse_args()

    print("=" * 50)
    print("Slug Migration Script")
    print("=" * 50)

    if not config.MONGODB_URI:
        print("\nError: MONGODB_URI environment variable not set.")
        print("\nTo set it:")
        print("  1. Copy .env.example to .env")
        print("  2. Add your MongoDB connection string")
        print("  3. Run this script again")
        sys.exit(1)

    success = asyncio.run(migrate(args.status))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
