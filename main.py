#!/usr/bin/env python3
"""
Wallpaper Catalog - command line slug tools and catalog maintenance.

Usage:
    python main.py slugify "Sunset Over The Mountains!!"   # Print the slug for a title
    python main.py slugify "Neon City" --max-length 20 --keep-stop-words
    python main.py suggest "The Northern Lights at Night"  # Slug variants for a title
    python main.py validate my-custom-slug                 # Check an operator slug
    python main.py resolve wallpaper-42                    # Find the wallpaper for an identifier
    python main.py import wallpapers.csv                   # Bulk import from CSV
    python main.py backfill                                # Add slugs to wallpapers without one
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import config
from db import init_store, close_store
from services import BulkImporter, CategoryService, CSVFormatError, SlugService
from utils.slug import (
    SlugOptions,
    clean_user_slug,
    generate_slug,
    generate_slug_suggestions,
    validate_slug,
)


def cmd_slugify(args) -> int:
    options = SlugOptions(
        max_length=args.max_length,
        separator=args.separator,
        remove_stop_words=not args.keep_stop_words,
    )
    print(generate_slug(args.text, options))
    return 0


def cmd_suggest(args) -> int:
    for suggestion in generate_slug_suggestions(args.title):
        print(suggestion)
    return 0


def cmd_validate(args) -> int:
    slug = clean_user_slug(args.slug) if args.clean else args.slug
    result = validate_slug(slug)
    print(f"Slug: {result.slug}")
    print(f"Valid: {'yes' if result.is_valid else 'no'}")
    for error in result.errors:
        print(f"  error: {error}")
    for hint in result.suggestions:
        print(f"  hint: {hint}")
    return 0 if result.is_valid else 1


async def _resolve(identifier: str) -> int:
    store, _ = await init_store()
    try:
        resolution = await SlugService(store).resolve_identifier(identifier)
    finally:
        await close_store()

    if resolution is None:
        print(f"Not found: {identifier}")
        return 1
    data = resolution.wallpaper.to_api()
    data["matched_by"] = resolution.matched_by
    print(json.dumps(data, indent=2, default=str))
    return 0


async def _import(path: Path) -> int:
    store, category_repo = await init_store()
    try:
        slug_service = SlugService(store)
        importer = BulkImporter(slug_service, CategoryService(store, category_repo))
        summary = await importer.import_csv(path.read_text(encoding="utf-8"))
    except CSVFormatError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await close_store()

    for row in summary.results:
        if row.success:
            print(f"row {row.row_number}: created {row.wallpaper_id} ({row.slug})")
        else:
            print(f"row {row.row_number}: FAILED {row.error}")

    print("\n--- Summary ---")
    print(f"Total rows: {summary.total_rows}")
    print(f"Imported: {summary.successful}")
    print(f"Failed: {summary.failed}")
    if summary.created_categories:
        print(f"New categories: {', '.join(summary.created_categories)}")
    return 0 if summary.failed == 0 else 1


async def _backfill() -> int:
    store, _ = await init_store()
    try:
        result = await SlugService(store).backfill_missing_slugs()
    finally:
        await close_store()

    print(f"Updated: {result.updated_count}")
    for error in result.errors:
        print(f"  {error}")
    return 0 if not result.errors else 1


def main():
    parser = argparse.ArgumentParser(
        description="Slug tools and maintenance for the wallpaper catalog"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("slugify", help="Generate a slug from text")
    p.add_argument("text")
    p.add_argument("--max-length", type=int, default=60, help="Maximum slug length (default: 60)")
    p.add_argument("--separator", default="-", help="Word separator (default: -)")
    p.add_argument("--keep-stop-words", action="store_true", help="Do not drop stop words")

    p = subparsers.add_parser("suggest", help="Suggest slug variants for a title")
    p.add_argument("title")

    p = subparsers.add_parser("validate", help="Validate a slug")
    p.add_argument("slug")
    p.add_argument("--clean", action="store_true", help="Normalize the slug before validating")

    p = subparsers.add_parser("resolve", help="Resolve a slug, id or legacy id")
    p.add_argument("identifier")

    p = subparsers.add_parser("import", help="Import wallpapers from a CSV file")
    p.add_argument("csv_file", type=Path)

    subparsers.add_parser("backfill", help="Add slugs to wallpapers without one")

    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL)

    try:
        if args.command == "slugify":
            code = cmd_slugify(args)
        elif args.command == "suggest":
            code = cmd_suggest(args)
        elif args.command == "validate":
            code = cmd_validate(args)
        elif args.command == "resolve":
            code = asyncio.run(_resolve(args.identifier))
        elif args.command == "import":
            if not args.csv_file.exists():
                print(f"Error: File not found: {args.csv_file}")
                sys.exit(1)
            code = asyncio.run(_import(args.csv_file))
        else:
            code = asyncio.run(_backfill())
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
