#!/usr/bin/env python3
"""
Wallpaper Catalog API - browse, download and manage wallpapers.

Run with: uvicorn api:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from fastapi import FastAPI, Query, HTTPException, Request, Depends, Form, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

import config
from cache import init_cache, close_cache, get_cache, get_cache_backend_name
from db import init_store, close_store, get_store_backend_name
from db.base import WallpaperStore
from db.category_repository import MemoryCategoryRepository
from db.mongodb import check_connection
from errors import CatalogError, RecordNotFound, SlugGenerationExhausted, StoreUnavailable
from models.redirect import REDIRECT_TYPES
from models.wallpaper import DEFAULT_DEVICE_TYPE, DEFAULT_RESOLUTION
from services import (
    BulkImporter,
    CategoryService,
    CSVFormatError,
    RedirectService,
    Resolution,
    SlugService,
)
from storage import R2Storage
from utils.slug import clean_user_slug, generate_slug_suggestions, validate_slug

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

admin_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)

MAX_SUGGESTIONS = 8
RELATED_LIMIT = 6

# Global service instances (set during startup)
store: Optional[WallpaperStore] = None
slug_service: Optional[SlugService] = None
redirect_service: Optional[RedirectService] = None
category_service: Optional[CategoryService] = None
bulk_importer: Optional[BulkImporter] = None
storage: Optional[R2Storage] = None


def configure_services(
    wallpaper_store: WallpaperStore,
    category_repo=None,
    image_storage: Optional[R2Storage] = None,
) -> None:
    """Wire the services around a wallpaper store."""
    global store, slug_service, redirect_service, category_service, bulk_importer, storage
    store = wallpaper_store
    slug_service = SlugService(wallpaper_store)
    redirect_service = RedirectService(slug_service)
    category_service = CategoryService(wallpaper_store, category_repo or MemoryCategoryRepository())
    bulk_importer = BulkImporter(slug_service, category_service)
    storage = image_storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the store, object storage and cache on startup."""
    wallpaper_store, category_repo = await init_store()
    configure_services(wallpaper_store, category_repo, R2Storage.from_env())
    # Initialize cache (Redis if REDIS_URL set, otherwise in-memory)
    await init_cache()
    yield
    await close_cache()
    await close_store()


app = FastAPI(
    title=f"{config.SITE_NAME} API",
    description="Browse and download wallpapers by category",
    version="1.0.0",
    lifespan=lifespan,
)

# Enable CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SlugGenerationExhausted)
async def slug_exhausted_handler(request: Request, exc: SlugGenerationExhausted):
    return JSONResponse(
        status_code=409,
        content={
            "success": False,
            "error": f"{exc}. Please retry with a different title or custom slug.",
        },
    )


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    return JSONResponse(
        status_code=503,
        content={"success": False, "error": str(exc) or "Wallpaper store unavailable"},
    )


@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound):
    return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})


def require_admin(request: Request, key: Optional[str] = Depends(admin_header)) -> None:
    """Admin gate: X-Admin-Key header or admin_key cookie."""
    key = key or request.cookies.get("admin_key")
    if not config.ADMIN_ACCESS_KEY or key != config.ADMIN_ACCESS_KEY:
        raise HTTPException(status_code=403, detail="Admin access required")


def get_slug_service() -> SlugService:
    if slug_service is None:
        raise StoreUnavailable("Wallpaper store not initialized")
    return slug_service


def get_storage() -> R2Storage:
    if storage is None:
        raise HTTPException(status_code=503, detail="Image storage is not configured")
    return storage


def _pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_pages = (total + limit - 1) // limit if total > 0 else 1
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


async def resolve(identifier: str) -> Optional[Resolution]:
    """Resolve an identifier, cache first."""
    cache_mgr = get_cache()
    cached = await cache_mgr.get_resolution(identifier)
    if cached is not None:
        wallpaper, matched_by = cached
        return Resolution(wallpaper, matched_by)

    resolution = await get_slug_service().resolve_identifier(identifier)
    if resolution is not None:
        await cache_mgr.set_resolution(identifier, resolution.wallpaper, resolution.matched_by)
    return resolution


async def list_wallpapers_cached(
    category: Optional[str],
    search: Optional[str],
    sort_by: str,
    page: int,
    limit: int,
):
    cache_mgr = get_cache()
    cached = await cache_mgr.get_listing(category, search, sort_by, page, limit)
    if cached is not None:
        return cached

    skip = (page - 1) * limit
    wallpapers = await store.list(category=category, search=search, sort_by=sort_by, skip=skip, limit=limit)
    total = await store.count(category=category, search=search)
    await cache_mgr.set_listing(category, search, sort_by, page, limit, wallpapers, total)
    return wallpapers, total


async def list_categories_cached():
    cache_mgr = get_cache()
    categories = await cache_mgr.get_categories()
    if categories is None:
        categories = await category_service.list_categories()
        await cache_mgr.set_categories(categories)
    return categories


async def delete_blob(key: Optional[str]) -> None:
    """Delete a superseded image; failures are logged only."""
    if not key or storage is None:
        return
    if not await run_in_threadpool(storage.delete_file, key):
        logger.warning(f"Could not delete old image {key}")


async def read_image(file: UploadFile) -> bytes:
    data = await file.read()
    valid, error = R2Storage.validate_image(file.content_type or "", len(data))
    if not valid:
        raise HTTPException(status_code=400, detail=error)
    return data


async def upload_image(title: str, file: UploadFile, data: bytes):
    r2 = get_storage()
    key = r2.generate_key(title, r2.extension_for(file.content_type or ""))
    result = await run_in_threadpool(r2.upload_file, data, key, file.content_type)
    if not result.success:
        raise HTTPException(status_code=502, detail=f"Image upload failed: {result.error}")
    return result


def _file_size(size: int) -> str:
    return f"{size / (1024 * 1024):.1f} MB"


# ========== PUBLIC API ==========

@app.get("/api/wallpapers")
async def get_wallpapers(
    category: Optional[str] = Query(None, description="Filter by category slug"),
    search: Optional[str] = Query(None, description="Substring match on title, category and tags"),
    exclude: Optional[str] = Query(None, description="Wallpaper id to leave out"),
    sort: str = Query("created_at", pattern="^(created_at|downloads|likes|title)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
):
    """Paginated wallpaper listing."""
    get_slug_service()
    if search:
        search = search.strip().lower() or None
    if exclude:
        skip = (page - 1) * limit
        wallpapers = await store.list(category, search, exclude, sort, skip, limit)
        total = await store.count(category, search, exclude)
    else:
        wallpapers, total = await list_wallpapers_cached(category, search, sort, page, limit)

    return {
        "success": True,
        "wallpapers": [w.to_api() for w in wallpapers],
        "pagination": _pagination(page, limit, total),
    }


@app.get("/api/wallpapers/lookup/{identifier}")
async def lookup_wallpaper(identifier: str):
    """Resolve a slug, old slug, id or legacy id to a wallpaper."""
    resolution = await resolve(identifier)
    if resolution is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")

    wallpaper = resolution.wallpaper.to_api()
    wallpaper["matched_by"] = resolution.matched_by
    return {
        "success": True,
        "wallpaper": wallpaper,
        "redirect": resolution.should_redirect,
    }


@app.get("/api/wallpapers/by-id/{wallpaper_id}")
async def get_wallpaper_by_id(wallpaper_id: str):
    get_slug_service()
    wallpaper = await store.find_by_id(wallpaper_id)
    if wallpaper is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")
    return {"success": True, "wallpaper": wallpaper.to_api()}


@app.post("/api/wallpapers/{identifier}/like")
async def like_wallpaper(identifier: str):
    resolution = await resolve(identifier)
    if resolution is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")

    wallpaper_id = resolution.wallpaper.id
    await store.increment(wallpaper_id, "likes", 1)
    await get_cache().invalidate_all()
    wallpaper = await store.find_by_id(wallpaper_id)
    return {"success": True, "likes": wallpaper.likes}


@app.post("/api/wallpapers/{identifier}/unlike")
async def unlike_wallpaper(identifier: str):
    resolution = await resolve(identifier)
    if resolution is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")

    wallpaper_id = resolution.wallpaper.id
    current = await store.find_by_id(wallpaper_id)
    if current.likes > 0:
        await store.increment(wallpaper_id, "likes", -1)
        await get_cache().invalidate_all()
        current = await store.find_by_id(wallpaper_id)
    return {"success": True, "likes": current.likes}


@app.get("/wallpaper/{identifier}")
async def wallpaper_page(request: Request, identifier: str):
    """Wallpaper detail; non-canonical identifiers get a 301 to the canonical path."""
    rule = redirect_service.custom_rule(request.url.path) if redirect_service else None
    if rule:
        return RedirectResponse(url=rule.to_path, status_code=rule.status_code)

    resolution = await resolve(identifier)
    if resolution is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")
    if resolution.should_redirect:
        return RedirectResponse(url=resolution.canonical_url, status_code=301)

    wallpaper = resolution.wallpaper
    related = await store.list(category=wallpaper.category, exclude_id=wallpaper.id, limit=RELATED_LIMIT)
    return {
        "success": True,
        "wallpaper": wallpaper.to_api(),
        "related": [w.to_api() for w in related],
        "canonical_url": f"{config.BASE_URL}{wallpaper.canonical_url}",
    }


@app.get("/api/download/{identifier}")
async def download_wallpaper(identifier: str):
    """Count a download and return the image as an attachment."""
    resolution = await resolve(identifier)
    if resolution is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")

    wallpaper = resolution.wallpaper
    if not wallpaper.image_url:
        raise HTTPException(status_code=404, detail="Wallpaper has no image")

    try:
        upstream = await run_in_threadpool(requests.get, wallpaper.image_url, timeout=30)
        upstream.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to fetch image for {wallpaper.id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch image")

    await store.increment(wallpaper.id, "downloads", 1)
    await get_cache().invalidate_all()

    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("Content-Type", "image/jpeg"),
        headers={
            "Content-Disposition": f'attachment; filename="{wallpaper.download_filename}"',
            "Cache-Control": "no-cache",
        },
    )


@app.get("/api/categories")
async def get_categories():
    get_slug_service()
    categories = await list_categories_cached()
    return {
        "categories": [c.to_dict() for c in categories],
        "total": len(categories),
        "featured": [c.to_dict() for c in categories if c.featured],
    }


@app.get("/api/categories/{slug}")
async def get_category(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
):
    get_slug_service()
    category = await category_service.get_category(slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")

    wallpapers, total = await list_wallpapers_cached(slug, None, "created_at", page, limit)
    return {
        "success": True,
        "category": category.to_dict(),
        "wallpapers": [w.to_api() for w in wallpapers],
        "pagination": _pagination(page, limit, total),
    }


@app.get("/api/search/suggestions")
async def search_suggestions(q: str = Query("", description="Partial search term")):
    """Tags and categories containing the term."""
    query = q.lower().strip()
    if not query:
        return {"suggestions": []}

    get_slug_service()
    candidates = list((await store.category_counts()).keys()) + await store.distinct("tags")
    suggestions = [c for c in dict.fromkeys(candidates) if query in c.lower()]
    return {"suggestions": suggestions[:MAX_SUGGESTIONS]}


@app.get("/api/stats")
async def get_stats():
    get_slug_service()
    category_stats = await category_service.category_stats()
    return {
        "success": True,
        "total_wallpapers": await store.count(),
        "total_downloads": await store.total_downloads(),
        "total_categories": category_stats["total_categories"],
        "categories": category_stats,
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    backend = get_store_backend_name()
    mongodb_connected = await check_connection() if backend == "mongodb" else False
    wallpaper_count = await store.count() if store is not None else 0

    return {
        "status": "healthy" if store is not None else "degraded",
        "store_backend": backend,
        "mongodb_connected": mongodb_connected,
        "wallpaper_count": wallpaper_count,
        "storage_configured": storage is not None,
        "cache_backend": get_cache_backend_name(),
        "cache_stats": await get_cache().get_stats(),
    }


@app.get("/api/redirect/check")
async def check_redirect(path: str = Query(..., description="Request path to check")):
    if redirect_service is None:
        raise StoreUnavailable("Wallpaper store not initialized")
    rule = await redirect_service.get_redirect(path)
    if rule is None:
        return {"redirect": False}
    return {"redirect": True, "to": rule.to_path, "type": rule.type}


@app.get("/sitemap.xml")
async def sitemap():
    """Generate dynamic XML sitemap for SEO."""
    get_slug_service()
    today = datetime.utcnow().strftime("%Y-%m-%d")

    xml_content = '<?xml version="1.0" encoding="UTF-8"?>\n'
    xml_content += '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'

    entries = [("/", today, "daily", "1.0"), ("/search", today, "weekly", "0.5")]
    for category in await list_categories_cached():
        entries.append((category.canonical_url, today, "daily", "0.8"))
    for wallpaper in await store.find_all():
        modified = wallpaper.updated_at or wallpaper.created_at
        lastmod = modified.strftime("%Y-%m-%d") if modified else today
        entries.append((wallpaper.canonical_url, lastmod, "weekly", "0.7"))

    for path, lastmod, freq, priority in entries:
        xml_content += f"""  <url>
    <loc>{config.BASE_URL}{path}</loc>
    <lastmod>{lastmod}</lastmod>
    <changefreq>{freq}</changefreq>
    <priority>{priority}</priority>
  </url>\n"""

    xml_content += '</urlset>'

    return Response(content=xml_content, media_type="application/xml")


@app.get("/robots.txt")
def robots():
    """Serve robots.txt with sitemap reference."""
    content = f"""User-agent: *
Allow: /

Sitemap: {config.BASE_URL}/sitemap.xml

# Disallow API endpoints for crawlers
Disallow: /api/
"""
    return Response(content=content, media_type="text/plain")


# ========== ADMIN API ==========

class WallpaperUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    resolution: Optional[str] = None
    device_type: Optional[str] = None
    description: Optional[str] = None
    slug: Optional[str] = None


class RedirectRequest(BaseModel):
    action: str = "add"  # add, remove or toggle
    from_path: str
    to_path: Optional[str] = None
    type: str = "301"


class SlugCheckRequest(BaseModel):
    slug: Optional[str] = None
    title: Optional[str] = None
    exclude_id: Optional[str] = None


@app.post("/api/admin/login")
async def admin_login(key: str = Form(...)):
    """Exchange the access key for an admin cookie."""
    if key != config.ADMIN_ACCESS_KEY or not config.ADMIN_ACCESS_KEY:
        raise HTTPException(status_code=403, detail="Invalid access key")
    response = JSONResponse({"success": True})
    response.set_cookie("admin_key", key, httponly=True, max_age=86400)
    return response


@app.post("/api/admin/logout")
async def admin_logout():
    response = JSONResponse({"success": True})
    response.delete_cookie("admin_key")
    return response


@app.post("/api/admin/wallpapers/upload", dependencies=[Depends(require_admin)])
async def admin_upload_wallpaper(
    file: UploadFile = File(...),
    title: str = Form(...),
    category: str = Form(...),
    tags: str = Form(""),
    resolution: str = Form(DEFAULT_RESOLUTION),
    device_type: str = Form(DEFAULT_DEVICE_TYPE),
    description: str = Form(""),
    custom_slug: Optional[str] = Form(None),
):
    """Upload an image to R2 and create its wallpaper record."""
    service = get_slug_service()
    data = await read_image(file)
    uploaded = await upload_image(title, file, data)

    category = CategoryService.normalize_slug(category)
    fields = {
        "title": title.strip().upper(),
        "category": category,
        "tags": [t.strip().lower() for t in tags.split(",") if t.strip()],
        "resolution": resolution,
        "device_type": device_type,
        "description": description or f"{title} wallpaper in {category} category",
        "image_url": uploaded.url,
        "r2_key": uploaded.key,
        "file_size": _file_size(len(data)),
    }
    try:
        await category_service.ensure_category(category)
        wallpaper = await service.create_wallpaper(fields, custom_slug=custom_slug or None)
    except CatalogError:
        await delete_blob(uploaded.key)
        raise

    await get_cache().invalidate_all()
    return {"success": True, "wallpaper": wallpaper.to_api()}


@app.get("/api/admin/wallpapers/{wallpaper_id}", dependencies=[Depends(require_admin)])
async def admin_get_wallpaper(wallpaper_id: str):
    get_slug_service()
    wallpaper = await store.find_by_id(wallpaper_id)
    if wallpaper is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")
    return {"success": True, "wallpaper": wallpaper.to_api()}


@app.put("/api/admin/wallpapers/{wallpaper_id}", dependencies=[Depends(require_admin)])
async def admin_update_wallpaper(wallpaper_id: str, update: WallpaperUpdate):
    """Edit wallpaper fields; a new slug keeps the old one in history."""
    service = get_slug_service()
    fields = update.model_dump(exclude_none=True)
    new_slug = fields.pop("slug", None)

    if "title" in fields:
        fields["title"] = fields["title"].strip().upper()
    if "category" in fields:
        fields["category"] = CategoryService.normalize_slug(fields["category"])
    if "tags" in fields:
        fields["tags"] = [t.strip().lower() for t in fields["tags"] if t.strip()]

    if new_slug:
        wallpaper = await service.update_slug(wallpaper_id, new_slug, fields)
    else:
        if fields:
            await store.update(wallpaper_id, fields)
        wallpaper = await store.find_by_id(wallpaper_id)
    if wallpaper is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")
    if "category" in fields:
        await category_service.ensure_category(fields["category"])

    await get_cache().invalidate_all()
    return {"success": True, "wallpaper": wallpaper.to_api()}


@app.delete("/api/admin/wallpapers/{wallpaper_id}", dependencies=[Depends(require_admin)])
async def admin_delete_wallpaper(wallpaper_id: str):
    get_slug_service()
    wallpaper = await store.find_by_id(wallpaper_id)
    if wallpaper is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")

    await store.delete(wallpaper_id)
    key = wallpaper.r2_key or (storage.extract_key_from_url(wallpaper.image_url) if storage else None)
    await delete_blob(key)
    await get_cache().invalidate_all()
    logger.info(f"Deleted wallpaper {wallpaper_id}")
    return {"success": True}


@app.post("/api/admin/wallpapers/{wallpaper_id}/image", dependencies=[Depends(require_admin)])
async def admin_replace_image(wallpaper_id: str, file: UploadFile = File(...)):
    """Replace a wallpaper's image and delete the superseded blob."""
    get_slug_service()
    wallpaper = await store.find_by_id(wallpaper_id)
    if wallpaper is None:
        raise HTTPException(status_code=404, detail="Wallpaper not found")

    data = await read_image(file)
    uploaded = await upload_image(wallpaper.title, file, data)
    await store.update(wallpaper_id, {
        "image_url": uploaded.url,
        "r2_key": uploaded.key,
        "file_size": _file_size(len(data)),
    })

    old_key = wallpaper.r2_key or storage.extract_key_from_url(wallpaper.image_url)
    if old_key != uploaded.key:
        await delete_blob(old_key)

    await get_cache().invalidate_all()
    return {"success": True, "wallpaper": (await store.find_by_id(wallpaper_id)).to_api()}


@app.post("/api/admin/wallpapers/bulk-import", dependencies=[Depends(require_admin)])
async def admin_bulk_import(file: UploadFile = File(...)):
    """Create wallpapers from a CSV file, one per row."""
    get_slug_service()
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="File must be a CSV file")

    try:
        text = (await file.read()).decode("utf-8")
        summary = await bulk_importer.import_csv(text)
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")
    except CSVFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    await get_cache().invalidate_all()
    return {"success": True, "summary": summary.to_dict()}


@app.get("/api/admin/migrate-slugs", dependencies=[Depends(require_admin)])
async def admin_migration_status():
    status = await get_slug_service().migration_status()
    return {"success": True, **status}


@app.post("/api/admin/migrate-slugs", dependencies=[Depends(require_admin)])
async def admin_migrate_slugs():
    """Backfill slugs for wallpapers that have none."""
    result = await get_slug_service().backfill_missing_slugs()
    if result.updated_count:
        await get_cache().invalidate_all()
    return {
        "success": not result.errors,
        "updated_count": result.updated_count,
        "errors": result.errors,
    }


@app.get("/api/admin/redirects", dependencies=[Depends(require_admin)])
async def admin_get_redirects():
    get_slug_service()
    custom = [rule.to_dict() for rule in redirect_service.active_rules()]
    legacy = await redirect_service.generate_legacy_redirects()
    return {
        "success": True,
        "custom_redirects": custom,
        "legacy_redirects": legacy,
        "total": len(custom) + len(legacy),
    }


@app.post("/api/admin/redirects", dependencies=[Depends(require_admin)])
async def admin_update_redirects(body: RedirectRequest):
    """Add, remove or toggle a custom redirect rule."""
    get_slug_service()
    if body.action == "add":
        if not body.to_path:
            raise HTTPException(status_code=400, detail="Missing required field: to_path")
        if body.type not in REDIRECT_TYPES:
            raise HTTPException(status_code=400, detail="Invalid redirect type. Must be 301 or 302")
        rule = redirect_service.add_rule(body.from_path, body.to_path, body.type)
        return {"success": True, "redirect": rule.to_dict()}
    if body.action == "remove":
        return {"success": redirect_service.remove_rule(body.from_path)}
    if body.action == "toggle":
        return {"success": redirect_service.toggle_rule(body.from_path)}
    raise HTTPException(status_code=400, detail=f"Unknown action: {body.action}")


@app.get("/api/admin/dynamic-options", dependencies=[Depends(require_admin)])
async def admin_dynamic_options():
    get_slug_service()
    options = await category_service.dynamic_options()
    return {"success": True, **options}


@app.post("/api/admin/slugs/validate", dependencies=[Depends(require_admin)])
async def admin_validate_slug(body: SlugCheckRequest):
    """Check an operator slug and suggest alternatives for a title."""
    service = get_slug_service()
    response: Dict[str, Any] = {"success": True}

    if body.slug:
        cleaned = clean_user_slug(body.slug)
        validation = validate_slug(cleaned)
        response.update({
            "slug": cleaned,
            "is_valid": validation.is_valid,
            "errors": validation.errors,
            "hints": validation.suggestions,
            "available": not await service.slug_exists(cleaned, body.exclude_id),
        })
    if body.title:
        response["suggestions"] = generate_slug_suggestions(body.title)
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
