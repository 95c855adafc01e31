"""Public catalog endpoints: listing, search, featured and single-entry lookups."""

from typing import Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..config import get_settings
from ..services.catalog_store import CatalogStore, get_store, parse_fields, project
from ..services.slugs import is_object_id
from .auth import require_admin

router = APIRouter(tags=["anime"])


class FeaturedOrderRequest(BaseModel):
    """Ids to number 1..n; the carousel shows higher featuredOrder first."""
    order: list[str] = Field(..., description="Entry ids, assigned featuredOrder 1..n")


def _page_size(limit: Optional[int]) -> int:
    return limit or get_settings().default_page_size


@router.get("/anime/featured")
async def get_featured(response: Response, store: CatalogStore = Depends(get_store)):
    """Get up to ten featured entries for the home carousel."""
    response.headers["Cache-Control"] = "public, max-age=600"
    return {"success": True, "data": store.featured_entries()}


@router.put("/anime/featured/order", dependencies=[Depends(require_admin)])
async def update_featured_order(request: FeaturedOrderRequest, store: CatalogStore = Depends(get_store)):
    """Rewrite featuredOrder for the given ids."""
    updated = store.reorder_featured(request.order)
    return {"success": True, "message": f"Featured order updated for {updated} animes"}


@router.get("/anime")
async def list_anime(
    response: Response,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    fields: Optional[str] = Query(None),
    store: CatalogStore = Depends(get_store),
):
    """Get a page of entries, most recently updated first."""
    size = _page_size(limit)
    items, pagination = store.list_entries(page, size, parse_fields(fields))

    response.headers["Cache-Control"] = "public, max-age=300"
    response.headers["X-Total-Count"] = str(pagination["totalItems"])
    response.headers["X-Page"] = str(page)
    response.headers["X-Limit"] = str(size)

    return {"success": True, "data": items, "pagination": pagination}


@router.get("/anime/search")
async def search_anime(
    response: Response,
    query: str = Query(""),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    fields: Optional[str] = Query(None),
    store: CatalogStore = Depends(get_store),
):
    """Search titles (case-insensitive substring)."""
    items, pagination = store.search_entries(query, page, _page_size(limit), parse_fields(fields))

    response.headers["Cache-Control"] = "public, max-age=300"
    response.headers["X-Total-Count"] = str(pagination["totalItems"])

    return {"success": True, "data": items, "pagination": pagination}


@router.get("/anime/slug/{slug}")
async def get_anime_by_slug(slug: str, store: CatalogStore = Depends(get_store)):
    """Get a single entry by its slug."""
    entry = store.get_entry_by_slug(slug)
    if not entry:
        raise HTTPException(status_code=404, detail="Anime not found")
    return {"success": True, "data": store.with_children(entry)}


@router.get("/anime/{anime_id}")
async def get_anime(anime_id: str, fields: Optional[str] = Query(None), store: CatalogStore = Depends(get_store)):
    """Get a single entry by id, with its episodes."""
    if not is_object_id(anime_id):
        raise HTTPException(status_code=400, detail="Invalid anime ID format")

    entry = store.get_entry(anime_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Anime not found")

    selected = parse_fields(fields)
    if selected:
        return {"success": True, "data": project(entry, selected)}
    return {"success": True, "data": store.with_children(entry)}


@router.post("/anime/{anime_id}/featured", dependencies=[Depends(require_admin)])
async def add_to_featured(anime_id: str, store: CatalogStore = Depends(get_store)):
    """Add an entry to the featured carousel (appended last)."""
    entry = store.set_featured(anime_id, True)
    return {"success": True, "message": "Anime added to featured", "data": entry}


@router.delete("/anime/{anime_id}/featured", dependencies=[Depends(require_admin)])
async def remove_from_featured(anime_id: str, store: CatalogStore = Depends(get_store)):
    """Remove an entry from the featured carousel."""
    entry = store.set_featured(anime_id, False)
    return {"success": True, "message": "Anime removed from featured", "data": entry}
