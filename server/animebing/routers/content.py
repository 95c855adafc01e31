"""Episode and chapter endpoints used by detail pages."""

from typing import Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, Depends, HTTPException

from ..services.catalog_store import CatalogStore, get_store
from .auth import require_admin

router = APIRouter(tags=["content"])


class ChapterRequest(BaseModel):
    """Chapter identified by manga, number and session."""
    manga_id: str = Field(..., alias="mangaId")
    chapter_number: float = Field(..., alias="chapterNumber")
    session: Optional[int] = None
    title: Optional[str] = None
    secure_file_reference: Optional[str] = Field(None, alias="secureFileReference")
    cuty_link: Optional[str] = Field(None, alias="cutyLink")

    class Config:
        populate_by_name = True


@router.get("/episodes/{anime_id}")
async def get_episodes(anime_id: str, store: CatalogStore = Depends(get_store)):
    """Get all episodes for an entry, ordered by session then number."""
    return store.episodes_for(anime_id)


@router.get("/chapters")
async def list_chapters(store: CatalogStore = Depends(get_store)):
    """List every chapter."""
    return store.all_chapters()


@router.get("/chapters/{manga_id}")
async def get_chapters(manga_id: str, store: CatalogStore = Depends(get_store)):
    """Get all chapters for a manga, ordered by session then number."""
    if not manga_id or manga_id == "undefined":
        raise HTTPException(status_code=400, detail="Invalid manga ID")
    return store.chapters_for(manga_id)


@router.post("/chapters", dependencies=[Depends(require_admin)])
async def add_chapter(request: ChapterRequest, store: CatalogStore = Depends(get_store)):
    """Add a chapter; (manga, number, session) must be unused."""
    chapter = store.add_chapter({
        "mangaId": request.manga_id,
        "chapterNumber": request.chapter_number,
        "session": request.session or 1,
        "title": request.title,
        "secureFileReference": request.secure_file_reference,
        "cutyLink": request.cuty_link,
    })
    manga = store.get_entry(request.manga_id)
    return {
        "message": "Chapter added successfully!",
        "chapter": chapter,
        "mangaTitle": manga["title"] if manga else None,
    }


@router.patch("/chapters", dependencies=[Depends(require_admin)])
async def update_chapter(request: ChapterRequest, store: CatalogStore = Depends(get_store)):
    """Update the chapter matching manga, number and session."""
    changes = {}
    if request.title is not None:
        changes["title"] = request.title
    if request.secure_file_reference is not None:
        changes["secureFileReference"] = request.secure_file_reference
    if request.cuty_link is not None:
        changes["cutyLink"] = request.cuty_link

    chapter = store.update_chapter_by_number(
        request.manga_id, request.chapter_number, request.session or 1, changes
    )
    return {"message": "Chapter updated successfully!", "chapter": chapter}


@router.delete("/chapters", dependencies=[Depends(require_admin)])
async def delete_chapter(request: ChapterRequest, store: CatalogStore = Depends(get_store)):
    """Delete the chapter matching manga, number and session."""
    if request.session is None:
        raise HTTPException(status_code=400, detail="mangaId, chapterNumber, and session required")
    store.delete_chapter_by_number(request.manga_id, request.chapter_number, request.session)
    return {"message": "Chapter deleted"}
