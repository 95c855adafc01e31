"""Admin dashboard endpoints: catalog CRUD, reports, social links and ad slots."""

import logging
from typing import Literal, Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, Depends, HTTPException, Query

from ..services.catalog_store import CatalogStore, DuplicateDocument, get_store
from ..services.seo import fill_seo_fields
from .auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])

ContentType = Literal["Anime", "Movie", "Manga"]
SubDubStatus = Literal[
    "Hindi Dub", "Hindi Sub", "English Sub", "Both",
    "Subbed", "Dubbed", "Sub & Dub", "Dual Audio",
]
EntryStatus = Literal["Ongoing", "Complete"]
ReportStatus = Literal["Pending", "In Progress", "Fixed"]

MAX_DOWNLOAD_LINKS = 5


class DownloadLink(BaseModel):
    """One mirror for an episode or chapter download."""
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    quality: str = ""
    type: str = "direct"


class EntryFields(BaseModel):
    """Editable catalog entry fields; wire names are camelCase."""
    title: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    banner_image: Optional[str] = Field(None, alias="bannerImage")
    genre_list: Optional[list[str]] = Field(None, alias="genreList")
    release_year: Optional[int] = Field(None, alias="releaseYear")
    content_type: Optional[ContentType] = Field(None, alias="contentType")
    sub_dub_status: Optional[SubDubStatus] = Field(None, alias="subDubStatus")
    status: Optional[EntryStatus] = None
    seo_title: Optional[str] = Field(None, alias="seoTitle")
    seo_description: Optional[str] = Field(None, alias="seoDescription")
    seo_keywords: Optional[str] = Field(None, alias="seoKeywords")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class CreateEntryRequest(EntryFields):
    title: str = Field(..., min_length=1)


class DeleteEntryRequest(BaseModel):
    id: str


class EpisodeRequest(BaseModel):
    anime_id: str = Field(..., alias="animeId")
    episode_number: int = Field(..., alias="episodeNumber", ge=0)
    session: int = Field(default=1, ge=1)
    title: Optional[str] = None
    secure_file_reference: Optional[str] = Field(None, alias="secureFileReference")
    download_links: list[DownloadLink] = Field(default_factory=list, alias="downloadLinks", max_length=MAX_DOWNLOAD_LINKS)

    class Config:
        populate_by_name = True


class MediaEditRequest(BaseModel):
    """Partial update for an episode or chapter."""
    title: Optional[str] = None
    secure_file_reference: Optional[str] = Field(None, alias="secureFileReference")
    session: Optional[int] = Field(None, ge=1)
    download_links: Optional[list[DownloadLink]] = Field(
        None, alias="downloadLinks", min_length=1, max_length=MAX_DOWNLOAD_LINKS
    )

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class ReportUpdateRequest(BaseModel):
    status: ReportStatus
    admin_response: Optional[str] = Field(None, alias="adminResponse")

    class Config:
        populate_by_name = True


class BulkDeleteRequest(BaseModel):
    report_ids: list[str] = Field(..., alias="reportIds")

    class Config:
        populate_by_name = True


class SocialLinkRequest(BaseModel):
    url: str
    is_active: bool = Field(default=True, alias="isActive")
    display_name: Optional[str] = Field(None, alias="displayName")

    class Config:
        populate_by_name = True


class AdSlotUpdateRequest(BaseModel):
    ad_code: Optional[str] = Field(None, alias="adCode")
    is_active: Optional[bool] = Field(None, alias="isActive")
    name: Optional[str] = None

    class Config:
        populate_by_name = True


class AdClickRequest(BaseModel):
    slot_id: str = Field(..., alias="slotId")
    earnings: float = Field(default=0.5, ge=0)

    class Config:
        populate_by_name = True


def _ctr(clicks: int, impressions: int) -> float:
    return round(clicks / impressions * 100, 2) if impressions else 0.0


def _ad_totals(slots: list[dict]) -> dict:
    impressions = sum(s.get("impressions", 0) for s in slots)
    clicks = sum(s.get("clicks", 0) for s in slots)
    return {
        "totalImpressions": impressions,
        "totalClicks": clicks,
        "totalRevenue": sum(s.get("earnings", 0) for s in slots),
        "ctr": _ctr(clicks, impressions),
    }


# ==================== Catalog entries ====================


@router.get("/anime-list")
async def get_anime_list(
    status: Optional[str] = Query(None),
    content_type: Optional[str] = Query(None, alias="contentType"),
    store: CatalogStore = Depends(get_store),
):
    """Filtered entry list for the dashboard table."""
    return store.filter_entries(status=status, content_type=content_type)


@router.post("/add-anime")
async def add_anime(request: CreateEntryRequest, store: CatalogStore = Depends(get_store)):
    """Add an anime, movie or manga; slug and SEO fields are generated when blank."""
    document = fill_seo_fields(request.to_document())
    try:
        entry = store.add_entry(document)
    except DuplicateDocument as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "message": f"{entry['contentType']} added!", "anime": entry}


@router.put("/edit-anime/{anime_id}")
async def edit_anime(anime_id: str, request: EntryFields, store: CatalogStore = Depends(get_store)):
    """Update any subset of an entry's fields."""
    entry = store.update_entry(anime_id, request.to_document())
    logger.info("Edited entry %s", anime_id)
    return {"success": True, "message": "Updated successfully!", "anime": entry}


@router.delete("/delete-anime")
async def delete_anime(request: DeleteEntryRequest, store: CatalogStore = Depends(get_store)):
    """Delete an entry and everything attached to it."""
    store.delete_entry(request.id)
    return {"success": True, "message": "Deleted successfully!"}


# ==================== Episodes and chapters ====================


@router.post("/episodes")
async def add_episode(request: EpisodeRequest, store: CatalogStore = Depends(get_store)):
    """Add an episode to an entry."""
    episode = store.add_episode(request.model_dump(by_alias=True))
    return {"success": True, "message": "Episode added successfully!", "episode": episode}


@router.get("/episode/{episode_id}")
async def get_episode(episode_id: str, store: CatalogStore = Depends(get_store)):
    """Episode details for the edit form."""
    episode = store.get_episode(episode_id)
    if not episode:
        raise HTTPException(status_code=404, detail="Episode not found")
    return {"success": True, "episode": episode}


@router.put("/edit-episode/{episode_id}")
async def edit_episode(episode_id: str, request: MediaEditRequest, store: CatalogStore = Depends(get_store)):
    """Update an episode (title, file reference, session, download links)."""
    episode = store.update_episode(episode_id, request.to_document())
    return {"success": True, "message": "Episode updated successfully!", "episode": episode}


@router.delete("/episode/{episode_id}")
async def delete_episode(episode_id: str, store: CatalogStore = Depends(get_store)):
    """Delete an episode."""
    store.delete_episode(episode_id)
    return {"success": True, "message": "Episode deleted"}


@router.get("/chapter/{chapter_id}")
async def get_chapter(chapter_id: str, store: CatalogStore = Depends(get_store)):
    """Chapter details for the edit form."""
    chapter = store.get_chapter(chapter_id)
    if not chapter:
        raise HTTPException(status_code=404, detail="Chapter not found")
    return {"success": True, "chapter": chapter}


@router.put("/edit-chapter/{chapter_id}")
async def edit_chapter(chapter_id: str, request: MediaEditRequest, store: CatalogStore = Depends(get_store)):
    """Update a chapter (title, file reference, session, download links)."""
    chapter = store.update_chapter(chapter_id, request.to_document())
    return {"success": True, "message": "Chapter updated successfully!", "chapter": chapter}


# ==================== Reports ====================


@router.get("/reports")
async def get_reports(store: CatalogStore = Depends(get_store)):
    """All reports, newest first, with the reported entry summarized."""
    return store.list_reports()


@router.put("/reports/{report_id}")
async def update_report(report_id: str, request: ReportUpdateRequest, store: CatalogStore = Depends(get_store)):
    """Change a report's status and optionally attach a response."""
    report = store.update_report(report_id, request.status, request.admin_response)
    return {"success": True, "message": "Report updated successfully!", "report": report}


@router.delete("/reports/{report_id}")
async def delete_report(report_id: str, store: CatalogStore = Depends(get_store)):
    store.delete_report(report_id)
    return {"success": True, "message": "Report deleted successfully!"}


@router.post("/reports/bulk-delete")
async def bulk_delete_reports(request: BulkDeleteRequest, store: CatalogStore = Depends(get_store)):
    removed = store.bulk_delete_reports(request.report_ids)
    return {"success": True, "message": f"{removed} reports deleted successfully!"}


# ==================== Social links ====================


@router.get("/social-media")
async def get_social_media(store: CatalogStore = Depends(get_store)):
    """All social links, active or not."""
    return store.social_links()


@router.put("/social-media/{platform}")
async def update_social_media(platform: str, request: SocialLinkRequest, store: CatalogStore = Depends(get_store)):
    """Create or update the link for a platform."""
    return store.upsert_social_link(platform, request.url, request.is_active, request.display_name)


# ==================== Ads ====================


@router.get("/ad-slots")
async def get_ad_slots(store: CatalogStore = Depends(get_store)):
    """Ad slots ordered by position; defaults are created on first call."""
    return sorted(store.ad_slots(), key=lambda s: s.get("position", ""))


@router.put("/ad-slots/{slot_id}")
async def update_ad_slot(slot_id: str, request: AdSlotUpdateRequest, store: CatalogStore = Depends(get_store)):
    changes = request.model_dump(by_alias=True, exclude_none=True)
    slot = store.update_ad_slot(slot_id, changes)
    logger.info("Ad slot updated: %s (active=%s)", slot.get("name"), slot.get("isActive"))
    return {"success": True, "message": "Ad slot updated successfully!", "adSlot": slot}


@router.post("/increment-impression/{slot_id}")
async def increment_impression(slot_id: str, store: CatalogStore = Depends(get_store)):
    slot = store.record_impression(slot_id)
    return {"success": True, "message": "Impression incremented", "impressions": slot["impressions"]}


@router.post("/track-ad-click")
async def track_ad_click(request: AdClickRequest, store: CatalogStore = Depends(get_store)):
    slot = store.record_click(request.slot_id, request.earnings)
    return {
        "success": True,
        "message": "Ad click tracked successfully!",
        "adSlot": slot,
        "earningsAdded": request.earnings,
    }


@router.get("/ad-analytics")
async def get_ad_analytics(store: CatalogStore = Depends(get_store)):
    """Totals, per-slot performance and the three top earning slots."""
    slots = store.ad_slots()
    per_slot = [
        {
            "id": s["id"],
            "name": s.get("name"),
            "position": s.get("position"),
            "isActive": s.get("isActive", False),
            "earnings": s.get("earnings", 0),
            "clicks": s.get("clicks", 0),
            "impressions": s.get("impressions", 0),
            "ctr": _ctr(s.get("clicks", 0), s.get("impressions", 0)),
        }
        for s in slots
    ]
    top = sorted((s for s in per_slot if s["earnings"] > 0), key=lambda s: s["earnings"], reverse=True)[:3]

    return {
        "success": True,
        "adPerformance": {**_ad_totals(slots), "activeAds": sum(1 for s in slots if s.get("isActive"))},
        "adSlots": per_slot,
        "topPerformingSlots": top,
    }


@router.get("/analytics")
async def get_analytics(store: CatalogStore = Depends(get_store)):
    """Dashboard counters: catalog sizes, report backlog and ad totals."""
    return {**store.counts(), "adPerformance": _ad_totals(store.ad_slots())}
