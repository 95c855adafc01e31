"""Public report submission and social links."""

from typing import Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, Depends

from ..services.catalog_store import CatalogStore, get_store

router = APIRouter(tags=["community"])


class ReportRequest(BaseModel):
    """A viewer-submitted problem report (dead link, wrong episode, ...)."""
    anime_id: str = Field(..., alias="animeId")
    issue_type: str = Field(..., alias="issueType", min_length=1, max_length=100)
    description: str = Field(default="", max_length=2000)
    episode_number: Optional[int] = Field(None, alias="episodeNumber")
    email: Optional[str] = None

    class Config:
        populate_by_name = True


@router.post("/reports")
async def submit_report(request: ReportRequest, store: CatalogStore = Depends(get_store)):
    """File a report against an entry; bumps its reportCount."""
    report = store.add_report({
        "animeId": request.anime_id,
        "issueType": request.issue_type,
        "description": request.description,
        "episodeNumber": request.episode_number,
        "email": request.email,
    })
    return {"success": True, "message": "Report submitted", "report": report}


@router.get("/social")
async def get_social_links(store: CatalogStore = Depends(get_store)):
    """Get active social media links for the site header/footer."""
    return store.social_links(active_only=True)
