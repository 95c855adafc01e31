"""Health check endpoint."""

import platform
import sys
from datetime import datetime
from fastapi import APIRouter, Depends

from .. import __version__
from ..config import get_settings
from ..services.catalog_store import CatalogStore, get_store

router = APIRouter(tags=["stats"])


@router.get("/health")
async def health_check(store: CatalogStore = Depends(get_store)):
    """Health check and status endpoint."""
    settings = get_settings()
    counts = store.counts()

    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
        "persistent": settings.data_path is not None,
        "entries": counts["totalAnimes"] + counts["totalMovies"] + counts["totalManga"],
        "platform": platform.system().lower(),
        "pythonVersion": sys.version,
    }
