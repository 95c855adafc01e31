"""API Routers for AnimeBing."""

from .stats import router as stats_router
from .anime import router as anime_router
from .content import router as content_router
from .community import router as community_router
from .admin import router as admin_router

__all__ = [
    "stats_router",
    "anime_router",
    "content_router",
    "community_router",
    "admin_router",
]
