"""AnimeBing FastAPI Application Entry Point."""

import logging
import uvicorn
from pathlib import Path
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse

from . import __version__
from .config import get_settings
from .services.catalog_store import DocumentNotFound, DuplicateDocument, StoreError
from .routers import (
    stats_router,
    anime_router,
    content_router,
    community_router,
    admin_router,
)

logger = logging.getLogger(__name__)

CLIENT_DIST = Path(__file__).resolve().parents[2] / "client" / "dist"


def _register_error_handlers(app: FastAPI) -> None:
    """Translate store errors into HTTP responses."""

    @app.exception_handler(DocumentNotFound)
    async def not_found_handler(request: Request, exc: DocumentNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DuplicateDocument)
    async def duplicate_handler(request: Request, exc: DuplicateDocument):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})


def _mount_client(app: FastAPI, dist: Path) -> None:
    """Serve the built browsing UI; unknown non-API paths fall back to index.html."""
    app.mount("/assets", StaticFiles(directory=dist / "assets"), name="assets")
    index = dist / "index.html"

    @app.get("/{path:path}", include_in_schema=False)
    async def serve_client(path: str):
        if path == "api" or path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")
        candidate = (dist / path).resolve()
        if path and candidate.is_relative_to(dist.resolve()) and candidate.is_file():
            return FileResponse(candidate)
        return FileResponse(index)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="AnimeBing",
        description="Anime, manga and movie catalog with an admin dashboard",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    app.include_router(stats_router, prefix="/api")
    app.include_router(anime_router, prefix="/api")
    app.include_router(content_router, prefix="/api")
    app.include_router(community_router, prefix="/api")
    app.include_router(admin_router, prefix="/api/admin/protected")

    if CLIENT_DIST.exists():
        _mount_client(app, CLIENT_DIST)

    return app


app = create_app()


def run():
    """Run the server."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("AnimeBing running at http://localhost:%d", settings.port)
    uvicorn.run(
        "animebing.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
