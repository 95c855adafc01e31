"""
Shared fixtures: an isolated store per test, the FastAPI app wired to it,
and a catalog client that talks to that app in-process.
"""

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from animebing.client import CatalogClient
from animebing.config import get_settings
from animebing.main import create_app
from animebing.services.cache import Cache
from animebing.services.catalog_store import CatalogStore, get_store
from fakes import FakeClock

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Point settings at test values and drop the cached instance."""
    monkeypatch.setenv("ANIMEBING_ADMIN_TOKEN", ADMIN_TOKEN)
    monkeypatch.setenv("ANIMEBING_DATA_FILE", "")
    monkeypatch.delenv("ANIMEBING_FULL_SCAN_LIMIT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> CatalogStore:
    return CatalogStore()


@pytest.fixture
def app(store):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    return app


@pytest.fixture
def api(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest_asyncio.fixture
async def http_client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver/api") as client:
        yield client


@pytest_asyncio.fixture
async def catalog_client(http_client, clock):
    return CatalogClient(cache=Cache(ttl=120.0, clock=clock), http_client=http_client)

