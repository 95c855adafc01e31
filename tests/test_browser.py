"""Tests for the browsing flow: detail pages, canonical URLs and search."""

from unittest.mock import AsyncMock

import pytest

from animebing.client import CatalogBrowser, Location, NotFound, RequestRejected, TransportFailure
from fakes import FakeCatalogClient


@pytest.fixture
def client() -> FakeCatalogClient:
    client = FakeCatalogClient([
        {"id": "65a000000000000000000001", "slug": "naruto", "title": "Naruto 123", "contentType": "Anime"},
        {"id": "65a000000000000000000002", "slug": "berserk", "title": "Berserk", "contentType": "Manga"},
        {"id": "65a000000000000000000003", "slug": None, "title": "Bleach!", "contentType": "Anime"},
    ])
    client.episodes["65a000000000000000000001"] = [{"id": "e1", "episodeNumber": 1}]
    client.chapters["65a000000000000000000002"] = [{"id": "c1", "chapterNumber": 1}]
    return client


@pytest.fixture
def browser(client) -> CatalogBrowser:
    return CatalogBrowser(client, location=Location("/detail/start"), debounce=0.02)


class TestDetailPages:
    @pytest.mark.asyncio
    async def test_anime_detail_loads_episodes(self, browser):
        view = await browser.open_detail("naruto")

        assert view.episodes == [{"id": "e1", "episodeNumber": 1}]
        assert view.chapters == []
        assert not view.is_manga

    @pytest.mark.asyncio
    async def test_manga_detail_loads_chapters(self, browser, client):
        view = await browser.open_detail("berserk")

        assert view.is_manga
        assert view.chapters == [{"id": "c1", "chapterNumber": 1}]
        assert "get_episodes" not in client.operations()

    @pytest.mark.asyncio
    async def test_alias_rewrites_current_location_without_new_history(self, browser):
        browser.location.push("/detail/naruto-123")

        view = await browser.open_detail("naruto-123")

        assert browser.location.path == "/detail/naruto"
        assert browser.location.history == ["/detail/start", "/detail/naruto"]
        assert view.canonical_path == "/detail/naruto"

    @pytest.mark.asyncio
    async def test_canonical_path_falls_back_to_title(self, browser):
        view = await browser.open_detail("bleach")

        assert view.canonical_path == "/detail/bleach"

    @pytest.mark.asyncio
    async def test_retry_after_outage(self, browser, client):
        client.fail.add("get_by_slug")
        with pytest.raises(TransportFailure):
            await browser.open_detail("naruto")

        client.fail.clear()
        view = await browser.retry()

        assert view.entry["slug"] == "naruto"
        assert client.operations() == ["get_by_slug", "get_by_slug", "get_episodes"]

    @pytest.mark.asyncio
    async def test_unknown_identifier(self, browser):
        with pytest.raises(NotFound):
            await browser.open_detail("one-piece")


class TestSearch:
    @pytest.mark.asyncio
    async def test_typing_settles_on_last_query(self, browser, client):
        browser.type_search("narut")
        browser.type_search("naruto")
        await browser.settle_search()

        assert [arg for op, arg in client.calls if op == "search_catalog"] == ["naruto"]
        assert [e["slug"] for e in browser.search_results] == ["naruto"]
        assert browser.location.path == "/?search=naruto"

    @pytest.mark.asyncio
    async def test_search_outage_is_shown_and_retryable(self, browser, client):
        client.fail.add("search_catalog")
        browser.type_search("berserk")
        await browser.settle_search()

        assert isinstance(browser.search_error, TransportFailure)
        assert browser.search_results == []

        client.fail.clear()
        await browser.retry()

        assert browser.search_error is None
        assert [e["title"] for e in browser.search_results] == ["Berserk"]

    @pytest.mark.asyncio
    async def test_rejected_search_is_shown_inline(self, browser, client):
        client.search_catalog = AsyncMock(side_effect=RequestRejected("search_catalog", 429, "Too many requests"))

        browser.type_search("naruto")
        await browser.settle_search()

        assert isinstance(browser.search_error, RequestRejected)
        assert browser.search_results == []
        assert browser.location.path == "/?search=naruto"

    @pytest.mark.asyncio
    async def test_clearing_search_resets_location(self, browser):
        browser.type_search("")
        await browser.settle_search()

        assert browser.location.path == "/"
