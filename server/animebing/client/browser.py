"""Catalog browsing flow: detail pages and debounced search."""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from ..config import get_settings
from ..services.slugs import derive_slug
from .catalog_client import CatalogClient
from .debounce import SearchDebouncer
from .errors import AnimeBingError
from .location import Location
from .resolver import DETAIL_PATH, Resolver

logger = logging.getLogger(__name__)


@dataclass
class DetailView:
    """Everything a detail page renders."""
    entry: dict
    episodes: list[dict] = field(default_factory=list)
    chapters: list[dict] = field(default_factory=list)

    @property
    def canonical_path(self) -> str:
        slug = self.entry.get("slug") or derive_slug(self.entry.get("title", ""), strip=True)
        return DETAIL_PATH.format(slug=slug or self.entry["id"])

    @property
    def is_manga(self) -> bool:
        return self.entry.get("contentType") == "Manga"


class CatalogBrowser:
    """Ties the client, resolver, debouncer and location together.

    Usage:
        browser = CatalogBrowser(client)
        view = await browser.open_detail("naruto-123")   # location -> /detail/naruto
        browser.type_search("naru")
        browser.type_search("naruto")                     # one search, for "naruto"
    """

    def __init__(
        self,
        client: CatalogClient,
        location: Optional[Location] = None,
        debounce: Optional[float] = None,
        full_scan_limit: Optional[int] = None,
    ):
        settings = get_settings()
        self.client = client
        self.location = location or Location()
        self.resolver = Resolver(
            client,
            navigator=self.location,
            full_scan_limit=full_scan_limit if full_scan_limit is not None else settings.full_scan_limit,
        )
        self.debouncer = SearchDebouncer(
            self._run_search,
            delay=debounce if debounce is not None else settings.search_debounce,
        )
        self.search_query: Optional[str] = None
        self.search_results: list[dict] = []
        self.search_error: Optional[AnimeBingError] = None
        self._last_request: Optional[Callable[[], Awaitable[Any]]] = None

    async def open_detail(self, identifier: Optional[str]) -> DetailView:
        """Resolve ``identifier`` and load its episodes (or chapters for manga)."""
        self._last_request = partial(self.open_detail, identifier)
        entry = await self.resolver.resolve(identifier)

        view = DetailView(entry=entry)
        if view.is_manga:
            view.chapters = await self.client.get_chapters(entry["id"])
        else:
            view.episodes = await self.client.get_episodes(entry["id"])
        return view

    def type_search(self, query: str) -> None:
        """Feed a keystroke's worth of search box text."""
        self.debouncer.submit(query)

    async def settle_search(self) -> None:
        """Wait for any pending search to fire and complete."""
        await self.debouncer.wait()

    async def _run_search(self, query: str) -> None:
        self._last_request = partial(self._run_search, query)
        self.location.set_search(query)
        self.search_query = query
        try:
            self.search_results = await self.client.search_catalog(query)
            self.search_error = None
        except AnimeBingError as e:
            # Shown inline with a "try again" action
            logger.warning("Search for %r failed: %s", query, e)
            self.search_results = []
            self.search_error = e

    async def retry(self) -> Any:
        """Re-issue the last request; failures were never cached, so it hits the network."""
        if self._last_request is None:
            return None
        return await self._last_request()
