"""
Async HTTP client for the catalog API, with every read memoized in a TTL cache.

Single-entry lookups return a tagged ``LookupResult`` so callers can tell
"not there" apart from "could not ask". List reads raise ``TransportFailure``.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..config import get_settings
from ..services.cache import Cache, make_key
from .errors import RequestRejected, TransportFailure

logger = logging.getLogger(__name__)

ALL_PAGE_SIZE = 50


class LookupStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a single-entry lookup."""
    status: LookupStatus
    entry: Optional[dict] = None
    error: Optional[TransportFailure] = None

    @classmethod
    def found(cls, entry: dict) -> "LookupResult":
        return cls(LookupStatus.FOUND, entry=entry)

    @classmethod
    def not_found(cls) -> "LookupResult":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def transport_error(cls, error: TransportFailure) -> "LookupResult":
        return cls(LookupStatus.TRANSPORT_ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND


@dataclass
class CatalogPage:
    """One page of the catalog listing."""
    items: list[dict]
    pagination: dict = field(default_factory=dict)

    @property
    def has_more(self) -> bool:
        return bool(self.pagination.get("hasMore"))


def normalize_entry(raw: dict) -> dict:
    """Give every entry an ``id`` whether the backend sent ``_id`` or ``id``."""
    return {**raw, "id": raw.get("_id") or raw.get("id")}


class CatalogClient:
    """
    Read side of the catalog API.

    Usage:
        async with CatalogClient() as client:
            page = await client.list_catalog(page=1)
            result = await client.get_by_slug("naruto")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[Cache] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base).rstrip("/")
        self.cache = cache if cache is not None else Cache(ttl=settings.cache_ttl)
        self._timeout = timeout or settings.request_timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout)
        return self._client

    async def request(
        self,
        operation: str,
        method: str,
        path: str,
        allow_statuses: tuple[int, ...] = (),
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request; transport errors and unexpected statuses raise.

        5xx and connection problems become ``TransportFailure``. Other 4xx
        statuses not listed in ``allow_statuses`` become ``RequestRejected``.
        """
        try:
            response = await self._http().request(method, path, **kwargs)
            if response.status_code >= 500:
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Transport failure in %s %s: %s", method, path, e)
            raise TransportFailure(operation, e) from e

        if response.status_code >= 400 and response.status_code not in allow_statuses:
            raise RequestRejected(operation, response.status_code, _detail(response))
        return response

    # --- Listing and search ---

    async def list_catalog(self, page: int = 1, page_size: Optional[int] = None, fields: Optional[str] = None) -> CatalogPage:
        """Get one page of entries, most recently updated first."""
        page_size = page_size or get_settings().default_page_size
        key = make_key("list", page=page, page_size=page_size, fields=fields)

        async def fetch() -> CatalogPage:
            params = {"page": page, "limit": page_size}
            if fields:
                params["fields"] = fields
            response = await self.request("list_catalog", "GET", "/anime", params=params)
            payload = response.json()
            items = payload.get("data") if payload.get("success") else None
            return CatalogPage(
                items=[normalize_entry(e) for e in items or []],
                pagination=payload.get("pagination") or {},
            )

        return await self.cache.cached_fetch(key, fetch)

    async def get_all(self, fields: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        """Walk every listing page; stops early once ``limit`` entries are collected."""
        entries: list[dict] = []
        page = 1
        while True:
            result = await self.list_catalog(page=page, page_size=ALL_PAGE_SIZE, fields=fields)
            entries.extend(result.items)
            if limit is not None and len(entries) >= limit:
                return entries[:limit]
            if not result.has_more or not result.items:
                return entries
            page += 1

    async def search_catalog(self, query: str, fields: Optional[str] = None) -> list[dict]:
        """Search titles; a blank query lists everything instead."""
        if not query.strip():
            return await self.get_all(fields)

        key = make_key("search", query=query, fields=fields)

        async def fetch() -> list[dict]:
            params = {"query": query}
            if fields:
                params["fields"] = fields
            response = await self.request("search_catalog", "GET", "/anime/search", params=params)
            payload = response.json()
            items = payload.get("data") if payload.get("success") else None
            return [normalize_entry(e) for e in items or []]

        return await self.cache.cached_fetch(key, fetch)

    async def get_featured(self) -> list[dict]:
        async def fetch() -> list[dict]:
            response = await self.request("get_featured", "GET", "/anime/featured")
            return [normalize_entry(e) for e in response.json().get("data") or []]

        return await self.cache.cached_fetch(make_key("featured"), fetch)

    # --- Single entries ---

    async def _lookup(self, operation: str, key: str, path: str, params: Optional[dict] = None) -> LookupResult:
        cached = self.cache.get(key)
        if cached is not None:
            return LookupResult.found(cached)

        try:
            response = await self.request(operation, "GET", path, allow_statuses=(400, 404), params=params)
        except TransportFailure as e:
            return LookupResult.transport_error(e)

        if response.status_code in (400, 404):
            return LookupResult.not_found()

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Unreadable %s response from %s: %s", operation, path, e)
            return LookupResult.transport_error(TransportFailure(operation, e))

        data = payload.get("data") if isinstance(payload, dict) else None
        if not data or not payload.get("success"):
            return LookupResult.not_found()

        entry = normalize_entry(data)
        self.cache.set(key, entry)
        return LookupResult.found(entry)

    async def get_by_id(self, entry_id: str, fields: Optional[str] = None) -> LookupResult:
        """Look up an entry by primary key."""
        params = {"fields": fields} if fields else None
        key = make_key("entry", id=entry_id, fields=fields)
        return await self._lookup("get_by_id", key, f"/anime/{quote(entry_id, safe='')}", params)

    async def get_by_slug(self, slug: str) -> LookupResult:
        """Look up an entry by slug."""
        key = make_key("entry_slug", slug=slug)
        return await self._lookup("get_by_slug", key, f"/anime/slug/{quote(slug, safe='')}")

    # --- Children ---

    async def get_episodes(self, catalog_id: str) -> list[dict]:
        async def fetch() -> list[dict]:
            response = await self.request("get_episodes", "GET", f"/episodes/{quote(catalog_id, safe='')}")
            return [normalize_entry(e) for e in response.json()]

        return await self.cache.cached_fetch(make_key("episodes", catalog_id=catalog_id), fetch)

    async def get_chapters(self, catalog_id: str) -> list[dict]:
        async def fetch() -> list[dict]:
            response = await self.request("get_chapters", "GET", f"/chapters/{quote(catalog_id, safe='')}")
            return [normalize_entry(c) for c in response.json()]

        return await self.cache.cached_fetch(make_key("chapters", catalog_id=catalog_id), fetch)

    async def get_social_links(self) -> list[dict]:
        async def fetch() -> list[dict]:
            response = await self.request("get_social_links", "GET", "/social")
            return response.json()

        return await self.cache.cached_fetch(make_key("social"), fetch)


class AdminClient:
    """
    Write side of the catalog API. Shares the reader's HTTP client and cache,
    and clears that cache after every successful mutation so stale reads are
    not served for the rest of the TTL.
    """

    PREFIX = "/admin/protected"

    def __init__(self, catalog: CatalogClient, token: str):
        self.catalog = catalog
        self._headers = {"Authorization": f"Bearer {token}"}

    async def _mutate(self, operation: str, method: str, path: str, json: Any = None) -> Any:
        response = await self.catalog.request(
            operation, method, f"{self.PREFIX}{path}", headers=self._headers, json=json
        )
        self.catalog.cache.clear()
        logger.info("Admin %s succeeded; read cache cleared", operation)
        return response.json()

    async def add_entry(self, fields: dict) -> dict:
        return (await self._mutate("add_entry", "POST", "/add-anime", fields))["anime"]

    async def edit_entry(self, entry_id: str, changes: dict) -> dict:
        return (await self._mutate("edit_entry", "PUT", f"/edit-anime/{entry_id}", changes))["anime"]

    async def delete_entry(self, entry_id: str) -> None:
        await self._mutate("delete_entry", "DELETE", "/delete-anime", {"id": entry_id})

    async def add_episode(self, fields: dict) -> dict:
        return (await self._mutate("add_episode", "POST", "/episodes", fields))["episode"]

    async def edit_episode(self, episode_id: str, changes: dict) -> dict:
        return (await self._mutate("edit_episode", "PUT", f"/edit-episode/{episode_id}", changes))["episode"]

    async def delete_episode(self, episode_id: str) -> None:
        await self._mutate("delete_episode", "DELETE", f"/episode/{episode_id}")

    async def edit_chapter(self, chapter_id: str, changes: dict) -> dict:
        return (await self._mutate("edit_chapter", "PUT", f"/edit-chapter/{chapter_id}", changes))["chapter"]

    async def update_report(self, report_id: str, status: str, admin_response: Optional[str] = None) -> dict:
        body = {"status": status}
        if admin_response:
            body["adminResponse"] = admin_response
        return (await self._mutate("update_report", "PUT", f"/reports/{report_id}", body))["report"]

    async def update_social_link(self, platform: str, url: str, is_active: bool = True) -> dict:
        return await self._mutate(
            "update_social_link", "PUT", f"/social-media/{platform}", {"url": url, "isActive": is_active}
        )


def _detail(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        return detail if isinstance(detail, str) else str(detail) if detail else None
    return None
