"""Test doubles shared across the suite."""

import asyncio
from typing import Optional

from animebing.client import LookupResult, TransportFailure


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingNavigator:
    """Navigator that records push/replace calls."""

    def __init__(self):
        self.replaced: list[str] = []
        self.pushed: list[str] = []

    def replace(self, path: str) -> None:
        self.replaced.append(path)

    def push(self, path: str) -> None:
        self.pushed.append(path)


class FakeCatalogClient:
    """In-memory stand-in for CatalogClient's read operations.

    ``fail`` holds operation names that should behave like a network outage;
    ``gates`` maps an identifier to an event its lookups wait on.
    """

    def __init__(self, entries: list[dict]):
        self.entries = entries
        self.calls: list[tuple[str, Optional[str]]] = []
        self.fail: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.episodes: dict[str, list[dict]] = {}
        self.chapters: dict[str, list[dict]] = {}

    async def _enter(self, operation: str, arg: Optional[str]) -> None:
        self.calls.append((operation, arg))
        gate = self.gates.get(arg) if arg is not None else None
        if gate is not None:
            await gate.wait()

    def _outage(self, operation: str) -> TransportFailure:
        return TransportFailure(operation, "connection refused")

    async def get_by_id(self, entry_id: str, fields: Optional[str] = None) -> LookupResult:
        await self._enter("get_by_id", entry_id)
        if "get_by_id" in self.fail:
            return LookupResult.transport_error(self._outage("get_by_id"))
        for entry in self.entries:
            if entry.get("id") == entry_id:
                return LookupResult.found(entry)
        return LookupResult.not_found()

    async def get_by_slug(self, slug: str) -> LookupResult:
        await self._enter("get_by_slug", slug)
        if "get_by_slug" in self.fail:
            return LookupResult.transport_error(self._outage("get_by_slug"))
        for entry in self.entries:
            if entry.get("slug") == slug:
                return LookupResult.found(entry)
        return LookupResult.not_found()

    async def get_all(self, fields: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        await self._enter("get_all", None)
        if "get_all" in self.fail:
            raise self._outage("get_all")
        return self.entries[:limit] if limit is not None else list(self.entries)

    async def search_catalog(self, query: str, fields: Optional[str] = None) -> list[dict]:
        await self._enter("search_catalog", query)
        if "search_catalog" in self.fail:
            raise self._outage("search_catalog")
        return [e for e in self.entries if query.lower() in e.get("title", "").lower()]

    async def get_episodes(self, catalog_id: str) -> list[dict]:
        await self._enter("get_episodes", catalog_id)
        return self.episodes.get(catalog_id, [])

    async def get_chapters(self, catalog_id: str) -> list[dict]:
        await self._enter("get_chapters", catalog_id)
        return self.chapters.get(catalog_id, [])

    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]
