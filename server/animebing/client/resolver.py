"""
Resolve a user-supplied identifier (id, slug or title fragment) to one entry.

Strategies run strictly in order and the first hit wins:

    1. lookup by id        (only when the identifier is ObjectId-shaped)
    2. lookup by slug      (raw identifier)
    3. full catalog scan   (slug, id or title-derived slug equality)

A transport failure at any step aborts the whole resolution instead of
falling through, so an outage is never reported as "not found".
"""

import logging
from typing import Optional, Protocol

from ..services.slugs import derive_slug, is_object_id
from .catalog_client import CatalogClient, LookupResult, LookupStatus
from .errors import MissingIdentifier, NotFound, StaleResolution

logger = logging.getLogger(__name__)

DETAIL_PATH = "/detail/{slug}"


class Navigator(Protocol):
    def replace(self, path: str) -> None: ...


def matches_identifier(entry: dict, identifier: str) -> bool:
    """True when ``identifier`` is the entry's slug, id or title-derived slug."""
    if entry.get("slug") == identifier or entry.get("id") == identifier:
        return True
    title = entry.get("title") or ""
    return identifier in (derive_slug(title), derive_slug(title, strip=True))


class Resolver:
    """Fallback-chain lookup with URL canonicalization and stale-result guarding.

    Each ``resolve()`` call takes a new generation number. If a newer call
    started while this one was waiting on the network, its result is
    discarded with ``StaleResolution`` and the location is left alone.
    """

    def __init__(
        self,
        client: CatalogClient,
        navigator: Optional[Navigator] = None,
        full_scan_limit: Optional[int] = None,
    ):
        self.client = client
        self.navigator = navigator
        self.full_scan_limit = full_scan_limit
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def resolve(self, identifier: Optional[str]) -> dict:
        """Map ``identifier`` to exactly one catalog entry.

        Raises ``MissingIdentifier`` (before any request) for an empty
        identifier, ``NotFound`` when every strategy misses,
        ``TransportFailure`` when a request fails, and ``StaleResolution``
        when a newer call overtook this one.
        """
        if not identifier:
            raise MissingIdentifier()

        self._generation += 1
        generation = self._generation

        try:
            entry = await self._find(identifier)
        except NotFound:
            self._ensure_current(identifier, generation)
            raise

        self._ensure_current(identifier, generation)
        self._canonicalize(identifier, entry)
        return entry

    def _ensure_current(self, identifier: str, generation: int) -> None:
        if generation != self._generation:
            logger.info("Discarding stale resolution of %r (generation %d < %d)",
                        identifier, generation, self._generation)
            raise StaleResolution(identifier, generation)

    async def _find(self, identifier: str) -> dict:
        if is_object_id(identifier):
            entry = self._unwrap(await self.client.get_by_id(identifier), "id", identifier)
            if entry is not None:
                return entry

        entry = self._unwrap(await self.client.get_by_slug(identifier), "slug", identifier)
        if entry is not None:
            return entry

        entry = await self._scan(identifier)
        if entry is not None:
            return entry

        logger.info("No catalog entry for %r", identifier)
        raise NotFound(identifier)

    @staticmethod
    def _unwrap(result: LookupResult, step: str, identifier: str) -> Optional[dict]:
        if result.status is LookupStatus.TRANSPORT_ERROR:
            logger.error("Lookup by %s failed for %r; aborting resolution: %s",
                         step, identifier, result.error)
            raise result.error
        return result.entry if result.is_found else None

    async def _scan(self, identifier: str) -> Optional[dict]:
        # Reaching this step means ids/slugs are missing or inconsistent in the data
        logger.warning("Falling back to full catalog scan for %r (limit=%s)",
                       identifier, self.full_scan_limit)
        entries = await self.client.get_all(limit=self.full_scan_limit)
        for entry in entries:
            if matches_identifier(entry, identifier):
                return entry
        return None

    def _canonicalize(self, identifier: str, entry: dict) -> None:
        slug = entry.get("slug")
        if not slug or slug == identifier or is_object_id(identifier) or self.navigator is None:
            return
        path = DETAIL_PATH.format(slug=slug)
        logger.info("Canonicalizing %r to %s", identifier, path)
        self.navigator.replace(path)

