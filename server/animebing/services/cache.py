"""TTL-based caching service."""

import logging
import time
from typing import Any, Awaitable, Callable, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TTL = 120.0  # 2 minutes


@dataclass
class CacheEntry:
    """A single cached response."""
    key: str
    value: Any
    stored_at: float


def make_key(operation: str, **params: Any) -> str:
    """Build a deterministic cache key from an operation and its parameters.

    Parameters are ordered by name so call-site keyword order never matters,
    and ``None`` is rendered as ``~`` so an omitted field selector cannot
    collide with a literal value.

        >>> make_key("list", page=2, limit=24, fields=None)
        'list:fields=~&limit=24&page=2'
    """
    parts = []
    for name in sorted(params):
        value = params[name]
        rendered = "~" if value is None else repr(value)
        parts.append(f"{name}={rendered}")
    return f"{operation}:{'&'.join(parts)}"


class Cache:
    """In-memory cache with a fixed TTL and an injectable clock.

    Entries are never evicted by size; they live until ``clear()``,
    ``invalidate()`` or an overwrite of the same key.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return self._fresh(key) is not None

    def _fresh(self, key: str) -> Optional[CacheEntry]:
        entry = self._cache.get(key)
        if entry is None:
            return None

        if self._clock() - entry.stored_at >= self.ttl:
            # Expired, left in place until overwritten or cleared
            return None

        return entry

    def get(self, key: str, default: Any = None) -> Any:
        """Get cached data if not expired, else ``default``."""
        entry = self._fresh(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing whatever was there."""
        self._cache[key] = CacheEntry(key=key, value=value, stored_at=self._clock())

    def invalidate(self, key: str) -> None:
        """Invalidate a cache entry."""
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear all cache entries."""
        count = len(self._cache)
        self._cache.clear()
        logger.info("Cache cleared (%d entries dropped)", count)

    async def cached_fetch(self, key: str, producer: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for ``key`` or await ``producer`` and store it.

        Exceptions raised by the producer propagate and nothing is stored, so
        a failed read always goes back to the network next time.
        """
        entry = self._fresh(key)
        if entry is not None:
            logger.debug("Cache hit for %s", key)
            return entry.value

        value = await producer()
        self.set(key, value)
        return value
