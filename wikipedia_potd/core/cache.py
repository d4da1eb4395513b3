"""Named response caches.

This module provides small in-memory caches used by the REST layer to avoid
re-reading and re-encoding images on every request. Each cache is keyed by a
string and evicts its oldest entry once ``max_size`` is reached.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

from wikipedia_potd.core.logging_config import get_logger

logger = get_logger(__name__)

POTD_DATE = "potd-date"
POTD_IMAGE = "potd-image"
POTD_IMAGE_SCALED_W = "potd-image-scaled-w"
POTD_IMAGE_SCALED_WH = "potd-image-scaled-wh"
POTD_IMAGE_DITHERED = "potd-image-dithered"
POTD_IMAGE_DITHERED_SCALED_W = "potd-image-dithered-scaled-w"
POTD_IMAGE_DITHERED_SCALED_WH = "potd-image-dithered-scaled-wh"
POTD_TRMNL_DATE = "potd-trmnl-date"

CACHE_NAMES = (
    POTD_DATE,
    POTD_IMAGE,
    POTD_IMAGE_SCALED_W,
    POTD_IMAGE_SCALED_WH,
    POTD_IMAGE_DITHERED,
    POTD_IMAGE_DITHERED_SCALED_W,
    POTD_IMAGE_DITHERED_SCALED_WH,
    POTD_TRMNL_DATE,
)


class Cache:
    """A single named cache.

    Attributes:
        name: Cache name
        max_size: Maximum number of entries (0 = unlimited)
    """

    def __init__(self, name: str, max_size: int = 0) -> None:
        self.name = name
        self.max_size = max_size
        self._entries: Dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            return self._entries.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            if key not in self._entries and self.max_size > 0 and len(self._entries) >= self.max_size:
                # Remove oldest entry (simple FIFO)
                oldest_key = next(iter(self._entries))
                self._entries.pop(oldest_key)
            self._entries[key] = value

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for ``key`` or load and store it.

        ``None`` results are returned but not stored, so a later call
        loads again.

        Args:
            key: Cache key
            loader: Coroutine factory producing the value on a miss

        Returns:
            Cached or freshly loaded value
        """
        async with self._lock:
            if key in self._entries:
                return self._entries[key]

        value = await loader()
        if value is not None:
            await self.set(key, value)
        return value

    async def invalidate(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def invalidate_all(self) -> None:
        async with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Get the current cache size."""
        return len(self._entries)


class CacheManager:
    """Registry of named caches."""

    def __init__(self, max_size: int = 0, names: tuple[str, ...] = CACHE_NAMES) -> None:
        self._max_size = max_size
        self._caches: Dict[str, Cache] = {name: Cache(name, max_size) for name in names}

    def get_cache(self, name: str) -> Cache:
        """Get a cache by name, creating it on first use."""
        if name not in self._caches:
            self._caches[name] = Cache(name, self._max_size)
        return self._caches[name]

    def cache_names(self) -> List[str]:
        return list(self._caches)

    async def invalidate_all(self) -> None:
        for cache in self._caches.values():
            await cache.invalidate_all()


class CacheClearer:
    """Clears every response cache, e.g. after new data was scraped."""

    def __init__(self, cache_manager: CacheManager) -> None:
        self.cache_manager = cache_manager

    async def clear_all_caches(self) -> None:
        for name in self.cache_manager.cache_names():
            await self.cache_manager.get_cache(name).invalidate_all()
            logger.info(f"Cleared cache: {name}")


_cache_manager: Optional[CacheManager] = None


def get_cache_manager() -> CacheManager:
    """Get the global cache manager instance."""
    global _cache_manager
    if _cache_manager is None:
        from wikipedia_potd.server.core.config import settings

        _cache_manager = CacheManager(max_size=settings.cache_max_size)
    return _cache_manager
