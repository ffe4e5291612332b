# app/core/cache.py
from typing import Any, Callable, Optional, Dict, Tuple
import time
import logging
import asyncio

logger = logging.getLogger(__name__)

# Public site keeps documents for 30 seconds
DEFAULT_TTL = 30


class InMemoryCache:
    """Simple in-memory cache with TTL support.

    The clock is injectable so expiry can be driven from tests.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.time):
        self._cache: Dict[str, Tuple[Any, float]] = {}
        self._lock = asyncio.Lock()
        self.ttl = ttl
        self.clock = clock

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired"""
        async with self._lock:
            if key in self._cache:
                value, expiry = self._cache[key]
                if self.clock() < expiry:
                    logger.debug(f"Cache hit for key: {key}")
                    return value
                else:
                    # Remove expired entry
                    del self._cache[key]
                    logger.debug(f"Cache expired for key: {key}")
            logger.debug(f"Cache miss for key: {key}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[float] = None):
        """Set value in cache, using the cache's TTL unless one is given"""
        async with self._lock:
            ttl = self.ttl if ttl is None else ttl
            self._cache[key] = (value, self.clock() + ttl)
            logger.debug(f"Cached key: {key} with TTL: {ttl}s")

    async def invalidate(self, key: str):
        """Delete key from cache"""
        async with self._lock:
            if key in self._cache:
                del self._cache[key]
                logger.debug(f"Invalidated cache key: {key}")

    async def clear(self):
        """Clear all cache entries"""
        async with self._lock:
            self._cache.clear()
            logger.debug("Cleared all cache entries")

    async def cleanup_expired(self) -> int:
        """Remove all expired entries"""
        async with self._lock:
            current_time = self.clock()
            expired_keys = [
                key for key, (_, expiry) in self._cache.items()
                if current_time >= expiry
            ]
            for key in expired_keys:
                del self._cache[key]
            if expired_keys:
                logger.debug(f"Cleaned up {len(expired_keys)} expired cache entries")
            return len(expired_keys)

    def __len__(self) -> int:
        return len(self._cache)


__all__ = ["InMemoryCache", "DEFAULT_TTL"]
