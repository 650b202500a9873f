"""
Cache Utility Module

Key-value stores with TTL semantics used to hold the remote manifest between
update checks. Two backends share one interface:

- MemoryCache: in-process LRU with per-entry expiry
- RedisCache:  redis.asyncio, shared between workers
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import redis.asyncio as redis

from updater.utils.metrics import record_cache_hit, record_cache_miss

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total * 100


class CacheBackend(ABC):
    """Get/set/delete by key with a TTL in seconds."""

    name = "base"

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store *value* for *ttl* seconds. Returns True on success."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if something was removed."""

    async def connect(self) -> None:  # noqa: B027
        """Open any underlying connection. No-op by default."""

    async def disconnect(self) -> None:  # noqa: B027
        """Release any underlying connection. No-op by default."""


class MemoryCache(CacheBackend):
    """
    In-memory LRU cache with per-entry expiry.

    The clock is injectable so expiry boundaries can be tested without sleeping.
    """

    name = "memory"

    def __init__(self, max_size: int = 1000, clock: Callable[[], float] = time.monotonic):
        self._cache: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()
        self._max_size = max_size
        self._clock = clock
        self._stats = CacheStats()

    async def get(self, key: str) -> Any | None:
        """Get value and move to end (most recently used)."""
        if key in self._cache:
            value, expiry = self._cache[key]
            if expiry is not None and self._clock() >= expiry:
                del self._cache[key]
                logger.debug("Cache EXPIRED: %s", key)
            else:
                self._cache.move_to_end(key)
                self._stats.hits += 1
                record_cache_hit(self.name)
                logger.debug("Cache HIT: %s", key)
                return value

        self._stats.misses += 1
        record_cache_miss(self.name)
        logger.debug("Cache MISS: %s", key)
        return None

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        expiry = self._clock() + ttl if ttl else None

        if key in self._cache:
            self._cache.move_to_end(key)
        self._cache[key] = (value, expiry)

        # Evict oldest if over capacity
        while len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

        self._stats.sets += 1
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        if key in self._cache:
            del self._cache[key]
            self._stats.deletes += 1
            logger.debug("Cache DELETE: %s", key)
            return True
        return False

    def clear(self) -> None:
        self._cache.clear()

    def get_stats(self) -> dict:
        return {
            "size": len(self._cache),
            "max_size": self._max_size,
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "hit_rate": f"{self._stats.hit_rate:.2f}%",
        }


class RedisCache(CacheBackend):
    """
    Redis-backed cache.

    Values are stored as JSON with SETEX. When Redis is unreachable the cache
    disables itself and behaves as a permanent miss, retrying the connection
    after a 30-second cooldown.
    """

    name = "redis"
    RETRY_COOLDOWN = 30

    def __init__(self, url: str):
        self._url = url
        self._redis: redis.Redis | None = None
        self._pool: redis.ConnectionPool | None = None
        self._enabled = True
        self._last_connect_attempt: float = 0

    async def connect(self) -> None:
        """Establish connection to Redis."""
        if self._redis is not None:
            return

        self._last_connect_attempt = time.time()
        try:
            self._pool = redis.ConnectionPool.from_url(self._url, decode_responses=True)
            self._redis = redis.Redis(connection_pool=self._pool)
            await self._redis.ping()
            logger.info("Cache: Successfully connected to Redis")
        except Exception as e:
            logger.warning(f"Cache: Failed to connect to Redis: {e}. Caching disabled.")
            self._redis = None
            self._enabled = False

    async def disconnect(self) -> None:
        """Close Redis connection"""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
        if self._pool:
            await self._pool.aclose()
            self._pool = None
        logger.info("Cache: Disconnected from Redis")

    async def _maybe_retry_connect(self) -> None:
        """Re-attempt connection after the cooldown to allow self-healing."""
        if not self._enabled and time.time() - self._last_connect_attempt >= self.RETRY_COOLDOWN:
            logger.info("Cache: retrying Redis connection after cooldown...")
            self._redis = None
            self._pool = None
            self._enabled = True
            await self.connect()

    async def get(self, key: str) -> Any | None:
        await self._maybe_retry_connect()
        if not self._enabled:
            return None

        try:
            if not self._redis:
                await self.connect()
            if not self._redis:
                return None

            data = await self._redis.get(key)
            if data:
                logger.debug(f"Cache HIT: {key}")
                record_cache_hit(self.name)
                return json.loads(data)

            logger.debug(f"Cache MISS: {key}")
            record_cache_miss(self.name)
            return None
        except Exception as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        await self._maybe_retry_connect()
        if not self._enabled:
            return False

        try:
            if not self._redis:
                await self.connect()
            if not self._redis:
                return False

            serialized = json.dumps(value, default=str)
            await self._redis.setex(key, ttl, serialized)
            logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        await self._maybe_retry_connect()
        if not self._enabled:
            return False

        try:
            if not self._redis:
                await self.connect()
            if not self._redis:
                return False

            deleted = await self._redis.delete(key)
            logger.debug(f"Cache DELETE: {key}")
            return bool(deleted)
        except Exception as e:
            logger.warning(f"Cache delete error for {key}: {e}")
            return False


def build_cache(settings) -> CacheBackend:
    """Pick the cache backend named by settings.cache_backend."""
    if settings.cache_backend == "redis":
        if not settings.redis_url:
            logger.warning("Cache: redis backend selected without REDIS_URL; using memory cache")
            return MemoryCache()
        return RedisCache(settings.redis_url)
    return MemoryCache()
