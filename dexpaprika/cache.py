"""
Cache - In-memory TTL cache and a caching wrapper around the client.

Only successful results are cached. Errors always propagate and leave
the cache untouched, so the next call goes to the API again.
"""

import asyncio
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Optional

from dexpaprika.models import (
    DexesResponse,
    ListOptions,
    Network,
    PoolDetails,
    PoolsResponse,
    Stats,
    TokenDetails,
)

if TYPE_CHECKING:
    from dexpaprika.client import DexPaprikaClient


logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 300.0  # 5 minutes
DEFAULT_CLEANUP_INTERVAL = 300.0


class Cache(ABC):
    """Key/value store with per-entry expiry."""

    @abstractmethod
    def get(self, key: str) -> tuple[Any, bool]:
        """Return (value, found). Expired entries are not found."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: float) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


@dataclass
class CacheEntry:
    """Cached value with its expiry."""
    value: Any
    created_at: float
    expires_at: float
    hits: int = 0

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (now if now is not None else time.monotonic()) >= self.expires_at


class InMemoryCache(Cache):
    """
    Thread-safe in-memory cache.

    Expired entries are invisible to get() right away and are purged by
    cleanup(), either on demand or from the task started by
    start_cleanup().
    """

    def __init__(self, cleanup_interval: float = DEFAULT_CLEANUP_INTERVAL) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._cleanup_interval = cleanup_interval
        self._cleanup_task: Optional[asyncio.Task] = None
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> tuple[Any, bool]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.is_expired():
                self._misses += 1
                return None, False
            entry.hits += 1
            self._hits += 1
            return entry.value, True

    def set(self, key: str, value: Any, ttl: float) -> None:
        now = time.monotonic()
        with self._lock:
            self._entries[key] = CacheEntry(value=value, created_at=now, expires_at=now + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """Purge expired entries, return how many were removed."""
        now = time.monotonic()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"[cache] Purged {len(expired)} expired entries")
        return len(expired)

    def start_cleanup(self) -> None:
        """Start the periodic purge task on the running loop."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())
        logger.info(f"[cache] Started cleanup (interval={self._cleanup_interval}s)")

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self._cleanup_interval)
            self.cleanup()

    async def close(self) -> None:
        """Stop the purge task."""
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("[cache] Stopped cleanup")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total else 0.0,
            }


class CachedClient:
    """
    DexPaprikaClient wrapper that caches read results.

    Pool details change fastest and are kept for a fifth of the TTL.

    Usage:
        cached = CachedClient(client, ttl=60)
        networks = await cached.get_networks()
    """

    def __init__(
        self,
        client: "DexPaprikaClient",
        cache: Optional[Cache] = None,
        ttl: float = DEFAULT_CACHE_TTL,
    ) -> None:
        self._client = client
        self._cache = cache if cache is not None else InMemoryCache()
        self._ttl = ttl if ttl > 0 else DEFAULT_CACHE_TTL

    @property
    def client(self) -> "DexPaprikaClient":
        return self._client

    @property
    def cache(self) -> Cache:
        return self._cache

    @property
    def ttl(self) -> float:
        return self._ttl

    async def _cached(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        ttl: Optional[float] = None,
    ) -> Any:
        value, found = self._cache.get(key)
        if found:
            logger.debug(f"[cache] Hit {key}")
            return value

        value = await fetch()
        self._cache.set(key, value, ttl if ttl is not None else self._ttl)
        return value

    async def get_networks(self) -> List[Network]:
        return await self._cached("networks", self._client.networks.list)

    async def get_dexes(self, network_id: str, page: int = 0, limit: int = 0) -> DexesResponse:
        return await self._cached(
            f"dexes:{network_id}:{page}:{limit}",
            lambda: self._client.networks.list_dexes(network_id, page, limit),
        )

    async def get_pools(self, opts: Optional[ListOptions] = None) -> PoolsResponse:
        return await self._cached(
            f"pools:{_options_key(opts)}",
            lambda: self._client.pools.list(opts),
        )

    async def get_network_pools(
        self,
        network_id: str,
        opts: Optional[ListOptions] = None,
    ) -> PoolsResponse:
        return await self._cached(
            f"network_pools:{network_id}:{_options_key(opts)}",
            lambda: self._client.pools.list_by_network(network_id, opts),
        )

    async def get_pool_details(
        self,
        network_id: str,
        pool_address: str,
        inversed: bool = False,
    ) -> PoolDetails:
        return await self._cached(
            f"pool_details:{network_id}:{pool_address}:{str(inversed).lower()}",
            lambda: self._client.pools.get_details(network_id, pool_address, inversed),
            ttl=self._ttl / 5,
        )

    async def get_token_details(self, network_id: str, token_address: str) -> TokenDetails:
        return await self._cached(
            f"token_details:{network_id}:{token_address}",
            lambda: self._client.tokens.get_details(network_id, token_address),
        )

    async def get_token_pools(
        self,
        network_id: str,
        token_address: str,
        opts: Optional[ListOptions] = None,
        additional_token_address: str = "",
    ) -> PoolsResponse:
        return await self._cached(
            f"token_pools:{network_id}:{token_address}:{_options_key(opts)}:{additional_token_address}",
            lambda: self._client.tokens.get_pools(
                network_id, token_address, opts, additional_token_address
            ),
        )

    async def get_stats(self) -> Stats:
        return await self._cached("stats", self._client.utils.get_stats)


def _options_key(opts: Optional[ListOptions]) -> str:
    opts = opts or ListOptions()
    return f"{opts.page}:{opts.limit}:{opts.sort}:{opts.order_by}"
