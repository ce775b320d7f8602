"""Short-TTL response cache keyed by (service, address, params)."""

import hashlib
import json
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from loguru import logger
from redis.asyncio import Redis

DEFAULT_TTL_SEC = 300


def make_cache_key(service: str, address: str, params: dict[str, Any] | None = None) -> str:
    """Deterministic fingerprint; parameter order never changes the key."""
    canonical = json.dumps(
        {"service": service, "address": address.strip(), "params": params or {}},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return f"{service}:{hashlib.sha256(canonical.encode()).hexdigest()}"


class CacheStore(Protocol):
    async def get(self, key: str, now: float) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int, now: float) -> None: ...


@dataclass
class CacheEntry:
    key: str
    value: Any
    expires_at: float


class MemoryCacheStore:
    """Dict-backed store. Expired entries are dropped when read."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    async def get(self, key: str, now: float) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    async def set(self, key: str, value: Any, ttl: int, now: float) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=now + ttl)


class RedisCacheStore:
    """Redis-backed store; Redis itself expires the keys."""

    def __init__(self, redis: Redis, prefix: str = "solcheck:cache") -> None:
        self._redis = redis
        self._prefix = prefix

    async def get(self, key: str, now: float) -> Any | None:
        raw = await self._redis.get(f"{self._prefix}:{key}")
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"[CACHE] Corrupt entry for {key[:24]}, ignoring")
            return None

    async def set(self, key: str, value: Any, ttl: int, now: float) -> None:
        await self._redis.set(f"{self._prefix}:{key}", json.dumps(value), ex=ttl)


class ResponseCache:
    def __init__(
        self,
        ttl: int = DEFAULT_TTL_SEC,
        *,
        enabled: bool = True,
        store: CacheStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl
        self._enabled = enabled
        self._store = store or MemoryCacheStore()
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None on miss/expiry/disabled cache."""
        if not self._enabled:
            return None
        return await self._store.get(key, self._clock())

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        if not self._enabled:
            return
        await self._store.set(key, value, self._ttl if ttl is None else ttl, self._clock())
