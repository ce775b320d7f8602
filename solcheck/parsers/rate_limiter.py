import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from loguru import logger
from redis.asyncio import Redis

RATE_LIMIT_WINDOW_SEC = 60


class CounterStore(Protocol):
    async def increment(self, key: str, window_sec: int, now: float) -> int:
        """Atomically bump the counter for ``key`` and return the new count.

        A counter older than ``window_sec`` restarts at 1.
        """
        ...


@dataclass
class RateCounter:
    host_key: str
    window_start: float
    count: int


class MemoryCounterStore:
    """In-process fixed-window counters, safe across tasks and threads."""

    def __init__(self) -> None:
        self._counters: dict[str, RateCounter] = {}
        self._lock = threading.Lock()

    async def increment(self, key: str, window_sec: int, now: float) -> int:
        with self._lock:
            counter = self._counters.get(key)
            if counter is None or now - counter.window_start >= window_sec:
                counter = RateCounter(host_key=key, window_start=now, count=0)
                self._counters[key] = counter
            counter.count += 1
            return counter.count


class RedisCounterStore:
    """Counters shared by every worker process pointed at the same Redis.

    The window starts with the first call: the key is created with a TTL
    of one window and incremented inside a single MULTI block.
    """

    def __init__(self, redis: Redis, prefix: str = "solcheck:rl") -> None:
        self._redis = redis
        self._prefix = prefix

    async def increment(self, key: str, window_sec: int, now: float) -> int:
        redis_key = f"{self._prefix}:{key}"
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(redis_key, 0, ex=window_sec, nx=True)
            pipe.incr(redis_key)
            _, count = await pipe.execute()
        return int(count)


class RateLimiter:
    """Fixed-window rate limiter keyed by upstream host.

    Pass the SAME instance to every client so the limit holds across
    concurrent checks. Denial is a soft condition: the caller reports
    ``rate_limited`` for that source and carries on.
    """

    def __init__(
        self,
        max_calls: int = 100,
        *,
        enabled: bool = True,
        window_sec: int = RATE_LIMIT_WINDOW_SEC,
        store: CounterStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._max_calls = max_calls
        self._enabled = enabled
        self._window_sec = window_sec
        self._store = store or MemoryCounterStore()
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def allow(self, host: str) -> bool:
        if not self._enabled:
            return True
        count = await self._store.increment(host, self._window_sec, self._clock())
        if count > self._max_calls:
            logger.debug(f"[RATE_LIMIT] {host} denied ({count}/{self._max_calls} in window)")
            return False
        return True
