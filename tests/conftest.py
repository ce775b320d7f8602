"""Shared test fixtures."""

import pytest

from solcheck.parsers.cache import ResponseCache
from solcheck.parsers.rate_limiter import RateLimiter


class FakeClock:
    """Manually advanced clock for TTL and window tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(1000)


@pytest.fixture
def cache() -> ResponseCache:
    return ResponseCache(300)


@pytest.fixture
def client_kwargs(rate_limiter: RateLimiter, cache: ResponseCache) -> dict:
    """Shared limiter + cache, the way the checker wires its clients."""
    return {"rate_limiter": rate_limiter, "cache": cache}
