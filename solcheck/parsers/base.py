"""Shared fetch pipeline for every upstream data source.

cache lookup → rate-limit gate → HTTP call → JSON decode → cache store.
Soft failures (rate limit, transport, parse) come back as failed
``UpstreamResponse`` objects; nothing here raises into the checker.
"""

from typing import Any
from urllib.parse import urlparse

import httpx
from loguru import logger

from solcheck.exceptions import (
    RateLimitedError,
    UpstreamError,
    UpstreamParseError,
    UpstreamTransportError,
)
from solcheck.models.upstream import UpstreamResponse
from solcheck.parsers.cache import ResponseCache, make_cache_key
from solcheck.parsers.rate_limiter import RateLimiter


class UpstreamClient:
    """Base class: subclasses implement ``_request`` and optionally ``_extract``."""

    source = "upstream"

    def __init__(
        self,
        base_url: str,
        *,
        rate_limiter: RateLimiter,
        cache: ResponseCache,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._host = urlparse(base_url).hostname or base_url
        self._timeout = timeout
        self._rate_limiter = rate_limiter
        self._cache = cache
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
        )

    @property
    def host(self) -> str:
        return self._host

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch(self, address: str, **params: Any) -> UpstreamResponse:
        key = make_cache_key(self.source, address, params)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug(f"[{self.source.upper()}] cache hit for {address[:12]}")
            return UpstreamResponse.ok(self.source, cached, params=params, cached=True, address=address)

        try:
            if not await self._rate_limiter.allow(self._host):
                raise RateLimitedError()
            response = await self._request(address, params)
            payload = self._decode(response)
        except UpstreamError as e:
            logger.bind(source=self.source, address=address, error=e.error_kind).warning(
                f"[{self.source.upper()}] {e.error_kind} for {address[:12]}"
            )
            return UpstreamResponse.fail(self.source, e.error_kind, params=params, address=address)

        if self._cacheable(payload):
            await self._cache.set(key, payload)
        return UpstreamResponse.ok(self.source, payload, params=params, address=address)

    async def _request(self, address: str, params: dict[str, Any]) -> httpx.Response:
        raise NotImplementedError

    def _extract(self, data: Any) -> dict[str, Any]:
        """Reshape decoded JSON into the cached payload mapping."""
        if not isinstance(data, dict):
            raise UpstreamParseError(f"expected object, got {type(data).__name__}")
        return data

    def _cacheable(self, payload: dict[str, Any]) -> bool:
        return True

    async def _get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self._send("GET", f"{self._base_url}{path}", **kwargs)

    async def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._send("POST", url, **kwargs)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            if method == "GET":
                resp = await self._client.get(url, **kwargs)
            else:
                resp = await self._client.post(url, **kwargs)
        except httpx.TimeoutException:
            raise UpstreamTransportError(f"timeout after {self._timeout:g}s") from None
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"{type(e).__name__}: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise UpstreamTransportError(f"HTTP {resp.status_code}")
        return resp

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            raise UpstreamParseError() from None
        return self._extract(data)
