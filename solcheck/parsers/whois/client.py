from typing import Any

import httpx

from solcheck.parsers.base import UpstreamClient


class WhoisClient(UpstreamClient):
    """WHOIS JSON service: GET {base}/{domain}."""

    source = "whois"

    def __init__(self, base_url: str, api_key: str = "", **kwargs: Any) -> None:
        headers = {"X-API-Key": api_key} if api_key else None
        super().__init__(base_url, headers=headers, **kwargs)

    async def _request(self, domain: str, params: dict[str, Any]) -> httpx.Response:
        return await self._get(f"/{domain}")
