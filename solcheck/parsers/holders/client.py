"""Holder indexer client (Moralis Solana gateway)."""

from typing import Any

import httpx

from solcheck.parsers.base import UpstreamClient


class HoldersClient(UpstreamClient):
    source = "holders"

    def __init__(self, base_url: str, api_key: str, **kwargs: Any) -> None:
        super().__init__(base_url, headers={"X-API-Key": api_key}, **kwargs)

    async def _request(self, address: str, params: dict[str, Any]) -> httpx.Response:
        return await self._get(f"/token/mainnet/holders/{address}")
