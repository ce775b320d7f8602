from typing import Any

import httpx

from solcheck.exceptions import UpstreamParseError
from solcheck.parsers.base import UpstreamClient

WSOL_MINT = "So11111111111111111111111111111111111111112"


class DexScreenerClient(UpstreamClient):
    """Async REST client for the DexScreener public API (no auth required).

    ``fetch(address, windows=[...])``: the lookback windows chosen for the
    token are part of the request fingerprint, so a token re-checked after
    it ages into a longer window set is fetched fresh.
    """

    source = "dexscreener"

    async def _request(self, address: str, params: dict[str, Any]) -> httpx.Response:
        return await self._get(f"/latest/dex/tokens/{address}")

    def _extract(self, data: Any) -> dict[str, Any]:
        if isinstance(data, list):
            return {"pairs": data}
        if not isinstance(data, dict):
            raise UpstreamParseError(f"expected object, got {type(data).__name__}")
        pairs = data.get("pairs", data.get("pair", []))
        if not isinstance(pairs, list):
            pairs = [pairs] if pairs else []
        return {"pairs": pairs}
