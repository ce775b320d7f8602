"""Solana JSON-RPC client: one batch POST per address."""

from typing import Any

import httpx

from solcheck.exceptions import UpstreamParseError, UpstreamTransportError
from solcheck.parsers.base import UpstreamClient

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
TOKEN_ACCOUNT_OWNER_OFFSET = 32

BATCH_METHODS = (
    "getAccountInfo",
    "getBalance",
    "getTokenAccountsByOwner",
    "getSignaturesForAddress",
    "getProgramAccounts",
)


def batch_errors(payload: dict[str, Any]) -> dict[str, str]:
    """Method name → error message for every batch entry that failed."""
    errors: dict[str, str] = {}
    for method in BATCH_METHODS:
        entry = payload.get(method)
        if not isinstance(entry, dict) or "error" not in entry:
            continue
        error = entry["error"]
        message = error.get("message", "") if isinstance(error, dict) else error
        errors[method] = str(message) or "unknown error"
    return errors


def build_batch(address: str, signatures_limit: int) -> list[dict[str, Any]]:
    params: dict[str, list[Any]] = {
        "getAccountInfo": [address, {"encoding": "jsonParsed"}],
        "getBalance": [address],
        "getTokenAccountsByOwner": [
            address,
            {"programId": TOKEN_PROGRAM_ID},
            {"encoding": "jsonParsed"},
        ],
        "getSignaturesForAddress": [address, {"limit": min(signatures_limit, 1000)}],
        # Token-2022 accounts owned by the address; data sliced away, only counted
        "getProgramAccounts": [
            TOKEN_2022_PROGRAM_ID,
            {
                "encoding": "base64",
                "dataSlice": {"offset": 0, "length": 0},
                "filters": [
                    {"memcmp": {"offset": TOKEN_ACCOUNT_OWNER_OFFSET, "bytes": address}}
                ],
            },
        ],
    }
    return [
        {"jsonrpc": "2.0", "id": i, "method": method, "params": params[method]}
        for i, method in enumerate(BATCH_METHODS, start=1)
    ]


class RpcClient(UpstreamClient):
    """Payload maps each method name to ``{"result": ...}`` or ``{"error": ...}``."""

    source = "rpc"

    def __init__(self, rpc_url: str, *, signatures_limit: int = 1000, **kwargs: Any) -> None:
        super().__init__(rpc_url, **kwargs)
        self._rpc_url = rpc_url
        self._signatures_limit = signatures_limit

    async def _request(self, address: str, params: dict[str, Any]) -> httpx.Response:
        return await self._post(self._rpc_url, json=build_batch(address, self._signatures_limit))

    def _extract(self, data: Any) -> dict[str, Any]:
        if isinstance(data, dict) and "error" in data:
            message = data["error"].get("message", "") if isinstance(data["error"], dict) else data["error"]
            raise UpstreamTransportError(f"rpc error: {message}")
        if not isinstance(data, list):
            raise UpstreamParseError(f"expected batch list, got {type(data).__name__}")

        by_id = {item.get("id"): item for item in data if isinstance(item, dict)}
        payload: dict[str, Any] = {}
        for i, method in enumerate(BATCH_METHODS, start=1):
            item = by_id.get(i)
            if item is None:
                payload[method] = {"error": {"message": "missing from batch response"}}
            elif "error" in item:
                payload[method] = {"error": item["error"]}
            else:
                payload[method] = {"result": item.get("result")}
        return payload

    def _cacheable(self, payload: dict[str, Any]) -> bool:
        # a partly failed batch is served once, never from cache
        return not batch_errors(payload)
