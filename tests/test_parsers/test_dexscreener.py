"""Tests for the DexScreener client and market normalizer."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from solcheck.models.upstream import UpstreamResponse
from solcheck.parsers.dexscreener.client import WSOL_MINT, DexScreenerClient
from solcheck.parsers.dexscreener.normalizer import (
    best_pair,
    normalize_market,
    social_links,
    sol_price_usd,
)

MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def _pair(pair_address: str, liquidity: float, **extra) -> dict:
    pair = {
        "chainId": "solana",
        "dexId": "raydium",
        "pairAddress": pair_address,
        "baseToken": {"address": MINT, "name": "Bonk", "symbol": "BONK"},
        "quoteToken": {"address": WSOL_MINT, "symbol": "SOL"},
        "priceUsd": "0.00002",
        "priceNative": "0.0000001",
        "liquidity": {"usd": liquidity},
    }
    pair.update(extra)
    return pair


FULL_PAIR = _pair(
    "PairDeep",
    2_500_000,
    volume={"m5": 1200, "h1": 15000, "h6": 90000, "h24": 2_500_000},
    priceChange={"m5": 0.5, "h1": -1.2, "h6": 3.4, "h24": 12.0},
    txns={"m5": {"buys": 3, "sells": 1}, "h1": {"buys": 40, "sells": 35}},
    fdv=1_800_000_000,
    marketCap=1_500_000_000,
    pairCreatedAt=1_700_000_000_000,
    info={
        "websites": [{"label": "Website", "url": "https://www.bonkcoin.com"}],
        "socials": [
            {"type": "twitter", "url": "https://twitter.com/bonk_inu"},
            {"type": "telegram", "url": "https://t.me/bonkinu"},
        ],
    },
)


def _market(pairs: list, windows: list[str] | None = None) -> UpstreamResponse:
    params = {"windows": windows} if windows is not None else {}
    return UpstreamResponse.ok("dexscreener", {"pairs": pairs}, params=params)


class TestDexScreenerClient:
    @pytest.mark.asyncio
    async def test_fetch_pairs(self, client_kwargs) -> None:
        client = DexScreenerClient("https://api.dexscreener.com", **client_kwargs)
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {"schemaVersion": "1.0.0", "pairs": [FULL_PAIR]}
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=mock_resp)

        result = await client.fetch(MINT, windows=["5m", "1h"])

        assert result.success is True
        assert result.params == {"windows": ["5m", "1h"]}
        assert result.payload["pairs"][0]["pairAddress"] == "PairDeep"
        client._client.get.assert_awaited_once_with(
            f"https://api.dexscreener.com/latest/dex/tokens/{MINT}"
        )

    @pytest.mark.asyncio
    async def test_null_pairs(self, client_kwargs) -> None:
        client = DexScreenerClient("https://api.dexscreener.com", **client_kwargs)
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {"schemaVersion": "1.0.0", "pairs": None}
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=mock_resp)

        result = await client.fetch(MINT)

        assert result.success is True
        assert result.payload == {"pairs": []}


class TestNormalizeMarket:
    def test_picks_deepest_pair(self) -> None:
        resp = _market([_pair("PairShallow", 5_000), FULL_PAIR, _pair("PairMid", 90_000)])
        assert best_pair(resp).pairAddress == "PairDeep"

    def test_ignores_other_chains(self) -> None:
        other = _pair("PairEth", 9_000_000, chainId="ethereum")
        resp = _market([other, _pair("PairSol", 1_000)])
        assert best_pair(resp).pairAddress == "PairSol"

    def test_full_pair(self) -> None:
        record = normalize_market(_market([FULL_PAIR], windows=["5m", "1h", "6h"]))

        assert record.available is True
        assert record.pair_address == "PairDeep"
        assert record.dex_id == "raydium"
        assert record.price_usd == 0.00002
        assert record.liquidity_usd == 2_500_000
        assert record.market_cap == 1_500_000_000
        assert record.fdv == 1_800_000_000
        assert record.pair_created_at == 1_700_000_000
        assert record.windows == ["5m", "1h", "6h"]
        assert record.volume_by_window == {"5m": 1200, "1h": 15000, "6h": 90000}
        assert record.price_change_by_window["1h"] == -1.2
        assert record.buys_sells_by_window["5m"].buys == 3
        assert record.buys_sells_by_window["6h"].sells == 0
        assert record.volume_24h_formatted == "$2.5M"
        assert record.liquidity_formatted == "$2.5M"
        assert record.market_cap_formatted == "$1.5B"

    def test_window_dexscreener_does_not_serve(self) -> None:
        record = normalize_market(_market([FULL_PAIR], windows=["24h", "3d"]))
        assert record.volume_by_window == {"24h": 2_500_000, "3d": 0.0}

    def test_market_cap_falls_back_to_fdv(self) -> None:
        record = normalize_market(_market([_pair("P", 50_000, fdv=120_000)]))
        assert record.market_cap == 120_000
        assert record.market_cap_formatted == "$120.0K"

    def test_no_pairs(self) -> None:
        record = normalize_market(_market([], windows=["5m"]))
        assert record.available is True
        assert record.pair_address == "Unknown"
        assert record.liquidity_usd == 0.0
        assert record.liquidity_formatted == "$0"
        assert record.windows == ["5m"]

    def test_malformed_pair_skipped(self) -> None:
        bad = _pair("Bad", 10, priceUsd="not-a-number")
        record = normalize_market(_market([bad, _pair("Good", 5)]))
        assert record.pair_address == "Good"

    def test_failed_response(self) -> None:
        record = normalize_market(UpstreamResponse.fail("dexscreener", "rate_limited"))
        assert record.available is False
        assert record.error == "rate_limited"
        assert record.price_usd == 0.0


class TestSolPrice:
    def test_deepest_wsol_pair(self) -> None:
        usdc = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
        pairs = [
            {"chainId": "solana", "baseToken": {"address": WSOL_MINT}, "priceUsd": "150.10", "liquidity": {"usd": 1e6}},
            {"chainId": "solana", "baseToken": {"address": WSOL_MINT}, "priceUsd": "151.25", "liquidity": {"usd": 5e7}},
            {"chainId": "solana", "baseToken": {"address": usdc}, "priceUsd": "1.0", "liquidity": {"usd": 9e9}},
        ]
        assert sol_price_usd(_market(pairs)) == 151.25

    def test_unavailable(self) -> None:
        assert sol_price_usd(UpstreamResponse.fail("sol_price", "rate_limited")) == 0.0
        assert sol_price_usd(_market([])) == 0.0


class TestSocialLinks:
    def test_websites_then_socials(self) -> None:
        assert social_links(_market([FULL_PAIR])) == [
            ("website", "https://www.bonkcoin.com"),
            ("twitter", "https://twitter.com/bonk_inu"),
            ("telegram", "https://t.me/bonkinu"),
        ]

    def test_no_info_block(self) -> None:
        assert social_links(_market([_pair("P", 1)])) == []


USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"
SOL_USDC = {
    "chainId": "solana",
    "pairAddress": "PairSolUsdc",
    "baseToken": {"address": WSOL_MINT, "symbol": "SOL"},
    "quoteToken": {"address": USDC, "symbol": "USDC"},
    "priceUsd": "150",
    "liquidity": {"usd": 5e7},
    "info": {"websites": [{"url": "https://solana.com"}]},
}
USDC_USDT = {
    "chainId": "solana",
    "pairAddress": "PairUsdcUsdt",
    "baseToken": {"address": USDC, "symbol": "USDC"},
    "quoteToken": {"address": USDT, "symbol": "USDT"},
    "priceUsd": "1.0",
    "liquidity": {"usd": 1e6},
}


class TestBaseTokenSide:
    def test_quote_side_pair_ignored(self) -> None:
        resp = UpstreamResponse.ok("dexscreener", {"pairs": [SOL_USDC, USDC_USDT]}, address=USDC)
        record = normalize_market(resp)
        assert record.pair_address == "PairUsdcUsdt"
        assert record.price_usd == 1.0
        assert record.liquidity_usd == 1e6

    def test_only_quote_side_pairs(self) -> None:
        resp = UpstreamResponse.ok("dexscreener", {"pairs": [SOL_USDC]}, address=USDC)
        record = normalize_market(resp)
        assert record.available is True
        assert record.pair_address == "Unknown"
        assert record.price_usd == 0.0
        assert social_links(resp) == []

    @pytest.mark.asyncio
    async def test_fetch_records_address(self, client_kwargs) -> None:
        client = DexScreenerClient("https://api.dexscreener.com", **client_kwargs)
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {"pairs": [SOL_USDC, USDC_USDT]}
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=mock_resp)

        result = await client.fetch(USDC)
        cached = await client.fetch(USDC)

        assert result.address == USDC
        assert cached.cached is True
        assert cached.address == USDC
        assert normalize_market(cached).price_usd == 1.0
