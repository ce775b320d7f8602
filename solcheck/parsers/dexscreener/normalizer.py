"""DexScreener pairs → MarketRecord, SOL/USD price and social links."""

from decimal import Decimal

from loguru import logger
from pydantic import ValidationError

from config.settings import DEFAULT_UNKNOWN_AGE_WINDOWS
from solcheck.models.records import BuysSells, MarketRecord
from solcheck.models.upstream import UpstreamResponse
from solcheck.parsers.dexscreener.client import WSOL_MINT
from solcheck.parsers.dexscreener.models import DexScreenerPair
from solcheck.parsers.extract import safe_float
from solcheck.utils.formatting import format_usd

# Our window labels → DexScreener keys; other windows are not served
WINDOW_KEYS = {"5m": "m5", "1h": "h1", "6h": "h6", "24h": "h24"}


def _pairs(response: UpstreamResponse) -> list[DexScreenerPair]:
    pairs: list[DexScreenerPair] = []
    for raw in response.payload.get("pairs") or []:
        if not isinstance(raw, dict):
            continue
        try:
            pair = DexScreenerPair.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"[DEXSCREENER] Skipping malformed pair: {e.error_count()} errors")
            continue
        if pair.chainId and pair.chainId != "solana":
            continue
        pairs.append(pair)
    return pairs


def _liquidity(pair: DexScreenerPair) -> float:
    if pair.liquidity is None:
        return 0.0
    return safe_float(pair.liquidity.usd)


def best_pair(response: UpstreamResponse) -> DexScreenerPair | None:
    """Deepest-liquidity Solana pair with the fetched token on the base side.

    The token endpoint also lists pairs where the token is only the quote
    (SOL/USDC for USDC); those describe the other token and are skipped.
    """
    if not response.success:
        return None
    pairs = _pairs(response)
    if response.address:
        pairs = [p for p in pairs if p.baseToken is not None and p.baseToken.address == response.address]
    if not pairs:
        return None
    return max(pairs, key=_liquidity)


def _window_value(values: object, key: str | None) -> float:
    if values is None or key is None:
        return 0.0
    value: Decimal | None = getattr(values, key, None)
    return safe_float(value)


def normalize_market(response: UpstreamResponse) -> MarketRecord:
    if not response.success:
        return MarketRecord(error=response.error or "")

    windows = list(response.params.get("windows") or DEFAULT_UNKNOWN_AGE_WINDOWS)
    pair = best_pair(response)
    if pair is None:
        # Token not traded on any DEX (or a wallet address)
        return MarketRecord(available=True, windows=windows)

    volume = {w: _window_value(pair.volume, WINDOW_KEYS.get(w)) for w in windows}
    price_change = {w: _window_value(pair.priceChange, WINDOW_KEYS.get(w)) for w in windows}
    buys_sells: dict[str, BuysSells] = {}
    for w in windows:
        key = WINDOW_KEYS.get(w)
        txns = getattr(pair.txns, key, None) if pair.txns is not None and key else None
        buys_sells[w] = BuysSells(
            buys=(txns.buys or 0) if txns else 0,
            sells=(txns.sells or 0) if txns else 0,
        )

    liquidity = _liquidity(pair)
    fdv = safe_float(pair.fdv)
    market_cap = safe_float(pair.marketCap) or fdv
    volume_24h = _window_value(pair.volume, "h24")

    return MarketRecord(
        available=True,
        pair_address=pair.pairAddress or MarketRecord().pair_address,
        dex_id=pair.dexId or MarketRecord().dex_id,
        price_usd=safe_float(pair.priceUsd),
        price_native=safe_float(pair.priceNative),
        liquidity_usd=liquidity,
        market_cap=market_cap,
        fdv=fdv,
        pair_created_at=(pair.pairCreatedAt or 0) // 1000,
        windows=windows,
        volume_by_window=volume,
        price_change_by_window=price_change,
        buys_sells_by_window=buys_sells,
        volume_24h_formatted=format_usd(volume_24h),
        liquidity_formatted=format_usd(liquidity),
        market_cap_formatted=format_usd(market_cap),
    )


def sol_price_usd(response: UpstreamResponse) -> float:
    """SOL/USD from the deepest wrapped-SOL pair; 0.0 when unavailable."""
    if not response.success:
        return 0.0
    pairs = [p for p in _pairs(response) if p.baseToken is not None and p.baseToken.address == WSOL_MINT]
    if not pairs:
        return 0.0
    return safe_float(max(pairs, key=_liquidity).priceUsd)


def social_links(response: UpstreamResponse) -> list[tuple[str, str]]:
    """``(kind, url)`` pairs from the best pair's ``info`` block."""
    pair = best_pair(response)
    if pair is None or pair.info is None:
        return []
    links = [("website", w.url) for w in pair.info.websites if w.url]
    links.extend((s.type or "social", s.url) for s in pair.info.socials if s.url)
    return links
