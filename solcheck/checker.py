"""Address check orchestration.

Received → Validating → Invalid
                      → Fetching → Normalizing → Scoring → Success
Missing required configuration (no RPC URL) is the only hard failure.

Fetch order inside one check:
1. RPC batch (account, balance, signatures). Its oldest signature dates the
   token and picks the lookback windows.
2. Holders + DexScreener (token + SOL/USD price) concurrently, with those
   windows.
3. WHOIS for the website domain DexScreener lists, if any.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from loguru import logger

from config.settings import Settings
from solcheck.db.redis import get_redis
from solcheck.exceptions import FatalConfigurationError
from solcheck.models.address import KIND_TOKEN_MINT, KIND_UNKNOWN, KIND_WALLET
from solcheck.models.records import (
    AccountRecord,
    BalanceRecord,
    DistributionRecord,
    MarketRecord,
    TransactionRecord,
    WebsiteInfo,
)
from solcheck.models.result import STATUS_INVALID, STATUS_SUCCESS, CompositeResult
from solcheck.models.upstream import INVALID_PAYLOAD, NO_DOMAIN, NOT_CONFIGURED, UpstreamResponse
from solcheck.parsers.base import UpstreamClient
from solcheck.parsers.cache import MemoryCacheStore, RedisCacheStore, ResponseCache
from solcheck.parsers.dexscreener.client import WSOL_MINT, DexScreenerClient
from solcheck.parsers.dexscreener.normalizer import normalize_market, social_links, sol_price_usd
from solcheck.parsers.holders.client import HoldersClient
from solcheck.parsers.holders.normalizer import normalize_holders
from solcheck.parsers.periods import resolve_windows
from solcheck.parsers.rate_limiter import MemoryCounterStore, RateLimiter, RedisCounterStore
from solcheck.parsers.rpc.client import RpcClient, batch_errors
from solcheck.parsers.rpc.normalizer import normalize_account, normalize_balance, normalize_transactions
from solcheck.parsers.social import build_social, extract_domain
from solcheck.parsers.whois.client import WhoisClient
from solcheck.parsers.whois.normalizer import normalize_whois
from solcheck.scoring import NormalizedRecords, ScoreThresholds, compute_scores
from solcheck.validator import validate_address

SOURCE_RPC = "rpc"
SOURCE_HOLDERS = "holders"
SOURCE_MARKET = "dexscreener"
SOURCE_SOL_PRICE = "sol_price"
SOURCE_WHOIS = "whois"


def _normalize(
    normalizer: Callable[..., Any], response: UpstreamResponse, fallback: Callable[[], Any], **kwargs: Any
) -> Any:
    """Normalizer call that can never fail the check: a payload it cannot
    read yields the ``fallback`` sentinel record."""
    try:
        return normalizer(response, **kwargs)
    except Exception as e:
        logger.opt(exception=e).error(f"[CHECK] {response.source} payload could not be normalized")
        return fallback()


def _infer_kind(account: AccountRecord) -> str:
    if account.is_token:
        return KIND_TOKEN_MINT
    if account.account_type == "System Account":
        return KIND_WALLET
    return KIND_UNKNOWN


class AddressChecker:
    """Aggregates every upstream source into one CompositeResult per address.

    Build once per process (``from_settings``) and reuse: the rate limiter
    and cache it holds are shared by all concurrent checks.
    """

    def __init__(
        self,
        *,
        rpc: RpcClient | None,
        dexscreener: DexScreenerClient | None,
        holders: HoldersClient | None = None,
        whois: WhoisClient | None = None,
        thresholds: ScoreThresholds | None = None,
        window_resolver: Callable[[int, float], list[str]] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._rpc = rpc
        self._dexscreener = dexscreener
        self._holders = holders
        self._whois = whois
        self._thresholds = thresholds or ScoreThresholds()
        self._resolve_windows = window_resolver or (lambda first_seen, now: resolve_windows(first_seen, now=now))
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "AddressChecker":
        if settings.logging_enabled:
            logger.enable("solcheck")
        else:
            logger.disable("solcheck")

        if settings.redis_url:
            redis = get_redis(settings.redis_url)
            counter_store: Any = RedisCounterStore(redis)
            cache_store: Any = RedisCacheStore(redis)
        else:
            counter_store = MemoryCounterStore()
            cache_store = MemoryCacheStore()

        shared = {
            "rate_limiter": RateLimiter(
                settings.rate_limit_per_window,
                enabled=settings.rate_limit_enabled,
                store=counter_store,
            ),
            "cache": ResponseCache(
                settings.cache_ttl_sec, enabled=settings.cache_enabled, store=cache_store
            ),
        }

        rpc = None
        if settings.rpc_url:
            rpc = RpcClient(
                settings.rpc_url,
                signatures_limit=settings.signatures_limit,
                timeout=settings.rpc_timeout_sec,
                **shared,
            )
        holders = None
        if settings.holders_api_key:
            holders = HoldersClient(
                settings.holders_api_url,
                settings.holders_api_key,
                timeout=settings.holders_timeout_sec,
                **shared,
            )
        whois = None
        if settings.whois_api_url:
            whois = WhoisClient(
                settings.whois_api_url,
                settings.whois_api_key,
                timeout=settings.whois_timeout_sec,
                **shared,
            )
        dexscreener = DexScreenerClient(
            settings.dexscreener_api_url, timeout=settings.dexscreener_timeout_sec, **shared
        )

        def window_resolver(first_seen: int, now: float) -> list[str]:
            return resolve_windows(
                first_seen,
                now=now,
                rules=settings.time_period_rules,
                long_windows=settings.time_period_long_windows,
                unknown_windows=settings.time_period_unknown_windows,
            )

        return cls(
            rpc=rpc,
            dexscreener=dexscreener,
            holders=holders,
            whois=whois,
            thresholds=ScoreThresholds(
                low=settings.risk_low_threshold,
                high=settings.risk_high_threshold,
                trust_weight=settings.trust_weight,
            ),
            window_resolver=window_resolver,
        )

    async def close(self) -> None:
        for client in (self._rpc, self._dexscreener, self._holders, self._whois):
            if client is not None:
                await client.close()

    async def __aenter__(self) -> "AddressChecker":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def check(self, address: str) -> CompositeResult:
        """Run one address check.

        Raises:
            FatalConfigurationError: no RPC endpoint configured.
        """
        if self._rpc is None:
            raise FatalConfigurationError("rpc_url is not configured")

        info = validate_address(address)
        log = logger.bind(address=info.normalized)
        if not info.valid:
            log.info(f"[CHECK] Invalid address: {info.message}")
            return CompositeResult(status=STATUS_INVALID, address=info)

        addr = info.normalized
        now = self._clock()
        started = time.monotonic()
        log.debug(f"[CHECK] Fetching sources for {addr[:12]}")

        rpc_resp = await self._fetch(self._rpc, SOURCE_RPC, addr)
        transactions = _normalize(
            normalize_transactions, rpc_resp, lambda: TransactionRecord(error=INVALID_PAYLOAD), now=now
        )
        windows = self._resolve_windows(transactions.first_seen_ts, now)

        holders_resp, market_resp, sol_resp = await asyncio.gather(
            self._fetch(self._holders, SOURCE_HOLDERS, addr),
            self._fetch(self._dexscreener, SOURCE_MARKET, addr, windows=windows),
            self._fetch(self._dexscreener, SOURCE_SOL_PRICE, WSOL_MINT),
        )

        links = _normalize(social_links, market_resp, list)
        website_url = next((url for kind, url in links if kind == "website" and extract_domain(url)), "")
        domain = extract_domain(website_url)
        if domain:
            whois_resp = await self._fetch(self._whois, SOURCE_WHOIS, domain)
        else:
            whois_resp = UpstreamResponse.fail(SOURCE_WHOIS, NO_DOMAIN)

        log.debug(f"[CHECK] Normalizing {addr[:12]}")
        account = _normalize(normalize_account, rpc_resp, lambda: AccountRecord(error=INVALID_PAYLOAD))
        balance = _normalize(
            normalize_balance,
            rpc_resp,
            lambda: BalanceRecord(error=INVALID_PAYLOAD),
            sol_price_usd=_normalize(sol_price_usd, sol_resp, float),
        )
        market = _normalize(normalize_market, market_resp, lambda: MarketRecord(error=INVALID_PAYLOAD))
        distribution = _normalize(
            normalize_holders, holders_resp, lambda: DistributionRecord(error=INVALID_PAYLOAD), windows=windows
        )
        website = None
        if domain:
            website = _normalize(
                normalize_whois,
                whois_resp,
                lambda: WebsiteInfo(url=website_url, domain=domain),
                url=website_url,
                domain=domain,
            )
        social = build_social(links, website)
        if not market_resp.success:
            social = social.model_copy(update={"error": market_resp.error or ""})

        records = NormalizedRecords(
            transactions=transactions,
            account=account,
            market=market,
            distribution=distribution,
            social=social,
        )
        scores = compute_scores(records, self._thresholds, now=now)

        sources = {
            resp.source: "ok" if resp.success else (resp.error or "request_failed")
            for resp in (rpc_resp, holders_resp, market_resp, sol_resp, whois_resp)
        }
        rpc_errors = batch_errors(rpc_resp.payload) if rpc_resp.success else {}
        if rpc_errors:
            sources[SOURCE_RPC] = f"partial: {', '.join(rpc_errors)}"
        for source, record in (
            (SOURCE_RPC, transactions),
            (SOURCE_RPC, account),
            (SOURCE_RPC, balance),
            (SOURCE_HOLDERS, distribution),
            (SOURCE_MARKET, market),
        ):
            if record.error == INVALID_PAYLOAD:
                sources[source] = INVALID_PAYLOAD
        log.bind(sources=sources, overall=scores.overall_score).info(
            f"[CHECK] {addr[:12]} done in {time.monotonic() - started:.2f}s: "
            f"overall={scores.overall_score} risk={scores.risk_level}"
        )

        return CompositeResult(
            status=STATUS_SUCCESS,
            address=info.model_copy(update={"kind": _infer_kind(account)}),
            balance=balance,
            transactions=transactions,
            account=account,
            market=market,
            distribution=distribution,
            social=social,
            scores=scores,
            sources=sources,
        )

    async def _fetch(
        self, client: UpstreamClient | None, source: str, target: str, **params: Any
    ) -> UpstreamResponse:
        """Client fetch that can never fail the batch."""
        if client is None:
            return UpstreamResponse.fail(source, NOT_CONFIGURED, params=params)
        try:
            response = await client.fetch(target, **params)
        except Exception as e:
            # Store outages (Redis) or unexpected payload shapes land here
            logger.opt(exception=e).error(f"[CHECK] {source} fetch crashed for {target[:12]}")
            return UpstreamResponse.fail(source, f"request_failed: {type(e).__name__}", params=params)
        if response.source != source:
            response = replace(response, source=source)
        return response
