"""Trust / activity / overall scoring for a checked address.

Pure function of the normalized records: no I/O, deterministic for a
given ``now``.

Scoring breakdown:
- Trust: 100 minus a fixed penalty per rug-pull warning sign found.
  Signs are only evaluated when the underlying data is available, so
  missing data never counts against an address.
- Activity: 0-60 pts from transaction count + 0-40 pts from holder count.
- Overall: weighted mean of trust and activity.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from solcheck.models.records import (
    NOT_FOUND,
    UNKNOWN,
    AccountRecord,
    DistributionRecord,
    MarketRecord,
    SocialRecord,
    TransactionRecord,
)
from solcheck.models.result import RISK_HIGH, RISK_LOW, RISK_MEDIUM, Scores

MINT_AUTHORITY_PENALTY = 20
FREEZE_AUTHORITY_PENALTY = 15
CONCENTRATION_PENALTY = 15
THIN_LIQUIDITY_PENALTY = 10
NEW_DOMAIN_PENALTY = 10
UNKNOWN_REGISTRAR_PENALTY = 5
NEW_ACCOUNT_PENALTY = 10
EXECUTABLE_PENALTY = 10

TOP10_CONCENTRATION_LIMIT_PCT = 50.0
MIN_LIQUIDITY_USD = 10_000.0
NEW_DOMAIN_DAYS = 30
NEW_ACCOUNT_DAYS = 7

MAX_TX_POINTS = 60
MAX_HOLDER_POINTS = 40
HOLDERS_PER_POINT = 25

RECOMMENDATIONS = {
    RISK_LOW: "Looks good - low risk. Always verify transaction details before interacting.",
    RISK_MEDIUM: "Moderate risk - verify token details and links before interacting.",
    RISK_HIGH: "High risk - proceed with extreme caution or avoid this address.",
}


@dataclass(frozen=True)
class ScoreThresholds:
    low: int = 70  # overall >= low → Low risk
    high: int = 40  # overall <= high → High risk
    trust_weight: float = 0.6


@dataclass
class NormalizedRecords:
    transactions: TransactionRecord = field(default_factory=TransactionRecord)
    account: AccountRecord = field(default_factory=AccountRecord)
    market: MarketRecord = field(default_factory=MarketRecord)
    distribution: DistributionRecord = field(default_factory=DistributionRecord)
    social: SocialRecord = field(default_factory=SocialRecord)


def _authority_active(value: str) -> bool:
    return value not in (NOT_FOUND, UNKNOWN)


def _domain_age_days(registration_date: str, now: float) -> int | None:
    try:
        created = datetime.strptime(registration_date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return None
    return max(int((now - created.timestamp()) // 86400), 0)


def compute_trust(records: NormalizedRecords, now: float) -> tuple[int, list[str], list[str]]:
    """Return ``(trust_score, warning_signs, safe_indicators)``."""
    penalty = 0
    warnings: list[str] = []
    safe: list[str] = []

    account = records.account
    if account.available and account.is_token:
        if _authority_active(account.mint_authority):
            penalty += MINT_AUTHORITY_PENALTY
            warnings.append("Mint authority is active")
        else:
            safe.append("Mint authority renounced")
        if _authority_active(account.freeze_authority):
            penalty += FREEZE_AUTHORITY_PENALTY
            warnings.append("Freeze authority is active")
        else:
            safe.append("Freeze authority disabled")
    if account.available and account.executable:
        penalty += EXECUTABLE_PENALTY
        warnings.append("Executable program account")

    distribution = records.distribution
    if distribution.available and distribution.holder_count > 0:
        top10 = distribution.concentration_by_tier.get("top10", 0.0)
        if top10 > TOP10_CONCENTRATION_LIMIT_PCT:
            penalty += CONCENTRATION_PENALTY
            warnings.append(f"Top 10 holders own {top10:.1f}% of supply")
        else:
            safe.append("Holder distribution is not concentrated")

    market = records.market
    if market.available and market.pair_address != UNKNOWN:
        if market.liquidity_usd < MIN_LIQUIDITY_USD:
            penalty += THIN_LIQUIDITY_PENALTY
            warnings.append(f"Low liquidity ({market.liquidity_formatted})")
        else:
            safe.append(f"Liquidity of {market.liquidity_formatted}")

    website = records.social.website
    domain_age = _domain_age_days(website.registration_date, now)
    if domain_age is not None:
        if domain_age < NEW_DOMAIN_DAYS:
            penalty += NEW_DOMAIN_PENALTY
            warnings.append(f"Website domain registered {domain_age} days ago")
        else:
            safe.append("Established website domain")
    if website.registrar_country.startswith("Registrar:"):
        penalty += UNKNOWN_REGISTRAR_PENALTY
        warnings.append("Domain registrar could not be located")

    transactions = records.transactions
    if transactions.available and transactions.first_seen_ts > 0:
        if transactions.account_age_days < NEW_ACCOUNT_DAYS:
            penalty += NEW_ACCOUNT_PENALTY
            warnings.append(f"Very new account (less than {NEW_ACCOUNT_DAYS} days)")
        else:
            safe.append("Account has history")

    return max(0, min(100, 100 - penalty)), warnings, safe


def compute_activity(records: NormalizedRecords) -> int:
    tx_points = min(MAX_TX_POINTS, 2 * max(records.transactions.total_count, 0))
    holder_points = min(MAX_HOLDER_POINTS, max(records.distribution.holder_count, 0) // HOLDERS_PER_POINT)
    return min(100, tx_points + holder_points)


def combine(trust: int, activity: int, trust_weight: float) -> int:
    """Weighted mean, always inside [min(trust, activity), max(trust, activity)]."""
    weight = max(0.0, min(1.0, trust_weight))
    overall = round(trust * weight + activity * (1 - weight))
    return max(min(trust, activity), min(max(trust, activity), overall))


def risk_level(overall: int, thresholds: ScoreThresholds) -> str:
    if overall >= thresholds.low:
        return RISK_LOW
    if overall <= thresholds.high:
        return RISK_HIGH
    return RISK_MEDIUM


def compute_scores(
    records: NormalizedRecords,
    thresholds: ScoreThresholds | None = None,
    *,
    now: float | None = None,
) -> Scores:
    thresholds = thresholds or ScoreThresholds()
    now = time.time() if now is None else now

    trust, warnings, safe = compute_trust(records, now)
    activity = compute_activity(records)
    overall = combine(trust, activity, thresholds.trust_weight)
    level = risk_level(overall, thresholds)

    return Scores(
        trust_score=trust,
        activity_score=activity,
        overall_score=overall,
        risk_level=level,
        recommendation=RECOMMENDATIONS[level],
        warning_signs=warnings,
        safe_indicators=safe,
    )
