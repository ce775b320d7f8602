from solcheck.models.records import (
    CONCENTRATION_TIERS,
    HOLDER_CATEGORIES,
    DistributionRecord,
    HolderGrowth,
)
from solcheck.models.upstream import UpstreamResponse
from solcheck.parsers.extract import dig, safe_float, safe_int

# Indexer uses its own labels for some windows and plural category names
_WINDOW_KEYS = {"5m": "5min"}
_CATEGORY_KEYS = {
    "whale": "whales",
    "shark": "sharks",
    "dolphin": "dolphins",
    "fish": "fish",
    "octopus": "octopus",
    "crab": "crabs",
    "shrimp": "shrimps",
}


def normalize_holders(
    response: UpstreamResponse, windows: list[str] | None = None
) -> DistributionRecord:
    """Holder count, top-N concentration, size categories and growth.

    Growth is limited to ``windows``; without them every window the
    indexer sent is kept.
    """
    if not response.success:
        return DistributionRecord(error=response.error or "")

    payload = response.payload
    supply = dig(payload, "holderSupply", default={})
    concentration = {
        tier: round(safe_float(dig(supply, tier, "supplyPercent")), 2) for tier in CONCENTRATION_TIERS
    }

    distribution = dig(payload, "holderDistribution", default={})
    categories = {
        name: safe_int(dig(distribution, _CATEGORY_KEYS[name], default=dig(distribution, name)))
        for name in HOLDER_CATEGORIES
    }

    changes = dig(payload, "holderChange", default={})
    if windows is None:
        reverse = {v: k for k, v in _WINDOW_KEYS.items()}
        windows = [reverse.get(key, key) for key in changes] if isinstance(changes, dict) else []

    growth: dict[str, HolderGrowth] = {}
    for window in windows:
        entry = dig(changes, _WINDOW_KEYS.get(window, window), default={})
        growth[window] = HolderGrowth(
            change=safe_int(dig(entry, "change")),
            change_percent=round(safe_float(dig(entry, "changePercent")), 2),
        )

    return DistributionRecord(
        available=True,
        holder_count=safe_int(dig(payload, "totalHolders")),
        concentration_by_tier=concentration,
        category_counts=categories,
        growth_by_window=growth,
    )
