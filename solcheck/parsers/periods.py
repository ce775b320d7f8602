"""Lookback windows offered for a token, chosen from its age.

A two-hour-old token has no meaningful 24h or 7d history, so holder-growth
and market windows are trimmed to what the token has lived through.
"""

import time

from config.settings import DEFAULT_LONG_WINDOWS, DEFAULT_PERIOD_RULES, DEFAULT_UNKNOWN_AGE_WINDOWS, PeriodRule


def resolve_windows(
    first_seen_ts: int,
    *,
    now: float | None = None,
    rules: list[PeriodRule] | None = None,
    long_windows: list[str] | None = None,
    unknown_windows: list[str] | None = None,
) -> list[str]:
    """Pick the first rule whose ``max_age_hours`` exceeds the token age.

    Rules are checked in order; ages past every rule get ``long_windows``.
    Without a first-activity timestamp the ``unknown_windows`` set is used.
    """
    rules = DEFAULT_PERIOD_RULES if rules is None else rules
    long_windows = DEFAULT_LONG_WINDOWS if long_windows is None else long_windows
    unknown_windows = DEFAULT_UNKNOWN_AGE_WINDOWS if unknown_windows is None else unknown_windows

    if first_seen_ts <= 0:
        return list(unknown_windows)

    now = time.time() if now is None else now
    age_hours = max(now - first_seen_ts, 0) / 3600
    for rule in rules:
        if age_hours < rule.max_age_hours:
            return list(rule.windows)
    return list(long_windows)
