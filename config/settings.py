from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class PeriodRule(BaseModel):
    """Lookback windows offered to tokens younger than ``max_age_hours``."""

    max_age_hours: float
    windows: list[str]


DEFAULT_PERIOD_RULES: list[PeriodRule] = [
    PeriodRule(max_age_hours=1, windows=["5m"]),
    PeriodRule(max_age_hours=6, windows=["5m", "1h"]),
    PeriodRule(max_age_hours=24, windows=["5m", "1h", "6h"]),
    PeriodRule(max_age_hours=72, windows=["5m", "1h", "6h", "24h"]),
    PeriodRule(max_age_hours=168, windows=["5m", "1h", "6h", "24h", "3d"]),
    PeriodRule(max_age_hours=720, windows=["5m", "1h", "6h", "24h", "3d", "7d"]),
]
DEFAULT_LONG_WINDOWS = ["5m", "1h", "6h", "24h", "3d", "7d", "30d"]
DEFAULT_UNKNOWN_AGE_WINDOWS = ["5m", "1h", "6h", "24h"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Solana RPC node (required)
    rpc_url: str = ""
    rpc_timeout_sec: float = 15.0
    signatures_limit: int = 1000

    # Holder indexer (Moralis Solana gateway), skipped when key is empty
    holders_api_url: str = "https://solana-gateway.moralis.io"
    holders_api_key: str = ""
    holders_timeout_sec: float = 30.0  # indexer lags behind chain tip

    # DexScreener (no auth)
    dexscreener_api_url: str = "https://api.dexscreener.com"
    dexscreener_timeout_sec: float = 15.0

    # WHOIS JSON service, skipped when url is empty
    whois_api_url: str = ""
    whois_api_key: str = ""
    whois_timeout_sec: float = 10.0

    # Rate limiting (fixed 60s window per upstream host)
    rate_limit_enabled: bool = True
    rate_limit_per_window: int = 100

    # Response cache
    cache_enabled: bool = True
    cache_ttl_sec: int = 300

    # Shared store for cache + rate counters; empty = in-process
    redis_url: str = ""

    # Logging
    logging_enabled: bool = True
    log_level: str = "INFO"
    json_logs: bool = False

    # Scoring
    risk_low_threshold: int = 70  # overall >= this → Low
    risk_high_threshold: int = 40  # overall <= this → High
    trust_weight: float = 0.6

    # Holder growth / market windows by token age
    time_period_rules: list[PeriodRule] = DEFAULT_PERIOD_RULES
    time_period_long_windows: list[str] = DEFAULT_LONG_WINDOWS
    time_period_unknown_windows: list[str] = DEFAULT_UNKNOWN_AGE_WINDOWS
