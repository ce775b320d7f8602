"""Normalized per-domain records.

Every field has an explicit sentinel default so the presentation layer only
ever compares against ``UNKNOWN`` / ``NOT_FOUND`` / zero, never ``None``.
``available`` is True only for records built from a successful upstream
response; ``error`` holds the soft-failure kind otherwise.
"""

from pydantic import BaseModel, Field

UNKNOWN = "Unknown"
NOT_FOUND = "Not found"

CONCENTRATION_TIERS = ("top1", "top5", "top10", "top20", "top25", "top50", "top100", "top250", "top500")
HOLDER_CATEGORIES = ("whale", "shark", "dolphin", "fish", "octopus", "crab", "shrimp")


def _zero_map(keys: tuple[str, ...]) -> dict[str, float]:
    return {k: 0.0 for k in keys}


class _Record(BaseModel):
    available: bool = False
    error: str = ""


class TokenHolding(BaseModel):
    mint: str = UNKNOWN
    amount: float = 0.0
    decimals: int = 0


class BalanceRecord(_Record):
    sol_balance: float = 0.0
    sol_balance_usd: float = 0.0
    sol_balance_formatted: str = "0.0000 SOL"
    token_count: int = 0
    nft_count: int = 0
    tokens: list[TokenHolding] = []


class RecentTransaction(BaseModel):
    signature: str = UNKNOWN
    timestamp: int = 0
    date: str = UNKNOWN
    status: str = UNKNOWN  # success | failed


class TransactionRecord(_Record):
    total_count: int = 0
    first_seen_date: str = UNKNOWN
    last_seen_date: str = UNKNOWN
    first_seen_ts: int = 0
    last_seen_ts: int = 0
    account_age_days: int = 0
    recent_list: list[RecentTransaction] = []


class AccountRecord(_Record):
    exists: bool = False
    owner: str = UNKNOWN
    executable: bool = False
    data_size: int = 0
    rent_epoch: int = 0
    lamports: int = 0
    account_type: str = UNKNOWN
    program_name: str = UNKNOWN
    is_token: bool = False
    decimals: int = 0
    supply: float = 0.0
    mint_authority: str = UNKNOWN  # NOT_FOUND when renounced
    freeze_authority: str = UNKNOWN  # NOT_FOUND when renounced


class BuysSells(BaseModel):
    buys: int = 0
    sells: int = 0


class MarketRecord(_Record):
    pair_address: str = UNKNOWN
    dex_id: str = UNKNOWN
    price_usd: float = 0.0
    price_native: float = 0.0
    liquidity_usd: float = 0.0
    market_cap: float = 0.0
    fdv: float = 0.0
    pair_created_at: int = 0  # unix seconds
    windows: list[str] = []
    volume_by_window: dict[str, float] = {}
    price_change_by_window: dict[str, float] = {}
    buys_sells_by_window: dict[str, BuysSells] = {}
    volume_24h_formatted: str = "$0"
    liquidity_formatted: str = "$0"
    market_cap_formatted: str = "$0"


class HolderGrowth(BaseModel):
    change: int = 0
    change_percent: float = 0.0


class DistributionRecord(_Record):
    holder_count: int = 0
    concentration_by_tier: dict[str, float] = Field(
        default_factory=lambda: _zero_map(CONCENTRATION_TIERS)
    )
    category_counts: dict[str, int] = Field(
        default_factory=lambda: {k: 0 for k in HOLDER_CATEGORIES}
    )
    growth_by_window: dict[str, HolderGrowth] = {}


class WebsiteInfo(BaseModel):
    url: str = NOT_FOUND
    domain: str = NOT_FOUND
    registration_date: str = UNKNOWN
    registration_country: str = UNKNOWN
    registrar: str = UNKNOWN
    registrar_country: str = UNKNOWN


class TwitterInfo(BaseModel):
    handle: str = NOT_FOUND
    url: str = NOT_FOUND
    verified: bool = False


class TelegramInfo(BaseModel):
    channel: str = NOT_FOUND
    url: str = NOT_FOUND


class DiscordInfo(BaseModel):
    invite: str = NOT_FOUND
    server_name: str = UNKNOWN
    url: str = NOT_FOUND


class GithubInfo(BaseModel):
    repo: str = NOT_FOUND
    org: str = NOT_FOUND
    url: str = NOT_FOUND


class SocialRecord(_Record):
    website: WebsiteInfo = Field(default_factory=WebsiteInfo)
    twitter: TwitterInfo = Field(default_factory=TwitterInfo)
    telegram: TelegramInfo = Field(default_factory=TelegramInfo)
    discord: DiscordInfo = Field(default_factory=DiscordInfo)
    github: GithubInfo = Field(default_factory=GithubInfo)

    @property
    def links_found(self) -> int:
        return sum(
            value != NOT_FOUND
            for value in (
                self.website.url,
                self.twitter.handle,
                self.telegram.channel,
                self.discord.invite,
                self.github.org,
            )
        )
