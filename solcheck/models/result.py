from datetime import datetime, timezone

from pydantic import BaseModel, Field

from solcheck.models.address import AddressInfo
from solcheck.models.records import (
    AccountRecord,
    BalanceRecord,
    DistributionRecord,
    MarketRecord,
    SocialRecord,
    TransactionRecord,
)

STATUS_SUCCESS = "success"
STATUS_INVALID = "invalid"

RISK_LOW = "Low"
RISK_MEDIUM = "Medium"
RISK_HIGH = "High"


class Scores(BaseModel):
    trust_score: int = 0
    activity_score: int = 0
    overall_score: int = 0
    risk_level: str = RISK_HIGH
    recommendation: str = ""
    warning_signs: list[str] = []
    safe_indicators: list[str] = []


class CompositeResult(BaseModel):
    """Everything the presentation layer needs for one address."""

    status: str
    address: AddressInfo
    balance: BalanceRecord = Field(default_factory=BalanceRecord)
    transactions: TransactionRecord = Field(default_factory=TransactionRecord)
    account: AccountRecord = Field(default_factory=AccountRecord)
    market: MarketRecord = Field(default_factory=MarketRecord)
    distribution: DistributionRecord = Field(default_factory=DistributionRecord)
    social: SocialRecord = Field(default_factory=SocialRecord)
    scores: Scores = Field(default_factory=Scores)
    sources: dict[str, str] = {}  # source → "ok" | soft-failure kind
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_valid(self) -> bool:
        return self.status == STATUS_SUCCESS
