from solcheck.models.address import AddressInfo
from solcheck.models.records import (
    NOT_FOUND,
    UNKNOWN,
    AccountRecord,
    BalanceRecord,
    DistributionRecord,
    MarketRecord,
    SocialRecord,
    TransactionRecord,
)
from solcheck.models.result import CompositeResult, Scores
from solcheck.models.upstream import UpstreamResponse

__all__ = [
    "UNKNOWN",
    "NOT_FOUND",
    "AddressInfo",
    "UpstreamResponse",
    "BalanceRecord",
    "TransactionRecord",
    "AccountRecord",
    "MarketRecord",
    "DistributionRecord",
    "SocialRecord",
    "Scores",
    "CompositeResult",
]
