"""Shared data models for the coin supply screener.

Supply and price fields are plain floats: the ticker API publishes them as
decimal strings and the screener only sorts and compares them.
"""

from dataclasses import dataclass
from enum import Enum


class SortMode(str, Enum):
    """Main table ordering, valued by the label shown in the sort selector."""

    PRICE_ASCENDING = "Lowest Price"
    TOTAL_SUPPLY_ASCENDING = "Lowest Total Supply"
    REMAINING_PERCENT_ASCENDING = "Lowest Remaining Supply"
    CHEAPEST_LOW_SUPPLY = "Low Price & Low Total Supply"
    CHEAPEST_LOW_REMAINING = "Low Price & Low Remaining Supply"


@dataclass(frozen=True)
class CoinRecord:
    """One coin's state within a snapshot.

    remaining_supply and remaining_percent are derived from the raw supply
    fields by coinboard.records.derive_record and never supplied directly.
    """

    rank: int  # 0-based ingestion order
    symbol: str
    name: str  # ticker id, uppercased
    circulating_supply: float
    total_supply: float  # max supply when published, else total supply
    remaining_supply: float  # may be negative
    remaining_percent: float  # 3 decimal places
    price_usd: float
    market_cap_usd: float
    change_percent_1h: float
    change_percent_24h: float
    change_percent_7d: float

    def to_dict(self) -> dict:
        """Serialize to a JSON-safe dict."""
        return {
            "rank": self.rank,
            "symbol": self.symbol,
            "name": self.name,
            "circulating_supply": self.circulating_supply,
            "total_supply": self.total_supply,
            "remaining_supply": self.remaining_supply,
            "remaining_percent": self.remaining_percent,
            "price_usd": self.price_usd,
            "market_cap_usd": self.market_cap_usd,
            "change_percent_1h": self.change_percent_1h,
            "change_percent_24h": self.change_percent_24h,
            "change_percent_7d": self.change_percent_7d,
        }
