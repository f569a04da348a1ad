"""Shared test fixtures for the coin supply screener."""

import pytest

from coinboard.config import TickerSettings, ViewSettings
from coinboard.models import CoinRecord
from coinboard.records import derive_records


def _ticker(
    coin_id: str,
    symbol: str,
    price: str,
    available: str,
    total: str,
    max_supply: str | None,
) -> dict:
    """Raw entry in the CoinMarketCap v1 ticker shape (numbers as strings)."""
    return {
        "id": coin_id,
        "name": coin_id.title(),
        "symbol": symbol,
        "price_usd": price,
        "market_cap_usd": str(float(price) * float(available)),
        "available_supply": available,
        "total_supply": total,
        "max_supply": max_supply,
        "percent_change_1h": "0.12",
        "percent_change_24h": "-1.5",
        "percent_change_7d": "4.25",
    }


# Derived total supply / remaining percent noted per entry.
RAW_TICKERS = [
    _ticker("bitcoin", "BTC", "6500.0", "17000000.0", "17000000.0", "21000000.0"),  # 21M, 19.048
    _ticker("ethereum", "ETH", "450.0", "100000000.0", "100000000.0", None),  # 100M, 0.0
    _ticker("ripple", "XRP", "0.5", "39000000000.0", "99990000000.0", "100000000000.0"),  # 100B, 61.0
    _ticker("bitcoin-cash", "BCH", "700.0", "17200000.0", "17200000.0", "21000000.0"),  # 21M, 18.095
    _ticker("litecoin", "LTC", "55.0", "58000000.0", "58000000.0", "84000000.0"),  # 84M, 30.952
    _ticker("dash", "DASH", "150.0", "8400000.0", "8400000.0", "18900000.0"),  # 18.9M, 55.556
    _ticker("monero", "XMR", "110.0", "16400000.0", "16400000.0", None),  # 16.4M, 0.0
    _ticker("maker", "MKR", "600.0", "650000.0", "1000000.0", None),  # 1M, 35.0
    _ticker("byteball", "GBYTE", "40.0", "645000.0", "1000000.0", "1000000.0"),  # 1M, 35.5
]


@pytest.fixture
def raw_tickers() -> list[dict]:
    """Fresh copy of the sample ticker batch."""
    return [dict(entry) for entry in RAW_TICKERS]


@pytest.fixture
def records(raw_tickers: list[dict]) -> list[CoinRecord]:
    """Records derived from the sample ticker batch, in ingestion order."""
    return derive_records(raw_tickers)


@pytest.fixture
def view_settings() -> ViewSettings:
    """View settings with the default composite thresholds."""
    return ViewSettings(
        low_supply_threshold=10_000_000,
        low_remaining_threshold=26,
        rank_cutoffs=[10, 25, 50, 100, 500],
        default_sort="Lowest Price",
        default_rank=100,
    )


@pytest.fixture
def ticker_settings() -> TickerSettings:
    return TickerSettings(
        base_url="https://ticker.test/v1/ticker/",
        limit=500,
        timeout_seconds=1.0,
        refresh_interval=0,
        skip_invalid=False,
    )
