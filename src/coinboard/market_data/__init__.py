"""Market data layer -- ticker fetching and snapshot ingestion."""

from coinboard.market_data.snapshot_service import SnapshotService
from coinboard.market_data.ticker_client import TickerClient

__all__ = ["SnapshotService", "TickerClient"]
