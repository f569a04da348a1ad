"""Ticker API client for the top-N coin snapshot.

Fetches raw ticker entries in the CoinMarketCap v1 shape:

    [{"id": "bitcoin", "symbol": "BTC", "price_usd": "6523.1",
      "market_cap_usd": "...", "available_supply": "...",
      "total_supply": "...", "max_supply": "21000000.0",
      "percent_change_1h": "...", "percent_change_24h": "...",
      "percent_change_7d": "..."}, ...]

Entries are returned untouched and in API order; derivation happens in
coinboard.records.
"""

from typing import Any

import httpx

from coinboard.config import TickerSettings
from coinboard.exceptions import TickerFetchError
from coinboard.logging import get_logger

logger = get_logger(__name__)


class TickerClient:
    """Async HTTP client for the remote ticker endpoint.

    Args:
        settings: Endpoint URL, snapshot size and timeout.
        client: Optional shared httpx.AsyncClient. When omitted the client
            creates and closes its own.
    """

    def __init__(
        self, settings: TickerSettings, client: httpx.AsyncClient | None = None
    ) -> None:
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                headers={"Accept": "application/json", "User-Agent": "coinboard/0.1"},
            )
        return self._client

    async def fetch_tickers(self) -> list[dict[str, Any]]:
        """Fetch the raw ticker batch.

        Raises:
            TickerFetchError: On transport failure, a non-2xx response, or a
                payload that is not a JSON array.
        """
        client = await self._get_client()
        params = {"limit": self._settings.limit}
        try:
            response = await client.get(self._settings.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "ticker_fetch_error",
                url=self._settings.base_url,
                status=e.response.status_code,
            )
            raise TickerFetchError(
                f"ticker API returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("ticker_fetch_error", url=self._settings.base_url, error=str(e))
            raise TickerFetchError(f"ticker API request failed: {e}") from e

        if not isinstance(data, list):
            raise TickerFetchError(
                f"expected a JSON array of tickers, got {type(data).__name__}"
            )

        logger.info("tickers_fetched", count=len(data), limit=self._settings.limit)
        return data

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
