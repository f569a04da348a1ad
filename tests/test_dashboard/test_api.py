"""Tests for the dashboard JSON API and refresh action.

The app is built without the main.py lifespan; collaborators are set on
app.state directly and the ticker client is mocked.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coinboard.config import ViewSettings
from coinboard.dashboard.app import create_dashboard_app
from coinboard.exceptions import TickerFetchError
from coinboard.market_data.snapshot_service import SnapshotService
from coinboard.query import QueryOrchestrator
from coinboard.snapshot import SnapshotStore


@pytest.fixture
def mock_ticker_client(raw_tickers: list[dict]) -> AsyncMock:
    client = AsyncMock()
    client.fetch_tickers = AsyncMock(return_value=raw_tickers)
    return client


@pytest.fixture
def app(mock_ticker_client: AsyncMock, view_settings: ViewSettings) -> FastAPI:
    app = create_dashboard_app()
    store = SnapshotStore()
    app.state.snapshot_store = store
    app.state.snapshot_service = SnapshotService(
        mock_ticker_client, store, refresh_interval=0
    )
    app.state.query = QueryOrchestrator(view_settings)
    app.state.view_settings = view_settings
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def loaded_client(client: TestClient, app: FastAPI, records) -> TestClient:
    app.state.snapshot_store.publish(records)
    return client


class TestCoins:
    def test_503_before_snapshot(self, client: TestClient) -> None:
        response = client.get("/api/coins")
        assert response.status_code == 503

    def test_defaults(self, loaded_client: TestClient) -> None:
        response = loaded_client.get("/api/coins")
        assert response.status_code == 200
        body = response.json()
        assert body["version"] == 1
        assert body["sort"] == "Lowest Price"
        assert body["rank"] == 100
        assert body["count"] == 9
        assert body["coins"][0]["name"] == "RIPPLE"

    def test_sort_and_rank(self, loaded_client: TestClient) -> None:
        response = loaded_client.get(
            "/api/coins",
            params={"sort": "Low Price & Low Total Supply", "rank": 500},
        )
        body = response.json()
        assert [c["name"] for c in body["coins"]] == ["BYTEBALL", "MAKER"]

    def test_rank_cutoff(self, loaded_client: TestClient) -> None:
        response = loaded_client.get(
            "/api/coins", params={"sort": "Lowest Price", "rank": 2}
        )
        body = response.json()
        assert [c["symbol"] for c in body["coins"]] == ["XRP", "ETH", "BTC"]

    def test_row_fields(self, loaded_client: TestClient) -> None:
        response = loaded_client.get("/api/coins", params={"rank": 0})
        coin = response.json()["coins"][0]
        assert coin["name"] == "BITCOIN"
        assert coin["total_supply"] == 21_000_000
        assert coin["remaining_supply"] == 4_000_000
        assert coin["remaining_percent"] == 19.048

    def test_unknown_sort_is_422(self, loaded_client: TestClient) -> None:
        response = loaded_client.get("/api/coins", params={"sort": "Highest Price"})
        assert response.status_code == 422

    def test_negative_rank_is_422(self, loaded_client: TestClient) -> None:
        response = loaded_client.get("/api/coins", params={"rank": -1})
        assert response.status_code == 422


class TestRelated:
    def test_related(self, loaded_client: TestClient) -> None:
        response = loaded_client.get("/api/coins/BITCOIN/related")
        assert response.status_code == 200
        body = response.json()
        assert body["coin"]["symbol"] == "BTC"
        assert [c["name"] for c in body["related"]] == [
            "DASH",
            "BITCOIN",
            "BITCOIN-CASH",
        ]

    def test_not_found(self, loaded_client: TestClient) -> None:
        response = loaded_client.get("/api/coins/DOGECOIN/related")
        assert response.status_code == 404
        assert "DOGECOIN" in response.json()["error"]

    def test_503_before_snapshot(self, client: TestClient) -> None:
        response = client.get("/api/coins/BITCOIN/related")
        assert response.status_code == 503


class TestOptionsAndStatus:
    def test_options(self, client: TestClient) -> None:
        body = client.get("/api/options").json()
        assert body["sort_modes"][0] == "Lowest Price"
        assert len(body["sort_modes"]) == 5
        assert body["rank_cutoffs"] == [10, 25, 50, 100, 500]

    def test_status(self, client: TestClient) -> None:
        body = client.get("/api/status").json()
        assert body["version"] is None
        assert body["records"] == 0


class TestRefreshAction:
    def test_refresh_publishes(self, client: TestClient) -> None:
        response = client.post("/actions/refresh")
        assert response.status_code == 200
        assert response.json()["version"] == 1
        assert client.get("/api/coins").json()["count"] == 9

    def test_refresh_failure_is_502(
        self, client: TestClient, mock_ticker_client: AsyncMock
    ) -> None:
        mock_ticker_client.fetch_tickers.side_effect = TickerFetchError("down")
        response = client.post("/actions/refresh")
        assert response.status_code == 502
        assert response.json()["error"] == "down"

    def test_non_finite_value_rejected_and_table_still_served(
        self,
        client: TestClient,
        mock_ticker_client: AsyncMock,
        raw_tickers: list[dict],
    ) -> None:
        assert client.post("/actions/refresh").status_code == 200
        raw_tickers[0]["percent_change_1h"] = "nan"
        mock_ticker_client.fetch_tickers.return_value = raw_tickers

        response = client.post("/actions/refresh")
        assert response.status_code == 502
        assert "percent_change_1h" in response.json()["error"]

        coins = client.get("/api/coins")
        assert coins.status_code == 200
        assert coins.json()["version"] == 1

    def test_non_mapping_entry_is_502(
        self, client: TestClient, mock_ticker_client: AsyncMock
    ) -> None:
        mock_ticker_client.fetch_tickers.return_value = [None]
        response = client.post("/actions/refresh")
        assert response.status_code == 502
        assert response.json()["version"] is None
