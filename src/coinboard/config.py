"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from coinboard.models import SortMode


class TickerSettings(BaseSettings):
    """Remote ticker API and ingestion parameters."""

    model_config = SettingsConfigDict(env_prefix="TICKER_")

    base_url: str = "https://api.coinmarketcap.com/v1/ticker/"
    limit: int = 500  # top-N snapshot size
    timeout_seconds: float = 10.0
    refresh_interval: int = 300  # seconds between re-ingestions, 0 disables
    skip_invalid: bool = False  # False aborts the whole batch on a bad entry


class ViewSettings(BaseSettings):
    """Main table and composite view parameters.

    The two thresholds drive the "cheapest + low supply" and
    "cheapest + low remaining" views. All fields configurable via the
    VIEW_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="VIEW_")

    low_supply_threshold: float = 10_000_000
    low_remaining_threshold: float = 26  # percent
    rank_cutoffs: list[int] = [10, 25, 50, 100, 500]
    default_sort: SortMode = SortMode.PRICE_ASCENDING
    default_rank: int = 100


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    ticker: TickerSettings = TickerSettings()
    view: ViewSettings = ViewSettings()
    dashboard: DashboardSettings = DashboardSettings()
