"""Snapshot ingestion -- fetch raw tickers, derive records, publish.

Each refresh is all-or-nothing: a fetch failure or (by default) an invalid
entry leaves the previously published snapshot in place. The optional
background loop re-ingests on a fixed interval; there are no incremental
updates.
"""

import asyncio
import time

from coinboard.exceptions import InvalidRecord, TickerFetchError
from coinboard.logging import get_logger, refresh_context
from coinboard.market_data.ticker_client import TickerClient
from coinboard.records import derive_records
from coinboard.snapshot import Snapshot, SnapshotStore

logger = get_logger(__name__)


class SnapshotService:
    """Runs fetch -> derive -> publish into a SnapshotStore.

    Args:
        ticker_client: Source of raw ticker batches.
        store: Store that owns the published snapshot.
        refresh_interval: Seconds between background refreshes (0 disables).
        skip_invalid: Drop invalid entries instead of aborting the batch.
    """

    def __init__(
        self,
        ticker_client: TickerClient,
        store: SnapshotStore,
        refresh_interval: float = 300.0,
        skip_invalid: bool = False,
    ) -> None:
        self._ticker_client = ticker_client
        self._store = store
        self._refresh_interval = refresh_interval
        self._skip_invalid = skip_invalid
        self._lock = asyncio.Lock()
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        self.last_error: str | None = None
        self.last_refresh_at: float | None = None

    @property
    def store(self) -> SnapshotStore:
        return self._store

    async def refresh(self, trigger: str = "dashboard") -> Snapshot:
        """Ingest one full batch and publish it as the new snapshot.

        Refreshes are serialized; a caller arriving while one is in flight
        waits and then runs its own.

        Args:
            trigger: What started this refresh, bound to its log events.

        Raises:
            TickerFetchError: If the ticker API fails.
            InvalidRecord: If an entry is invalid and skip_invalid is off.
        """
        async with self._lock:
            with refresh_context(trigger):
                return await self._refresh_locked()

    async def _refresh_locked(self) -> Snapshot:
        started = time.monotonic()
        try:
            raw_entries = await self._ticker_client.fetch_tickers()
            records = derive_records(raw_entries, skip_invalid=self._skip_invalid)
        except (TickerFetchError, InvalidRecord) as e:
            self.last_error = str(e)
            logger.error("snapshot_refresh_failed", error=str(e))
            raise

        snapshot = self._store.publish(records)
        self.last_error = None
        self.last_refresh_at = time.time()
        logger.info(
            "snapshot_refreshed",
            version=snapshot.version,
            raw=len(raw_entries),
            records=len(snapshot),
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return snapshot

    async def start(self) -> None:
        """Begin periodic refreshes in the background."""
        if self._running:
            logger.warning("snapshot_service_already_running")
            return
        if self._refresh_interval <= 0:
            logger.info("snapshot_refresh_loop_disabled")
            return
        self._running = True
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info("snapshot_service_started", refresh_interval=self._refresh_interval)

    async def stop(self) -> None:
        """Stop the background refresh loop."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("snapshot_service_stopped")

    async def _refresh_loop(self) -> None:
        """Re-ingest every refresh_interval seconds until stopped."""
        while self._running:
            await asyncio.sleep(self._refresh_interval)
            try:
                await self.refresh(trigger="interval")
            except asyncio.CancelledError:
                raise
            except (TickerFetchError, InvalidRecord):
                # already logged; the previous snapshot stays published
                continue
            except Exception as e:
                self.last_error = str(e)
                logger.warning("snapshot_refresh_loop_error", exc_info=True)

    def get_status(self) -> dict:
        """Snapshot and refresh status for the dashboard."""
        snapshot = self._store.current
        return {
            "version": snapshot.version if snapshot is not None else None,
            "records": len(snapshot) if snapshot is not None else 0,
            "fetched_at": snapshot.fetched_at if snapshot is not None else None,
            "last_refresh_at": self.last_refresh_at,
            "last_error": self.last_error,
            "refresh_interval": self._refresh_interval,
        }
