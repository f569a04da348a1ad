"""Snapshot ownership for the current set of coin records.

A Snapshot is immutable. SnapshotStore holds the currently published one and
replaces it wholesale on every ingestion; readers that already hold a
snapshot keep seeing exactly the records they started with.
"""

import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from coinboard.logging import get_logger
from coinboard.models import CoinRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """All records derived from one ingestion batch, in ingestion order."""

    records: tuple[CoinRecord, ...]
    version: int
    fetched_at: float = field(default_factory=time.time)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[CoinRecord]:
        return iter(self.records)


class SnapshotStore:
    """Owner of the currently published snapshot.

    Constructed once at startup and handed to whoever needs to read or
    publish. There is no module-level instance.
    """

    def __init__(self) -> None:
        self._current: Snapshot | None = None
        self._version = 0

    @property
    def current(self) -> Snapshot | None:
        """The published snapshot, or None before the first ingestion."""
        return self._current

    def publish(self, records: Iterable[CoinRecord]) -> Snapshot:
        """Replace the current snapshot with a new one built from records."""
        self._version += 1
        snapshot = Snapshot(records=tuple(records), version=self._version)
        self._current = snapshot
        logger.info(
            "snapshot_published",
            version=snapshot.version,
            records=len(snapshot),
        )
        return snapshot
