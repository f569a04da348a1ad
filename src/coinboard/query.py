"""Query orchestration for the main coin table and the related-coins view.

Every main view runs the same two steps in the same order:
  1. filter_by_rank_at_most(records, rank_cutoff)
  2. the sort or composite pipeline selected by the SortMode

Both views are synchronous and pure over the records they are given, so
repeated or interleaved calls against one snapshot always agree.
"""

from collections.abc import Callable, Sequence

from coinboard import transforms
from coinboard.config import ViewSettings
from coinboard.logging import get_logger
from coinboard.models import CoinRecord, SortMode

logger = get_logger(__name__)

_Pipeline = Callable[[Sequence[CoinRecord]], list[CoinRecord]]


class QueryOrchestrator:
    """Builds ordered record sequences for the dashboard.

    Args:
        settings: View thresholds for the composite sort modes.
    """

    def __init__(self, settings: ViewSettings) -> None:
        self._settings = settings
        self._pipelines: dict[SortMode, _Pipeline] = {
            SortMode.PRICE_ASCENDING: transforms.sort_by_price_ascending,
            SortMode.TOTAL_SUPPLY_ASCENDING: transforms.sort_by_total_supply_ascending,
            SortMode.REMAINING_PERCENT_ASCENDING: (
                transforms.sort_by_remaining_percent_ascending
            ),
            SortMode.CHEAPEST_LOW_SUPPLY: self._cheapest_low_supply,
            SortMode.CHEAPEST_LOW_REMAINING: self._cheapest_low_remaining,
        }

    def _cheapest_low_supply(self, records: Sequence[CoinRecord]) -> list[CoinRecord]:
        return transforms.cheapest_low_supply(
            records, self._settings.low_supply_threshold
        )

    def _cheapest_low_remaining(
        self, records: Sequence[CoinRecord]
    ) -> list[CoinRecord]:
        return transforms.cheapest_low_remaining(
            records, self._settings.low_remaining_threshold
        )

    def build_main_view(
        self,
        records: Sequence[CoinRecord],
        sort_mode: SortMode | str,
        rank_cutoff: int,
    ) -> list[CoinRecord]:
        """Rank-limit the records, then order them per sort_mode.

        Args:
            records: A Snapshot or any ordered sequence of records.
            sort_mode: A SortMode or its selector label, e.g. "Lowest Price".
            rank_cutoff: Keep records with rank <= rank_cutoff.

        Returns:
            New list of records in display order.

        Raises:
            ValueError: If sort_mode is not a known label.
        """
        mode = SortMode(sort_mode)
        ranked = transforms.filter_by_rank_at_most(tuple(records), rank_cutoff)
        result = self._pipelines[mode](ranked)
        logger.debug(
            "main_view_built",
            sort_mode=mode.value,
            rank_cutoff=rank_cutoff,
            rows=len(result),
        )
        return result

    def build_related_view(
        self, records: Sequence[CoinRecord], target_name: str
    ) -> tuple[CoinRecord, list[CoinRecord]]:
        """Return the named coin and the coins of comparable total supply.

        Raises:
            NotFound: If target_name matches no record.
        """
        target, related = transforms.related_coins(tuple(records), target_name)
        logger.debug(
            "related_view_built",
            target=target.name,
            total_supply=target.total_supply,
            rows=len(related),
        )
        return target, related
