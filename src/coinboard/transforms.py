"""Pure sort, filter and supply-band operations over coin records.

Every function takes an ordered sequence of records and returns a new list;
inputs are never reordered in place. Sorts are stable, so the composite
pipelines below depend on the order their steps run in:

  cheapest_low_supply:    total supply asc -> total supply <= N -> price asc
  cheapest_low_remaining: remaining % asc  -> remaining % <= N  -> price asc
  related_coins:          find by name -> supply band -> filter -> total supply asc
"""

from collections.abc import Sequence

from coinboard.exceptions import NotFound
from coinboard.models import CoinRecord

DEFAULT_LOW_SUPPLY_THRESHOLD = 10_000_000
DEFAULT_LOW_REMAINING_THRESHOLD = 26

# (upper bound on total supply, band half-width), ascending by bound
SUPPLY_BAND_STEPS: tuple[tuple[float, float], ...] = (
    (16_000_000, 1_000_000),
    (60_000_000, 3_000_000),
    (100_000_000, 20_000_000),
    (500_000_000, 75_000_000),
    (1_000_000_000, 100_000_000),
)
SUPPLY_BAND_FALLBACK = 500_000_000


# ──────────────────────────────────────────────
# Sorting
# ──────────────────────────────────────────────


def sort_by_price_ascending(records: Sequence[CoinRecord]) -> list[CoinRecord]:
    return sorted(records, key=lambda r: r.price_usd)


def sort_by_remaining_percent_ascending(
    records: Sequence[CoinRecord],
) -> list[CoinRecord]:
    return sorted(records, key=lambda r: r.remaining_percent)


def sort_by_total_supply_ascending(records: Sequence[CoinRecord]) -> list[CoinRecord]:
    return sorted(records, key=lambda r: r.total_supply)


# ──────────────────────────────────────────────
# Filtering
# ──────────────────────────────────────────────


def filter_by_rank_at_most(
    records: Sequence[CoinRecord], rank_cutoff: int
) -> list[CoinRecord]:
    """Keep records whose 0-based rank is <= rank_cutoff."""
    return [r for r in records if r.rank <= rank_cutoff]


def filter_total_supply_at_most(
    records: Sequence[CoinRecord],
    threshold: float = DEFAULT_LOW_SUPPLY_THRESHOLD,
) -> list[CoinRecord]:
    return [r for r in records if r.total_supply <= threshold]


def filter_remaining_percent_at_most(
    records: Sequence[CoinRecord],
    threshold: float = DEFAULT_LOW_REMAINING_THRESHOLD,
) -> list[CoinRecord]:
    return [r for r in records if r.remaining_percent <= threshold]


def filter_by_supply_band(
    records: Sequence[CoinRecord], minimum: float, maximum: float
) -> list[CoinRecord]:
    """Keep records with minimum <= total_supply <= maximum."""
    return [r for r in records if minimum <= r.total_supply <= maximum]


# ──────────────────────────────────────────────
# Lookup and banding
# ──────────────────────────────────────────────


def find_by_name(records: Sequence[CoinRecord], name: str) -> CoinRecord:
    """Return the first record whose name equals name exactly.

    Raises:
        NotFound: If no record has that name.
    """
    for record in records:
        if record.name == name:
            return record
    raise NotFound(name)


def supply_band(total_supply: float) -> tuple[float, float]:
    """Inclusive (min, max) band of comparable total supplies.

    The half-width grows with magnitude per SUPPLY_BAND_STEPS; the first
    step whose bound is >= total_supply wins.
    """
    half_width: float = SUPPLY_BAND_FALLBACK
    for bound, width in SUPPLY_BAND_STEPS:
        if total_supply <= bound:
            half_width = width
            break
    return total_supply - half_width, total_supply + half_width


# ──────────────────────────────────────────────
# Composite pipelines
# ──────────────────────────────────────────────


def cheapest_low_supply(
    records: Sequence[CoinRecord],
    threshold: float = DEFAULT_LOW_SUPPLY_THRESHOLD,
) -> list[CoinRecord]:
    """Cheapest coins among those with a total supply <= threshold."""
    working = sort_by_total_supply_ascending(records)
    working = filter_total_supply_at_most(working, threshold)
    return sort_by_price_ascending(working)


def cheapest_low_remaining(
    records: Sequence[CoinRecord],
    threshold: float = DEFAULT_LOW_REMAINING_THRESHOLD,
) -> list[CoinRecord]:
    """Cheapest coins among those closest to their supply cap."""
    working = sort_by_remaining_percent_ascending(records)
    working = filter_remaining_percent_at_most(working, threshold)
    return sort_by_price_ascending(working)


def related_coins(
    records: Sequence[CoinRecord], name: str
) -> tuple[CoinRecord, list[CoinRecord]]:
    """Find the named coin and every coin within its supply band.

    The target is returned separately and is also part of the related list,
    since it always falls inside its own band.

    Raises:
        NotFound: If no record has that name.
    """
    target = find_by_name(records, name)
    minimum, maximum = supply_band(target.total_supply)
    related = filter_by_supply_band(records, minimum, maximum)
    return target, sort_by_total_supply_ascending(related)
