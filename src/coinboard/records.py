"""Record derivation from raw ticker entries.

Core formulas:
  total_supply = max_supply if max_supply is not null else total_supply
  remaining_supply = total_supply - circulating_supply
  remaining_percent = 100 - ((total_supply - remaining_supply) / total_supply * 100)

remaining_percent is rounded to 3 decimal places. A zero total supply yields
a remaining_percent of 0.0.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from coinboard.exceptions import InvalidRecord
from coinboard.logging import get_logger
from coinboard.models import CoinRecord

logger = get_logger(__name__)


def _parse_float(raw: Mapping[str, Any], field: str, index: int) -> float:
    value = raw.get(field)
    if value is None or isinstance(value, bool):
        raise InvalidRecord(index, field, value)
    try:
        parsed = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidRecord(index, field, value) from e
    # nan/inf break ordering and cannot be rendered as JSON
    if not math.isfinite(parsed):
        raise InvalidRecord(index, field, value)
    return parsed


def _parse_str(raw: Mapping[str, Any], field: str, index: int) -> str:
    value = raw.get(field)
    if not isinstance(value, str):
        raise InvalidRecord(index, field, value)
    return value


def remaining_percent(total_supply: float, remaining_supply: float) -> float:
    """Percent of total supply not yet in circulation, rounded to 3 places."""
    if total_supply == 0:
        return 0.0
    issued = (total_supply - remaining_supply) / total_supply
    return round(100 - (issued * 100), 3)


def derive_record(raw: Mapping[str, Any], ingestion_index: int) -> CoinRecord:
    """Build a CoinRecord from one raw ticker entry.

    Args:
        raw: Ticker entry with available_supply, total_supply, optional
            max_supply, price_usd, market_cap_usd, percent_change_1h/24h/7d,
            id and symbol. Numeric fields may be numbers or numeric strings.
        ingestion_index: 0-based position of the entry in its batch.

    Returns:
        The derived, immutable CoinRecord.

    Raises:
        InvalidRecord: If the entry is not a mapping, or a required field is
            missing, not parseable, or not finite.
    """
    if not isinstance(raw, Mapping):
        raise InvalidRecord(ingestion_index, "<entry>", raw)

    circulating = _parse_float(raw, "available_supply", ingestion_index)
    if raw.get("max_supply") is None:
        total = _parse_float(raw, "total_supply", ingestion_index)
    else:
        total = _parse_float(raw, "max_supply", ingestion_index)
    remaining = total - circulating

    return CoinRecord(
        rank=ingestion_index,
        symbol=_parse_str(raw, "symbol", ingestion_index),
        name=_parse_str(raw, "id", ingestion_index).upper(),
        circulating_supply=circulating,
        total_supply=total,
        remaining_supply=remaining,
        remaining_percent=remaining_percent(total, remaining),
        price_usd=_parse_float(raw, "price_usd", ingestion_index),
        market_cap_usd=_parse_float(raw, "market_cap_usd", ingestion_index),
        change_percent_1h=_parse_float(raw, "percent_change_1h", ingestion_index),
        change_percent_24h=_parse_float(raw, "percent_change_24h", ingestion_index),
        change_percent_7d=_parse_float(raw, "percent_change_7d", ingestion_index),
    )


def derive_records(
    raw_entries: Iterable[Mapping[str, Any]], skip_invalid: bool = False
) -> list[CoinRecord]:
    """Derive records for a whole ingestion batch.

    By default the first invalid entry aborts the batch so that no partial
    snapshot is ever published. With skip_invalid=True invalid entries are
    logged and dropped; surviving records keep their original index as rank.
    """
    records: list[CoinRecord] = []
    for index, raw in enumerate(raw_entries):
        try:
            records.append(derive_record(raw, index))
        except InvalidRecord as e:
            if not skip_invalid:
                raise
            logger.warning(
                "invalid_record_skipped",
                index=e.index,
                field=e.field,
                value=repr(e.value),
            )
    return records
