"""Custom exceptions for the coin supply screener.

Ingestion and lookup errors live here so the record model, the query layer
and the dashboard routes can share them without circular imports.
"""


class CoinboardError(Exception):
    """Base exception for all screener errors."""


class InvalidRecord(CoinboardError):
    """Raised when a raw ticker entry is malformed or has a bad field.

    field is "<entry>" when the entry itself is not a JSON object.
    """

    def __init__(self, index: int, field: str, value: object) -> None:
        self.index = index
        self.field = field
        self.value = value
        super().__init__(
            f"ticker entry {index}: field {field!r} is invalid ({value!r})"
        )


class NotFound(CoinboardError):
    """Raised when a coin name matches no record in the snapshot."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"no coin named {name!r}")


class TickerFetchError(CoinboardError):
    """Raised when the remote ticker API cannot deliver a usable batch."""
