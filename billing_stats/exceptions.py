"""Custom exception hierarchy for billing-stats."""


class BillingStatsError(Exception):
    """Base exception for all billing-stats errors."""


class RecordParseError(BillingStatsError):
    """Raised when a field of an input line fails its type or range check."""

    def __init__(self, message: str, field: str | None = None, line_num: int | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.line_num = line_num


class AggregatorStateError(BillingStatsError):
    """Raised when an aggregator is used outside its collect lifecycle."""


class ConfigurationError(BillingStatsError):
    """Raised when configuration is invalid or missing."""
