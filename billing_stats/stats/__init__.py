"""Summary statistics over billing records."""

from billing_stats.stats.aggregator import (
    Aggregator,
    AggregatorState,
    ConsumptionTotal,
    RecordSource,
    ServiceStatistics,
)

__all__ = [
    "Aggregator",
    "AggregatorState",
    "ConsumptionTotal",
    "RecordSource",
    "ServiceStatistics",
]
