"""Summary statistics for gzip-compressed utility billing extracts."""

from billing_stats.analysis import analyze
from billing_stats.models import BillingRecord, ServiceType
from billing_stats.parsers import RecordParser, parse_line
from billing_stats.stats import Aggregator

__version__ = "0.1.0"

__all__ = [
    "Aggregator",
    "BillingRecord",
    "RecordParser",
    "ServiceType",
    "__version__",
    "analyze",
    "parse_line",
]
