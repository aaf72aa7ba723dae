"""Input parsers for billing extracts."""

from billing_stats.parsers.billing import RecordParser, parse_line

__all__ = ["RecordParser", "parse_line"]
