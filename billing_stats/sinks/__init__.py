"""Output sinks for writing billing extracts."""

from billing_stats.sinks.gzip_file import GzipFileSink
from billing_stats.sinks.serialization import format_header, format_record

__all__ = ["GzipFileSink", "format_header", "format_record"]
