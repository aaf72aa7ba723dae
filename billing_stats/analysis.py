"""Run the parse-and-aggregate pipeline over one billing extract."""

import logging
from pathlib import Path

from billing_stats.config import ParserConfig
from billing_stats.parsers import RecordParser
from billing_stats.stats import Aggregator

logger = logging.getLogger(__name__)


def analyze(file_path: str | Path, config: ParserConfig | None = None) -> Aggregator:
    """Parse ``file_path`` and return a finalized aggregator.

    An unreadable file yields an aggregator with zero data; the error is
    logged by the parser.

    Parameters
    ----------
    file_path : str | Path
        Path to the gzip-compressed extract.
    config : ParserConfig | None
        Parser settings (delimiter, consumption limit, debug reporting).

    Returns
    -------
    Aggregator
        Aggregator in the finalized state.
    """
    aggregator = Aggregator()
    with RecordParser(file_path, config) as parser:
        aggregator.collect(parser)

    logger.info(
        "Analyzed %s: %d lines read, %d rejected, %d records collected",
        file_path,
        parser.lines_read,
        parser.records_rejected,
        aggregator.records_collected,
        extra={
            "extra": {
                "file": str(file_path),
                "lines_read": parser.lines_read,
                "records_rejected": parser.records_rejected,
                "records_collected": aggregator.records_collected,
            }
        },
    )
    return aggregator
