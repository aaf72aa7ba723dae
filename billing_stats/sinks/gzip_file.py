"""Gzip file sink for writing billing extracts."""

import gzip
import logging
from pathlib import Path
from typing import Iterable

from billing_stats.models import BillingRecord
from billing_stats.sinks.serialization import format_header, format_record

logger = logging.getLogger(__name__)


class GzipFileSink:
    """Write records as a gzip-compressed, delimited extract.

    The header line is written when the sink is created, so a sink closed
    without records still leaves a valid, empty extract behind.
    """

    def __init__(self, file_path: str | Path, delimiter: str = "|", encoding: str = "utf-8") -> None:
        """Initialize gzip file sink.

        Parameters
        ----------
        file_path : str | Path
            Output file; parent directories are created.
        delimiter : str
            Field delimiter.
        encoding : str
            Text encoding of the extract.
        """
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self.delimiter = delimiter
        self.lines_written = 0

        self._handle = gzip.open(self.file_path, "wt", encoding=encoding)
        self._handle.write(format_header(delimiter) + "\n")

    def write_batch(self, records: Iterable[BillingRecord]) -> None:
        """Write records, one line each."""
        self.write_lines(format_record(record, self.delimiter) for record in records)

    def write_lines(self, lines: Iterable[str]) -> None:
        """Write pre-formatted lines verbatim."""
        for line in lines:
            self._handle.write(line + "\n")
            self.lines_written += 1

    def close(self) -> None:
        """Flush and close the file."""
        if self._handle.closed:
            return
        self._handle.close()
        logger.info("Wrote %d lines to %s", self.lines_written, self.file_path)

    def __enter__(self) -> "GzipFileSink":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
