"""Streaming parser for gzip-compressed, pipe-delimited billing extracts.

Each data line carries 11 fields, or 12 when an exception code is present::

    CustID|ElecOrGas|DisconnectDoc|MoveInDate|MoveOutDate|BillYear|BillMonth|
    SpanDays|MeterReadDate|MeterReadType|Consumption[|ExceptionCode]

The first line of the file is a header and is discarded. Lines that fail
any field check are skipped; the sequence never aborts on bad data.
"""

import gzip
import logging
import re
import zlib
from datetime import date, datetime
from math import isfinite
from pathlib import Path
from typing import Iterator, TextIO

from billing_stats.config import ParserConfig
from billing_stats.exceptions import RecordParseError
from billing_stats.models import BillingRecord

logger = logging.getLogger(__name__)

FIELD_COUNT = 11
DATE_FORMAT = "%Y%m%d"

# Plain ASCII decimals: no underscores, padding or Unicode digits
INT_PATTERN = re.compile(r"[+-]?[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_line(
    line: str,
    line_num: int,
    config: ParserConfig | None = None,
) -> BillingRecord | None:
    """Parse one data line into a record.

    Parameters
    ----------
    line : str
        Raw line, with or without its trailing newline.
    line_num : int
        1-based line number in the source file (used in diagnostics).
    config : ParserConfig | None
        Parser settings; defaults are used when omitted.

    Returns
    -------
    BillingRecord | None
        The parsed record, or None when the line is rejected.
    """
    config = config or ParserConfig()
    parts = line.rstrip("\r\n").split(config.delimiter)

    if len(parts) not in (FIELD_COUNT, FIELD_COUNT + 1):
        _report_rejection(config, f"field count - [{len(parts)}] for [Line]", line_num, None)
        return None

    try:
        return _build_record(parts, config)
    except RecordParseError as e:
        e.line_num = line_num
        _report_rejection(config, str(e), line_num, e.field)
        return None


def _build_record(parts: list[str], config: ParserConfig) -> BillingRecord:
    # Fields are converted in file order so the first bad one is reported
    customer_id = _to_int(parts[0], "CustID")
    service_type = _to_int(parts[1], "ElecOrGas")
    disconnect_doc = parts[2].lower() == "y"
    move_in_date = _to_date(parts[3], "Move In Date")
    move_out_date = _to_date(parts[4], "Move Out Date")
    bill_year = _to_int(parts[5], "Bill Year")
    bill_month = _to_int(parts[6], "Bill Month")
    span_days = _to_int(parts[7], "Span Days")
    meter_read_date = _to_date(parts[8], "Meter Read Date")

    consumption = _to_float(parts[10], "Consumption")
    if consumption > config.consumption_limit:
        raise RecordParseError(
            f"out of range - [{parts[10]}] for [Consumption]", field="Consumption"
        )

    return BillingRecord(
        customer_id=customer_id,
        service_type=service_type,
        disconnect_doc=disconnect_doc,
        move_in_date=move_in_date,
        move_out_date=move_out_date,
        bill_year=bill_year,
        bill_month=bill_month,
        span_days=span_days,
        meter_read_date=meter_read_date,
        meter_read_type=parts[9],
        consumption=consumption,
        exception_code=(parts[11] or None) if len(parts) > FIELD_COUNT else None,
    )


def _to_int(value: str, label: str) -> int:
    if not INT_PATTERN.fullmatch(value):
        raise RecordParseError(f"int - [{value}] for [{label}]", field=label)
    return int(value)


def _to_float(value: str, label: str) -> float:
    if not DECIMAL_PATTERN.fullmatch(value):
        raise RecordParseError(f"double - [{value}] for [{label}]", field=label)
    result = float(value)
    # Overflow such as "1e999" still becomes inf
    if not isfinite(result):
        raise RecordParseError(f"double - [{value}] for [{label}]", field=label)
    return result


def _to_date(value: str, label: str) -> date:
    # strptime alone accepts single-digit months and days
    if len(value) != 8 or not (value.isascii() and value.isdigit()):
        raise RecordParseError(f"date - [{value}] for [{label}]", field=label)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise RecordParseError(f"date - [{value}] for [{label}]", field=label) from e


def _report_rejection(
    config: ParserConfig, message: str, line_num: int, field: str | None
) -> None:
    if config.debug:
        logger.warning(
            "Error parsing %s [line:%d]",
            message,
            line_num,
            extra={"extra": {"line_num": line_num, "field": field}},
        )


class RecordParser:
    """Pull-based record source over a gzip billing extract.

    Call ``has_next()`` before each ``next()``. The file is opened lazily on
    the first ``has_next()`` and released as soon as the data runs out or
    cannot be read. Once exhausted the parser stays exhausted.

    Example::

        with RecordParser("billing.gz") as parser:
            while parser.has_next():
                record = parser.next()
                if record is not None:
                    ...
    """

    def __init__(self, file_path: str | Path, config: ParserConfig | None = None) -> None:
        """Initialize parser.

        Parameters
        ----------
        file_path : str | Path
            Path to the gzip-compressed extract.
        config : ParserConfig | None
            Parser settings.
        """
        self.file_path = Path(file_path)
        self.config = config or ParserConfig()
        self.lines_read = 0
        self.records_rejected = 0

        self._handle: TextIO | None = None
        self._line: str | None = None
        self._line_num = 1  # header
        self._exhausted = False

    def has_next(self) -> bool:
        """Advance to the next data line.

        Returns
        -------
        bool
            True if a line is buffered for ``next()``; False when the source
            is exhausted or unreadable.
        """
        if self._exhausted:
            return False

        try:
            if self._handle is None:
                self._open()
            line = self._handle.readline()
        except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
            logger.error("Error accessing file %s: %s", self.file_path, e)
            self.close()
            return False

        if not line:
            self.close()
            return False

        self._line = line
        self._line_num += 1
        self.lines_read += 1
        return True

    def next(self) -> BillingRecord | None:
        """Parse the line buffered by the last ``has_next()``.

        Returns None for a rejected line, or when no line is buffered.
        """
        if self._line is None:
            return None

        line, self._line = self._line, None
        record = parse_line(line, self._line_num, self.config)
        if record is None:
            self.records_rejected += 1
        return record

    def close(self) -> None:
        """Release the file handle and mark the source exhausted."""
        self._exhausted = True
        self._line = None
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def _open(self) -> None:
        self._handle = gzip.open(self.file_path, "rt", encoding=self.config.encoding)
        self._handle.readline()
        logger.debug("Opened %s", self.file_path)

    def __iter__(self) -> Iterator[BillingRecord]:
        while self.has_next():
            record = self.next()
            if record is not None:
                yield record

    def __enter__(self) -> "RecordParser":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
