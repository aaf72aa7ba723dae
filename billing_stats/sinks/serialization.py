"""Serialization of billing records to extract lines."""

from datetime import date

from billing_stats.models import BillingRecord

HEADER = [
    "CustID",
    "ElecOrGas",
    "Disconnect Doc",
    "Move In Date",
    "Move Out Date",
    "Bill Year",
    "Bill Month",
    "Span Days",
    "Meter Read Date",
    "Meter Read Type",
    "Consumption",
    "Exception Code",
]


def format_date(value: date) -> str:
    """Format a date as ``YYYYMMDD``."""
    return value.strftime("%Y%m%d")


def format_record(record: BillingRecord, delimiter: str = "|") -> str:
    """Format a record as one extract line (without newline).

    The exception code column is only written when the record has one,
    so lines carry 11 or 12 fields.
    """
    fields = [
        str(record.customer_id),
        str(record.service_type),
        "Y" if record.disconnect_doc else "N",
        format_date(record.move_in_date),
        format_date(record.move_out_date),
        str(record.bill_year),
        str(record.bill_month),
        str(record.span_days),
        format_date(record.meter_read_date),
        record.meter_read_type,
        repr(record.consumption),
    ]
    if record.exception_code is not None:
        fields.append(record.exception_code)
    return delimiter.join(fields)


def format_header(delimiter: str = "|") -> str:
    """Format the header line."""
    return delimiter.join(HEADER)
