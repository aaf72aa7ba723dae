"""Pytest configuration and fixtures."""

import gzip
from pathlib import Path
from typing import Callable

import pytest

HEADER = (
    "CustID|ElecOrGas|Disconnect Doc|Move In Date|Move Out Date|Bill Year|"
    "Bill Month|Span Days|Meter Read Date|Meter Read Type|Consumption|Exception Code"
)

DEFAULT_FIELDS = {
    "customer_id": "100",
    "service_type": "1",
    "disconnect_doc": "N",
    "move_in_date": "20200101",
    "move_out_date": "99991231",
    "bill_year": "2023",
    "bill_month": "1",
    "span_days": "30",
    "meter_read_date": "20230115",
    "meter_read_type": "A",
    "consumption": "300",
}


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def make_line() -> Callable[..., str]:
    """Build a pipe-delimited data line; keyword overrides replace fields.

    Pass ``exception_code`` to append the optional 12th field.
    """

    def _make_line(exception_code: str | None = None, **overrides: str) -> str:
        fields = {**DEFAULT_FIELDS, **overrides}
        parts = list(fields.values())
        if exception_code is not None:
            parts.append(exception_code)
        return "|".join(parts)

    return _make_line


@pytest.fixture
def write_extract(tmp_path: Path) -> Callable[..., Path]:
    """Write a gzip extract (header + lines) and return its path."""

    def _write(lines: list[str], name: str = "extract.gz", header: str = HEADER) -> Path:
        path = tmp_path / name
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(header + "\n")
            for line in lines:
                f.write(line + "\n")
        return path

    return _write


@pytest.fixture
def write_damaged_extract(tmp_path: Path) -> Callable[..., Path]:
    """Write a gzip extract whose header is intact but whose body is not.

    ``damage="block"`` sets a reserved deflate block type so decompression
    fails; ``damage="truncated"`` cuts off the gzip trailer.
    """

    def _write(lines: list[str], damage: str = "block", name: str = "damaged.gz") -> Path:
        body = "\n".join([HEADER, *lines]) + "\n"
        data = bytearray(gzip.compress(body.encode("utf-8")))
        if damage == "block":
            data[10] = 0xFF  # first byte after the 10-byte gzip header
        else:
            data = data[:-4]
        path = tmp_path / name
        path.write_bytes(bytes(data))
        return path

    return _write
