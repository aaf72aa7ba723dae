"""Tests for synthetic billing data generators."""

from datetime import date

import pytest

from billing_stats.config import GeneratorConfig, ParserConfig
from billing_stats.generators import BillingRecordGenerator
from billing_stats.models import ServiceType
from billing_stats.parsers import parse_line
from billing_stats.sinks import format_record


class TestBillingRecordGenerator:
    """Tests for BillingRecordGenerator."""

    def test_generate_record(self, seed: int) -> None:
        """Test a single generated read is consistent with its inputs."""
        gen = BillingRecordGenerator(seed=seed)
        read_date = date(2023, 4, 12)

        record = gen.generate(123456, ServiceType.GAS, read_date)

        assert record.customer_id == 123456
        assert record.service_type == 2
        assert record.meter_read_date == read_date
        assert record.bill_year == 2023
        assert record.bill_month == 4
        assert record.move_in_date <= read_date
        assert 28 <= record.span_days <= 33
        assert record.meter_read_type in BillingRecordGenerator.READ_TYPES
        assert 5.0 <= record.consumption <= 250.0

    def test_generated_records_parse(self, seed: int) -> None:
        """Test every generated record survives format and parse."""
        gen = BillingRecordGenerator(GeneratorConfig(num_customers=20), seed=seed)

        for line_num, record in enumerate(gen.generate_batch(), start=2):
            assert parse_line(format_record(record), line_num) == record

    def test_generate_for_customer_months(self, seed: int) -> None:
        """Test reads fall inside the configured months."""
        config = GeneratorConfig(months=3, missed_read_rate=0.0, start_date=date(2023, 11, 1))
        gen = BillingRecordGenerator(config, seed=seed)

        records = list(gen.generate_for_customer(42))

        assert records
        assert {r.customer_id for r in records} == {42}
        months = {(r.meter_read_date.year, r.meter_read_date.month) for r in records}
        assert months <= {(2023, 11), (2023, 12), (2024, 1)}
        per_service = len(records) // len({r.service_type for r in records})
        assert per_service == 3

    def test_dual_fuel_rate(self, seed: int) -> None:
        """Test a dual fuel rate of 1 gives every customer both services."""
        config = GeneratorConfig(
            num_customers=5, dual_fuel_rate=1.0, other_service_rate=0.0, missed_read_rate=0.0
        )
        gen = BillingRecordGenerator(config, seed=seed)

        records = list(gen.generate_batch())

        by_customer: dict[int, set[int]] = {}
        for r in records:
            by_customer.setdefault(r.customer_id, set()).add(r.service_type)
        assert len(by_customer) == 5
        assert all(services == {1, 2} for services in by_customer.values())

    def test_other_service_codes(self, seed: int) -> None:
        """Test customers can be given unrecognized service codes."""
        config = GeneratorConfig(num_customers=3, other_service_rate=1.0)
        gen = BillingRecordGenerator(config, seed=seed)

        codes = {r.service_type for r in gen.generate_batch()}

        assert codes <= set(BillingRecordGenerator.OTHER_SERVICE_CODES)

    def test_unique_customer_ids(self, seed: int) -> None:
        """Test generated customers have distinct IDs."""
        config = GeneratorConfig(num_customers=50, missed_read_rate=0.0, months=1)
        gen = BillingRecordGenerator(config, seed=seed)

        ids = {r.customer_id for r in gen.generate_batch()}

        assert len(ids) == 50

    def test_reproducible_with_seed(self) -> None:
        """Test the same seed gives the same records."""
        config = GeneratorConfig(num_customers=5)

        first = list(BillingRecordGenerator(config, seed=7).generate_batch())
        second = list(BillingRecordGenerator(config, seed=7).generate_batch())

        assert first == second

    @pytest.mark.parametrize("attempt", range(20))
    def test_corrupt_line_rejected(self, seed: int, attempt: int) -> None:
        """Test corrupted lines never parse."""
        gen = BillingRecordGenerator(seed=seed + attempt)
        record = gen.generate(1, ServiceType.ELECTRICITY, date(2023, 1, 10))

        line = gen.corrupt_line(format_record(record))

        assert parse_line(line, 2, ParserConfig()) is None
