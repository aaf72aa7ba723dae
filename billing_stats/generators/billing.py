"""Billing record generator for synthetic extracts."""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Iterator

from billing_stats.config import GeneratorConfig
from billing_stats.generators.base import BaseGenerator
from billing_stats.models import BillingRecord, ServiceType

OPEN_ENDED_MOVE_OUT = date(9999, 12, 31)


class BillingRecordGenerator(BaseGenerator):
    """Generate monthly meter reads for synthetic customers."""

    READ_TYPES = ["A", "E", "C"]  # actual, estimated, customer
    READ_TYPE_WEIGHTS = [0.80, 0.15, 0.05]

    # Monthly consumption ranges by service (kWh / therms)
    CONSUMPTION_RANGES = {
        ServiceType.ELECTRICITY: (150.0, 1500.0),
        ServiceType.GAS: (5.0, 250.0),
    }

    # Codes the analysis does not recognise as a service
    OTHER_SERVICE_CODES = [0, 3, 9]

    CORRUPTIONS = ["field_count", "date", "integer", "consumption"]

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        super().__init__(seed, self.config.locale)

    def generate(
        self,
        customer_id: int,
        service_type: int,
        read_date: date,
        move_in_date: date | None = None,
    ) -> BillingRecord:
        """Generate a single meter read.

        Parameters
        ----------
        customer_id : int
            Customer the read belongs to.
        service_type : int
            Raw service code (1 electricity, 2 gas, other values unhandled).
        read_date : date
            Meter read date.
        move_in_date : date | None
            Customer move-in date; drawn at random when omitted.

        Returns
        -------
        BillingRecord
            Generated record.
        """
        if move_in_date is None:
            move_in_date = self.fake.date_between(
                start_date=read_date - timedelta(days=3650),
                end_date=read_date,
            )

        low, high = self.CONSUMPTION_RANGES.get(service_type, (0.0, 100.0))
        disconnected = random.random() < 0.02

        return BillingRecord(
            customer_id=customer_id,
            service_type=int(service_type),
            disconnect_doc=disconnected,
            move_in_date=move_in_date,
            move_out_date=read_date if disconnected else OPEN_ENDED_MOVE_OUT,
            bill_year=read_date.year,
            bill_month=read_date.month,
            span_days=random.randint(28, 33),
            meter_read_date=read_date,
            meter_read_type=random.choices(self.READ_TYPES, self.READ_TYPE_WEIGHTS)[0],
            consumption=round(random.uniform(low, high), 2),
            exception_code=self._exception_code(),
        )

    def generate_for_customer(self, customer_id: int) -> Iterator[BillingRecord]:
        """Generate a customer's monthly reads for each of their services.

        Parameters
        ----------
        customer_id : int
            Customer to generate reads for.

        Yields
        ------
        BillingRecord
            One record per service per month, minus missed reads.
        """
        move_in_date = self.fake.date_between(
            start_date=self.config.start_date - timedelta(days=3650),
            end_date=self.config.start_date,
        )

        for service_type in self._pick_services():
            for offset in range(self.config.months):
                if random.random() < self.config.missed_read_rate:
                    continue
                read_date = _add_months(self.config.start_date, offset) + timedelta(
                    days=random.randint(0, 27)
                )
                yield self.generate(customer_id, service_type, read_date, move_in_date)

    def generate_batch(self, count: int | None = None) -> Iterator[BillingRecord]:
        """Generate reads for multiple customers.

        Parameters
        ----------
        count : int | None
            Number of customers (defaults to ``config.num_customers``).

        Yields
        ------
        BillingRecord
            Generated records, grouped by customer.
        """
        count = self.config.num_customers if count is None else count
        for _ in range(count):
            customer_id = self.fake.unique.random_int(min=100_000, max=999_999)
            yield from self.generate_for_customer(customer_id)

    def corrupt_line(self, line: str, delimiter: str = "|") -> str:
        """Damage a formatted line so the parser rejects it.

        Parameters
        ----------
        line : str
            A valid formatted record line.
        delimiter : str
            Field delimiter used in ``line``.

        Returns
        -------
        str
            Line with a wrong field count, a bad date, a non-numeric
            customer id, or consumption above the limit.
        """
        parts = line.split(delimiter)
        kind = random.choice(self.CORRUPTIONS)

        if kind == "field_count":
            parts = parts[:10] if random.random() < 0.5 else parts[:11] + ["X", "X"]
        elif kind == "date":
            parts[8] = self.fake.date(pattern="%d/%m/%Y")
        elif kind == "integer":
            parts[0] = self.fake.lexify("????")
        else:
            parts[10] = f"{random.uniform(200_000.01, 999_999.0):.2f}"

        return delimiter.join(parts)

    def _pick_services(self) -> list[int]:
        roll = random.random()
        if roll < self.config.other_service_rate:
            return [random.choice(self.OTHER_SERVICE_CODES)]
        if roll < self.config.other_service_rate + self.config.dual_fuel_rate:
            return [ServiceType.ELECTRICITY, ServiceType.GAS]
        return [random.choice([ServiceType.ELECTRICITY, ServiceType.GAS])]

    def _exception_code(self) -> str | None:
        if random.random() < self.config.exception_code_rate:
            return self.fake.bothify("EX##")
        return None


def _add_months(start: date, months: int) -> date:
    """First day of the month ``months`` after ``start``."""
    month_index = start.month - 1 + months
    return date(start.year + month_index // 12, month_index % 12 + 1, 1)
