"""Single-pass aggregation of billing records into summary statistics."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from billing_stats.exceptions import AggregatorStateError
from billing_stats.models import BillingRecord, ServiceType

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Pull-based record sequence consumed by ``Aggregator.collect``."""

    def has_next(self) -> bool: ...

    def next(self) -> BillingRecord | None: ...


class AggregatorState(str, Enum):
    """Lifecycle of an Aggregator; collection happens at most once."""

    NEW = "NEW"
    COLLECTING = "COLLECTING"
    FINALIZED = "FINALIZED"


@dataclass(frozen=True)
class ConsumptionTotal:
    """Running reading count and consumption total for one month."""

    count: int = 0
    total: float = 0.0

    def add(self, consumption: float) -> "ConsumptionTotal":
        """Return a new total with one more reading folded in."""
        return ConsumptionTotal(self.count + 1, self.total + consumption)

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass
class ServiceStatistics:
    """Per-service customer set, reading counts and monthly consumption."""

    customers: set[int] = field(default_factory=set)
    readings_per_customer: dict[int, int] = field(default_factory=dict)
    consumption_by_month: dict[int, ConsumptionTotal] = field(default_factory=dict)
    histogram: dict[int, int] = field(default_factory=dict)

    def add(self, record: BillingRecord) -> None:
        """Fold one record of this service into the running state."""
        customer_id = record.customer_id
        self.customers.add(customer_id)
        self.readings_per_customer[customer_id] = self.readings_per_customer.get(customer_id, 0) + 1

        month = record.read_month
        current = self.consumption_by_month.get(month, ConsumptionTotal())
        self.consumption_by_month[month] = current.add(record.consumption)

    def build_histogram(self) -> None:
        """Group customers by their number of readings, ascending."""
        counts = Counter(self.readings_per_customer.values())
        self.histogram = dict(sorted(counts.items()))

    def monthly_average(self) -> dict[int, float]:
        """Average consumption per month index (0-11) for months with readings."""
        return {
            month: total.average
            for month, total in sorted(self.consumption_by_month.items())
            if total.count > 0
        }


class Aggregator:
    """Consume a record source once and expose summary statistics.

    The aggregator moves through ``NEW -> COLLECTING -> FINALIZED``. It is
    single-use: ``collect`` may be called once. Accessors read finalized
    state and return empty results until ``collect`` has completed.

    After finalization the electricity, gas and both-services customer sets
    are disjoint and together cover every customer with a recognised
    service.
    """

    def __init__(self) -> None:
        self.state = AggregatorState.NEW
        self.records_collected = 0

        self.unique_customers: set[int] = set()
        self.both_customers: set[int] = set()
        self.electricity = ServiceStatistics()
        self.gas = ServiceStatistics()

        self._by_service = {
            ServiceType.ELECTRICITY: self.electricity,
            ServiceType.GAS: self.gas,
        }

    def collect(self, source: RecordSource) -> None:
        """Pull every record from ``source``, then finalize.

        Parameters
        ----------
        source : RecordSource
            Object exposing ``has_next()`` and ``next()``; ``next()`` returns
            None for lines that failed to parse.

        Raises
        ------
        AggregatorStateError
            If this aggregator has already collected.
        """
        if self.state is not AggregatorState.NEW:
            raise AggregatorStateError(f"collect() already called (state={self.state.value})")

        self.state = AggregatorState.COLLECTING
        while source.has_next():
            record = source.next()
            if record is not None:
                self._add(record)

        self._finalize()
        logger.debug(
            "Collected %d records for %d unique customers",
            self.records_collected,
            len(self.unique_customers),
        )

    def _add(self, record: BillingRecord) -> None:
        self.records_collected += 1
        self.unique_customers.add(record.customer_id)

        stats = self._by_service.get(record.service)
        if stats is not None:
            stats.add(record)

    def _finalize(self) -> None:
        self.both_customers = self.electricity.customers & self.gas.customers
        self.electricity.customers -= self.both_customers
        self.gas.customers -= self.both_customers

        self.electricity.build_histogram()
        self.gas.build_histogram()
        self.state = AggregatorState.FINALIZED

    @property
    def is_finalized(self) -> bool:
        return self.state is AggregatorState.FINALIZED

    @property
    def unique_customer_count(self) -> int:
        return len(self.unique_customers) if self.is_finalized else 0

    @property
    def electricity_only_count(self) -> int:
        return len(self.electricity.customers) if self.is_finalized else 0

    @property
    def gas_only_count(self) -> int:
        return len(self.gas.customers) if self.is_finalized else 0

    @property
    def both_services_count(self) -> int:
        return len(self.both_customers) if self.is_finalized else 0

    def electricity_histogram(self) -> dict[int, int]:
        """Number of readings -> number of electricity customers."""
        return dict(self.electricity.histogram) if self.is_finalized else {}

    def gas_histogram(self) -> dict[int, int]:
        """Number of readings -> number of gas customers."""
        return dict(self.gas.histogram) if self.is_finalized else {}

    def electricity_monthly_average(self) -> dict[int, float]:
        """Month index (0-11) -> average electricity consumption."""
        return self.electricity.monthly_average() if self.is_finalized else {}

    def gas_monthly_average(self) -> dict[int, float]:
        """Month index (0-11) -> average gas consumption."""
        return self.gas.monthly_average() if self.is_finalized else {}

    def summary(self) -> dict[str, Any]:
        """Return every statistic as a JSON-ready dict."""
        return {
            "records_collected": self.records_collected,
            "unique_customers": self.unique_customer_count,
            "electricity_only_customers": self.electricity_only_count,
            "gas_only_customers": self.gas_only_count,
            "electricity_and_gas_customers": self.both_services_count,
            "electricity_histogram": self.electricity_histogram(),
            "gas_histogram": self.gas_histogram(),
            "electricity_monthly_average": self.electricity_monthly_average(),
            "gas_monthly_average": self.gas_monthly_average(),
        }
