"""Billing record model."""

from dataclasses import dataclass
from datetime import date

from billing_stats.models.enums import ServiceType


@dataclass(frozen=True)
class BillingRecord:
    """One validated meter-read line from a billing extract."""

    customer_id: int
    service_type: int  # raw code; 1 = electricity, 2 = gas
    disconnect_doc: bool
    move_in_date: date
    move_out_date: date
    bill_year: int
    bill_month: int
    span_days: int
    meter_read_date: date
    meter_read_type: str
    consumption: float
    exception_code: str | None = None

    @property
    def service(self) -> ServiceType | None:
        """Resolve the raw service code, or None for unhandled codes."""
        try:
            return ServiceType(self.service_type)
        except ValueError:
            return None

    @property
    def read_month(self) -> int:
        """Zero-based calendar month (0-11) of the meter read."""
        return self.meter_read_date.month - 1
