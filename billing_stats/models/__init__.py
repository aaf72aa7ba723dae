"""Domain models for billing extracts."""

from billing_stats.models.enums import ServiceType
from billing_stats.models.record import BillingRecord

__all__ = ["BillingRecord", "ServiceType"]
