"""Synthetic billing data generators."""

from billing_stats.generators.billing import BillingRecordGenerator

__all__ = ["BillingRecordGenerator"]
