"""Domain models for timebill.

This package contains Pydantic models for the reconciliation engine:
- BaseDataModel: Base class with common configuration
- TimeEntry: A tracking session
- ContractTerms / PricingModel: Contract pricing
- BillingGroup / GroupKey: Unbilled entries per (client, contract)
- LineItem: One invoice line
"""

from timebill.models.base import BaseDataModel, to_decimal
from timebill.models.billing import BillingGroup, GroupKey, LineItem
from timebill.models.contract import DEFAULT_CURRENCY, ContractTerms, PricingModel
from timebill.models.tracking import (
    INVOICED_MARKER_PREFIX,
    TimeEntry,
    append_invoiced_marker,
    format_invoiced_marker,
)

__all__ = [
    "BaseDataModel",
    "to_decimal",
    "BillingGroup",
    "GroupKey",
    "LineItem",
    "DEFAULT_CURRENCY",
    "ContractTerms",
    "PricingModel",
    "INVOICED_MARKER_PREFIX",
    "TimeEntry",
    "append_invoiced_marker",
    "format_invoiced_marker",
]
