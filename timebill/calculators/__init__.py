"""Calculator modules for pricing billing groups."""

from timebill.calculators.invoice_calculator import (
    InvoiceAmount,
    build_line_items,
    compute_amount,
    describe_billing_period,
    is_billed_hourly,
    is_fixed_price,
)

__all__ = [
    "InvoiceAmount",
    "build_line_items",
    "compute_amount",
    "describe_billing_period",
    "is_billed_hourly",
    "is_fixed_price",
]
