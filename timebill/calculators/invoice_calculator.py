"""Invoice amount and line item calculations.

This module prices a billing group under its contract's pricing model:
- Fixed price: the contract price, whatever the hours tracked
- Hourly: total hours × hourly rate
- Retainer: billed hourly only when the contract also defines a rate

A zero amount means the group cannot be invoiced as configured.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from timebill.models.billing import BillingGroup, LineItem
from timebill.models.contract import DEFAULT_CURRENCY, PricingModel

ZERO = Decimal("0")
DEFAULT_ITEM_LABEL = "Development work"


@dataclass
class InvoiceAmount:
    """Total to invoice for a billing group.

    Attributes:
        amount: Invoice total (zero when no rate or price is configured)
        currency: ISO currency code

    Example:
        >>> InvoiceAmount(amount=Decimal("500.0"), currency="USD").is_billable
        True
    """

    amount: Decimal
    currency: str

    @property
    def is_billable(self) -> bool:
        return self.amount > ZERO


def is_fixed_price(group: BillingGroup) -> bool:
    """Whether the group is billed as a single fixed-price item."""
    return (
        group.pricing_model == PricingModel.FIXED_PRICE
        and group.fixed_price is not None
    )


def is_billed_hourly(group: BillingGroup) -> bool:
    """Whether the group is billed per hour at the contract rate."""
    return (
        group.pricing_model in (PricingModel.HOURLY, PricingModel.RETAINER)
        and group.hourly_rate is not None
    )


def compute_amount(group: BillingGroup) -> InvoiceAmount:
    """Compute the invoice total for a billing group.

    Args:
        group: Billing group with pricing fields and total hours

    Returns:
        InvoiceAmount; the amount is exact (no rounding) and zero when the
        pricing model's rate or price is missing

    Example:
        >>> group = BillingGroup(
        ...     client_id=1,
        ...     pricing_model="hourly",
        ...     hourly_rate=Decimal("150.0"),
        ...     total_hours=Decimal("10.5"),
        ... )
        >>> compute_amount(group).amount
        Decimal('1575.00')
    """
    currency = group.currency or DEFAULT_CURRENCY

    if is_fixed_price(group):
        return InvoiceAmount(amount=group.fixed_price, currency=currency)

    if is_billed_hourly(group):
        return InvoiceAmount(
            amount=group.total_hours * group.hourly_rate, currency=currency
        )

    return InvoiceAmount(amount=ZERO, currency=currency)


def describe_billing_period(group: BillingGroup) -> str:
    """Date span covered by the group's entries, e.g. ``Jan 06, 2025 - Jan 20, 2025``."""
    if not group.entries:
        return ""
    first = group.entries[0].start_time.date()
    last = group.entries[-1].start_time.date()
    if first == last:
        return first.strftime("%b %d, %Y")
    return f"{first.strftime('%b %d, %Y')} - {last.strftime('%b %d, %Y')}"


def build_line_items(
    group: BillingGroup, manual_amount: Optional[Decimal] = None
) -> List[LineItem]:
    """Build the invoice lines for a billing group.

    Fixed-price groups get one synthetic line for the whole billing period.
    Every other group gets one line per entry; its rate is the contract's
    hourly rate, or manual_amount spread evenly over the tracked hours when
    the contract has none.

    Args:
        group: Billing group to invoice
        manual_amount: Caller-supplied total for groups without a rate

    Returns:
        List of LineItem in entry order

    Raises:
        ValueError: If the group has no rate and no manual amount is given
    """
    if is_fixed_price(group):
        contract_label = group.contract_name or "Fixed price"
        period = describe_billing_period(group)
        label = f"{contract_label} ({period})" if period else contract_label
        return [
            LineItem(
                label=label,
                description=(
                    f"Fixed price contract, {group.total_hours:.2f} hours tracked"
                ),
                quantity=Decimal("1"),
                rate=group.fixed_price,
                amount=group.fixed_price,
            )
        ]

    if is_billed_hourly(group):
        rate = group.hourly_rate
    elif manual_amount is not None and group.total_hours > ZERO:
        rate = manual_amount / group.total_hours
    else:
        raise ValueError(
            f"No hourly rate for {group.display_name} and no manual amount given"
        )

    items = []
    for entry in group.entries:
        hours = entry.hours if entry.hours is not None else ZERO
        start = entry.start_time
        items.append(
            LineItem(
                label=f"{start:%b} {start.day} - {entry.project_label or DEFAULT_ITEM_LABEL}",
                description=entry.notes,
                quantity=hours,
                rate=rate,
                amount=hours * rate,
            )
        )
    return items
