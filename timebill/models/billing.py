"""Billing group and invoice line item models.

A BillingGroup is the unit of invoicing: every unbilled entry that shares
a (client, contract) pair. Groups are rebuilt on every run and never
persisted.
"""

from decimal import Decimal
from typing import List, NamedTuple, Optional, Tuple

from pydantic import Field, field_validator

from timebill.models.base import BaseDataModel, to_decimal
from timebill.models.contract import DEFAULT_CURRENCY, ContractTerms, PricingModel
from timebill.models.tracking import TimeEntry


class GroupKey(NamedTuple):
    """Composite key of a billing group."""

    client_id: int
    contract_id: Optional[int]

    def sort_key(self) -> Tuple[int, int, int]:
        """Order by client, then client-only work, then contract id."""
        if self.contract_id is None:
            return (self.client_id, 0, 0)
        return (self.client_id, 1, self.contract_id)


class BillingGroup(BaseDataModel):
    """Unbilled entries of one client under one contract.

    Attributes:
        client_id: Billing client
        client_name: Client display name
        contract_id: Governing contract, None for client-only work
        contract_name: Contract display name
        pricing_model: Copied from the contract (hourly when absent)
        hourly_rate: Copied from the contract
        fixed_price: Copied from the contract
        currency: Copied from the contract (USD when absent)
        total_hours: Sum of member entries' hours
        entries: Member entries in chronological order
    """

    client_id: int
    client_name: str = ""
    contract_id: Optional[int] = None
    contract_name: str = ""
    pricing_model: PricingModel = PricingModel.HOURLY
    hourly_rate: Optional[Decimal] = None
    fixed_price: Optional[Decimal] = None
    currency: str = DEFAULT_CURRENCY
    total_hours: Decimal = Decimal("0")
    entries: List[TimeEntry] = Field(default_factory=list)

    @field_validator("hourly_rate", "fixed_price", "total_hours", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Optional[Decimal]:
        return to_decimal(v)

    @classmethod
    def start(
        cls, client_id: int, client_name: str, contract_id: Optional[int],
        terms: ContractTerms,
    ) -> "BillingGroup":
        """Open an empty group carrying the contract's pricing fields."""
        return cls(
            client_id=client_id,
            client_name=client_name or "",
            contract_id=contract_id,
            contract_name=terms.name,
            pricing_model=terms.pricing_model,
            hourly_rate=terms.hourly_rate,
            fixed_price=terms.fixed_price,
            currency=terms.currency,
        )

    @property
    def key(self) -> GroupKey:
        return GroupKey(self.client_id, self.contract_id)

    @property
    def display_name(self) -> str:
        """Client name, with the contract name in parentheses when present."""
        if self.contract_name:
            return f"{self.client_name} ({self.contract_name})"
        return self.client_name

    def add_entry(self, entry: TimeEntry) -> None:
        """Append an entry and accumulate its hours."""
        self.entries.append(entry)
        if entry.hours is not None:
            self.total_hours = self.total_hours + entry.hours


class LineItem(BaseDataModel):
    """One line of an invoice.

    Example:
        >>> item = LineItem(label="Jan 6 - API work", quantity=3, rate=100, amount=300)
        >>> item.amount
        Decimal('300')
    """

    label: str = Field(..., min_length=1)
    description: str = ""
    quantity: Decimal
    rate: Decimal
    amount: Decimal

    @field_validator("quantity", "rate", "amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Decimal:
        return to_decimal(v)
