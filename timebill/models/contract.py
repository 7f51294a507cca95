"""Contract pricing terms.

Only the fields the reconciliation engine needs to price a billing group
are modelled here.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from timebill.models.base import BaseDataModel, to_decimal

DEFAULT_CURRENCY = "USD"


class PricingModel(str, Enum):
    """How a contract is billed.

    UNKNOWN stands for a stored contract type this engine does not price;
    such contracts always price to zero.
    """

    HOURLY = "hourly"
    FIXED_PRICE = "fixed_price"
    RETAINER = "retainer"
    UNKNOWN = "unknown"


class ContractTerms(BaseDataModel):
    """Pricing terms of a contract.

    Attributes:
        name: Contract display name (empty for client-only work)
        pricing_model: Billing method
        hourly_rate: Rate per hour, set for hourly contracts
        fixed_price: Total price, set for fixed-price contracts
        currency: ISO currency code

    Example:
        >>> terms = ContractTerms(pricing_model="hourly", hourly_rate=150)
        >>> terms.hourly_rate
        Decimal('150')
        >>> ContractTerms(pricing_model="fixed").pricing_model
        <PricingModel.UNKNOWN: 'unknown'>
    """

    name: str = Field("", description="Contract display name")
    pricing_model: PricingModel = Field(
        PricingModel.HOURLY, description="Billing method"
    )
    hourly_rate: Optional[Decimal] = Field(None, description="Hourly rate")
    fixed_price: Optional[Decimal] = Field(None, description="Fixed price")
    currency: str = Field(DEFAULT_CURRENCY, description="ISO currency code")

    @field_validator("hourly_rate", "fixed_price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v) -> Optional[Decimal]:
        """Convert stored float prices to Decimal."""
        return to_decimal(v)

    @field_validator("pricing_model", mode="before")
    @classmethod
    def read_pricing_model(cls, v) -> PricingModel:
        """Map stored contract types onto PricingModel, UNKNOWN when unrecognized."""
        if isinstance(v, PricingModel):
            return v
        if v is None:
            return PricingModel.HOURLY
        try:
            return PricingModel(str(v).strip().lower())
        except ValueError:
            return PricingModel.UNKNOWN

    @field_validator("name", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return v if v is not None else ""

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> str:
        """Fall back to USD and upper-case the code."""
        if v is None or not str(v).strip():
            return DEFAULT_CURRENCY
        return str(v).strip().upper()
