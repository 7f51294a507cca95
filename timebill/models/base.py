"""Base model for timebill domain models.

Domain models are Pydantic models so rows coming out of the store are
validated once, at the boundary, before the engine groups and prices them.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all domain models.

    Example:
        >>> class Client(BaseDataModel):
        ...     name: str
        >>> Client(name="Acme").model_dump()
        {'name': 'Acme'}
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        extra="forbid",
        frozen=False,
    )


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a store value (float, int, str) to Decimal without float noise.

    Args:
        value: The value to convert, or None

    Returns:
        Decimal built from the value's string form, or None

    Raises:
        ValueError: If the value cannot be converted
    """
    if value is None or isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {value!r} to Decimal: {e}")
