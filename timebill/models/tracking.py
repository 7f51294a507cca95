"""Time entry model.

A TimeEntry is one tracking session as the reconciliation engine sees it.
The engine never edits entries except to append the invoiced marker to
their notes. Stored values are taken as they are: a session that ends
before it starts, or carries negative hours, is still read.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from timebill.models.base import BaseDataModel, to_decimal

INVOICED_MARKER_PREFIX = "[Invoiced:"


def format_invoiced_marker(invoice_number: str) -> str:
    """Build the marker token written into notes, e.g. ``[Invoiced: inv.acme.2025-01-15]``."""
    return f"{INVOICED_MARKER_PREFIX} {invoice_number}]"


def append_invoiced_marker(notes: Optional[str], invoice_number: str) -> str:
    """Append the invoiced marker to free-text notes.

    Args:
        notes: Existing notes (may be empty or None)
        invoice_number: Number of the invoice that consumed the entry

    Returns:
        The new notes value

    Example:
        >>> append_invoiced_marker("Sprint review", "inv.acme.2025-01-15")
        'Sprint review [Invoiced: inv.acme.2025-01-15]'
        >>> append_invoiced_marker("", "inv.acme.2025-01-15")
        '[Invoiced: inv.acme.2025-01-15]'
    """
    text = notes or ""
    if text:
        text += " "
    return text + format_invoiced_marker(invoice_number)


class TimeEntry(BaseDataModel):
    """A single time tracking session.

    Attributes:
        id: Store identity
        client_id: Billing client (None when unassigned)
        contract_id: Governing contract (None for client-only work)
        project_label: Free-text project description
        start_time: When the session started
        end_time: When it ended (None while in progress)
        duration_seconds: Tracked duration in seconds
        hours: Decimal hours consumed (None when not yet computed)
        billable: Whether the session may be invoiced
        notes: Free text; also carries the invoiced marker
        deleted: Soft-delete flag

    Example:
        >>> entry = TimeEntry(
        ...     id=1,
        ...     client_id=7,
        ...     project_label="API work",
        ...     start_time=dt.datetime(2025, 1, 6, 9, 0),
        ...     hours=Decimal("3"),
        ... )
        >>> entry.is_unbilled
        True
    """

    id: int = Field(..., description="Store identity")
    client_id: Optional[int] = Field(None, description="Billing client")
    contract_id: Optional[int] = Field(None, description="Governing contract")
    project_label: str = Field("", description="Project description")
    start_time: dt.datetime = Field(..., description="Session start")
    end_time: Optional[dt.datetime] = Field(None, description="Session end")
    duration_seconds: Optional[int] = Field(None, description="Duration in seconds")
    hours: Optional[Decimal] = Field(None, description="Hours consumed")
    billable: bool = Field(True, description="Billable flag")
    notes: str = Field("", description="Free-text notes")
    deleted: bool = Field(False, description="Soft-delete flag")

    @field_validator("project_label", "notes", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        """Store NULLs arrive as None; treat them as empty text."""
        return v if v is not None else ""

    @field_validator("hours", mode="before")
    @classmethod
    def convert_hours(cls, v) -> Optional[Decimal]:
        """Convert stored float hours to Decimal for exact arithmetic."""
        return to_decimal(v)

    @property
    def is_invoiced(self) -> bool:
        """Whether the notes already carry an invoiced marker."""
        return INVOICED_MARKER_PREFIX in self.notes

    @property
    def is_unbilled(self) -> bool:
        """Whether the entry is eligible for invoicing."""
        return (
            self.billable
            and not self.deleted
            and self.hours is not None
            and not self.is_invoiced
        )
