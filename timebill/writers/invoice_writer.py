"""Invoice writer for persisting reconciliation results.

InvoiceWriter stages every write of one invoice in the caller's session:
the header, the recipient link, the line items and the invoiced markers
on consumed sessions. It flushes but never commits; the caller owns the
transaction so a failure at any step can be rolled back as a whole.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timebill.db.models import (
    Invoice,
    InvoiceLineItem,
    InvoiceRecipient,
    TrackingSession,
)
from timebill.models.billing import LineItem
from timebill.models.tracking import TimeEntry, append_invoiced_marker
from timebill.services.errors import StoreError

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"


@dataclass
class InvoiceHeader:
    """Fields of a new invoice header.

    Attributes:
        invoice_number: Unique human-readable number
        company_id: Issuing company
        amount: Invoice total
        currency: ISO currency code
        description: Free-text description
        issued_date: Issue date
        due_date: Payment due date
    """

    invoice_number: str
    company_id: int
    amount: Decimal
    currency: str
    description: str
    issued_date: dt.date
    due_date: dt.date


class InvoiceWriter:
    """Stages invoice writes in a database session.

    Example:
        >>> writer = InvoiceWriter(session)
        >>> invoice_id = writer.create_invoice(header)
        >>> writer.link_recipient(invoice_id, client_id=3)
        >>> writer.add_line_items(invoice_id, items)
        >>> writer.mark_entries_invoiced(entries, header.invoice_number)
        >>> session.commit()
    """

    def __init__(self, session: Session):
        """Initialize the writer.

        Args:
            session: Open database session; committed by the caller
        """
        self.session = session

    def create_invoice(self, header: InvoiceHeader) -> int:
        """Insert an invoice header with pending status.

        Returns:
            The new invoice id

        Raises:
            StoreError: If the insert fails
        """
        invoice = Invoice(
            invoice_num=header.invoice_number,
            company_id=header.company_id,
            amount=float(header.amount),
            currency=header.currency,
            description=header.description,
            status=STATUS_PENDING,
            issued_date=header.issued_date,
            due_date=header.due_date,
        )
        try:
            self.session.add(invoice)
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(
                f"Failed to create invoice {header.invoice_number}: {e}"
            ) from e

        logger.debug(f"Staged invoice {header.invoice_number} as id {invoice.id}")
        return invoice.id

    def link_recipient(self, invoice_id: int, client_id: int) -> None:
        """Link an invoice to the client it bills.

        Raises:
            StoreError: If the insert fails
        """
        try:
            self.session.add(InvoiceRecipient(invoice_id=invoice_id, client_id=client_id))
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to link invoice to client: {e}") from e

    def add_line_items(self, invoice_id: int, items: Iterable[LineItem]) -> int:
        """Insert line items for an invoice.

        Returns:
            Number of line items written

        Raises:
            StoreError: If an insert fails
        """
        rows = [
            InvoiceLineItem(
                invoice_id=invoice_id,
                item_name=item.label,
                description=item.description,
                quantity=float(item.quantity),
                rate=float(item.rate),
                amount=float(item.amount),
            )
            for item in items
        ]
        try:
            self.session.add_all(rows)
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create line item: {e}") from e
        return len(rows)

    def mark_entries_invoiced(
        self, entries: Iterable[TimeEntry], invoice_number: str
    ) -> List[int]:
        """Append the invoiced marker to each entry's stored notes.

        The marker is appended to the notes as currently stored, not to the
        possibly stale copy held by the entry.

        Returns:
            Ids of the sessions marked

        Raises:
            StoreError: If a session is missing or the update fails
        """
        marked = []
        try:
            for entry in entries:
                tracked = self.session.get(TrackingSession, entry.id)
                if tracked is None:
                    raise StoreError(f"Tracking session {entry.id} no longer exists")
                tracked.notes = append_invoiced_marker(tracked.notes, invoice_number)
                marked.append(entry.id)
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to mark sessions as invoiced: {e}") from e

        return marked
