"""Unbilled-time reconciliation engine.

This module turns unbilled tracking sessions into invoices:
1. Read every unbilled session with its client and contract pricing
2. Group sessions by (client, contract)
3. Price each group under its contract's pricing model
4. Write the invoice, its recipient link and line items
5. Append an ``[Invoiced: <number>]`` marker to each consumed session

The notes marker is the only record that a session was billed. Each invoice
is written in one transaction, but nothing guards against two processes
reconciling the same database at the same time: both may select the same
sessions before either commits its markers. The engine assumes a single
writer.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timebill.aggregators.unbilled_aggregator import group_unbilled_rows
from timebill.calculators.invoice_calculator import (
    InvoiceAmount,
    build_line_items,
    compute_amount,
)
from timebill.config.settings import TimebillConfig, get_config
from timebill.models.base import to_decimal
from timebill.models.billing import BillingGroup, GroupKey
from timebill.models.contract import PricingModel
from timebill.readers.directory_reader import DirectoryReader
from timebill.readers.tracking_reader import TrackingReader
from timebill.services.document_numbers import generate_invoice_number
from timebill.services.errors import (
    NoRateConfiguredError,
    NotFoundError,
    NoUnbilledWorkError,
    ReconciliationError,
    StoreError,
)
from timebill.utils.logging_utils import LogContext
from timebill.writers.invoice_writer import InvoiceHeader, InvoiceWriter

logger = logging.getLogger(__name__)


@dataclass
class CreatedInvoice:
    """Summary of an invoice created from a billing group.

    Attributes:
        invoice_id: Store id of the invoice
        invoice_number: Human-readable invoice number
        client_name: Billed client
        amount: Invoice total
        currency: ISO currency code
        total_hours: Hours consumed by the invoice
        due_date: Payment due date
    """

    invoice_id: int
    invoice_number: str
    client_name: str
    amount: Decimal
    currency: str
    total_hours: Decimal
    due_date: dt.date


@dataclass
class GroupFailure:
    """A billing group the batch could not invoice."""

    key: GroupKey
    client_name: str
    error: ReconciliationError


@dataclass
class BatchInvoiceResult:
    """Outcome of invoicing every unbilled group.

    Attributes:
        created: Invoices written, in group order
        failures: Groups skipped, with the reason
    """

    created: List[CreatedInvoice] = field(default_factory=list)
    failures: List[GroupFailure] = field(default_factory=list)

    @property
    def invoice_ids(self) -> List[int]:
        return [invoice.invoice_id for invoice in self.created]


class ReconciliationService:
    """Reconciles unbilled tracked time into invoices.

    Attributes:
        session: Database session shared by readers and writer
        config: Application settings (due days)

    Example:
        >>> with get_session() as session:
        ...     service = ReconciliationService(session)
        ...     result = service.generate_invoices_for_all_unbilled_clients()
        >>> result.invoice_ids
        [12, 13]
    """

    def __init__(self, session: Session, config: Optional[TimebillConfig] = None):
        """Initialize the service.

        Args:
            session: Open database session
            config: Settings; the global configuration when omitted
        """
        self.session = session
        self.config = config or get_config()
        self.tracking_reader = TrackingReader(session)
        self.directory_reader = DirectoryReader(session)
        self.invoice_writer = InvoiceWriter(session)

    def list_unbilled_groups(self) -> List[BillingGroup]:
        """List every billing group with unbilled hours.

        Returns:
            Groups ordered by client id, then contract id

        Raises:
            StoreError: If the store cannot be read
        """
        groups = group_unbilled_rows(self.tracking_reader.read_unbilled_rows())
        logger.info(f"Found {len(groups)} unbilled group(s)")
        return groups

    def list_unbilled_groups_for_client(self, client_id: int) -> List[BillingGroup]:
        """List the billing groups of one client.

        Same output as filtering list_unbilled_groups() on client_id.

        Raises:
            StoreError: If the store cannot be read
        """
        rows = self.tracking_reader.read_unbilled_rows(client_id=client_id)
        return group_unbilled_rows(rows)

    def compute_amount(self, group: BillingGroup) -> InvoiceAmount:
        """Price a billing group; zero means no rate or price is configured."""
        return compute_amount(group)

    def due_date_for(self, issued_date: dt.date) -> dt.date:
        """Due date after the configured payment term."""
        return issued_date + dt.timedelta(days=self.config.invoice_due_days)

    def _resolve_amount(
        self,
        group: BillingGroup,
        manual_amount: Optional[Union[Decimal, float, str]] = None,
    ) -> InvoiceAmount:
        pricing = compute_amount(group)
        if pricing.is_billable:
            return pricing

        manual = to_decimal(manual_amount)
        if manual is not None and manual > 0:
            return InvoiceAmount(amount=manual, currency=pricing.currency)

        if group.pricing_model == PricingModel.UNKNOWN:
            reason = "contract type is not recognized"
        elif pricing.amount < 0:
            reason = f"computed amount {pricing.amount} is negative"
        else:
            reason = f"no {group.pricing_model.value.replace('_', ' ')} rate configured"
        raise NoRateConfiguredError(
            f"Cannot calculate invoice amount for {group.display_name}: {reason}",
            recovery_hint="Set a rate or price on the contract, or pass an amount",
        )

    def generate_invoice_from_group(
        self,
        group: BillingGroup,
        company_id: int,
        invoice_number: str,
        issued_date: dt.date,
        due_date: dt.date,
        manual_amount: Optional[Union[Decimal, float, str]] = None,
    ) -> int:
        """Write an invoice for a billing group and mark its sessions invoiced.

        The header, recipient link, line items and markers are written in
        one transaction: either all of them are committed or none are.

        Args:
            group: Billing group to invoice
            company_id: Issuing company
            invoice_number: Unique invoice number
            issued_date: Issue date
            due_date: Payment due date
            manual_amount: Total to use when the contract has no rate;
                ignored when the contract prices the group itself

        Returns:
            The new invoice id

        Raises:
            NoUnbilledWorkError: If the group has no entries
            NoRateConfiguredError: If the group prices to zero and no
                manual amount is given
            NotFoundError: If the company does not exist
            StoreError: If any write fails (nothing is committed)
        """
        if not group.entries:
            raise NoUnbilledWorkError(f"No unbilled time for {group.display_name}")

        pricing = self._resolve_amount(group, manual_amount)
        manual = None if compute_amount(group).is_billable else pricing.amount
        company_id = self.directory_reader.resolve_company_id(company_id)
        items = build_line_items(group, manual_amount=manual)

        header = InvoiceHeader(
            invoice_number=invoice_number,
            company_id=company_id,
            amount=pricing.amount,
            currency=pricing.currency,
            description=f"Time tracking: {issued_date.strftime('%B %Y')}",
            issued_date=issued_date,
            due_date=due_date,
        )

        with LogContext(client_name=group.client_name, invoice_number=invoice_number):
            try:
                invoice_id = self.invoice_writer.create_invoice(header)
                self.invoice_writer.link_recipient(invoice_id, group.client_id)
                self.invoice_writer.add_line_items(invoice_id, items)
                self.invoice_writer.mark_entries_invoiced(group.entries, invoice_number)
                self.session.commit()
            except StoreError:
                self.session.rollback()
                raise
            except SQLAlchemyError as e:
                self.session.rollback()
                raise StoreError(f"Failed to commit invoice {invoice_number}: {e}") from e

            logger.info(
                f"Created invoice {invoice_number} for {group.display_name}: "
                f"{pricing.amount} {pricing.currency}, {len(items)} line item(s), "
                f"{len(group.entries)} session(s) marked"
            )

        return invoice_id

    def generate_invoices_for_all_unbilled_clients(
        self,
        company_id: Optional[int] = None,
        issued_date: Optional[dt.date] = None,
    ) -> BatchInvoiceResult:
        """Invoice every unbilled group, continuing past per-group failures.

        Groups that price to zero are reported as NoRateConfiguredError
        failures. Any other reconciliation error for one group is logged and
        recorded, and the batch moves on to the next group.

        Args:
            company_id: Issuing company (first company on file when omitted)
            issued_date: Issue date (today when omitted)

        Returns:
            BatchInvoiceResult with created invoices and failures

        Raises:
            NotFoundError: If no issuing company exists
            StoreError: If the unbilled sessions cannot be read
        """
        issued = issued_date or dt.date.today()
        due = self.due_date_for(issued)
        result = BatchInvoiceResult()

        groups = self.list_unbilled_groups()
        if not groups:
            return result
        company_id = self.directory_reader.resolve_company_id(company_id)

        for group in groups:
            with LogContext(client_name=group.client_name):
                try:
                    pricing = self._resolve_amount(group)
                    number = generate_invoice_number(
                        self.session, group.client_name, issued
                    )
                    invoice_id = self.generate_invoice_from_group(
                        group, company_id, number, issued, due
                    )
                except ReconciliationError as e:
                    if isinstance(e, StoreError):
                        self.session.rollback()
                    logger.warning(f"Skipping {group.display_name}: {e.message}")
                    result.failures.append(
                        GroupFailure(key=group.key, client_name=group.display_name, error=e)
                    )
                    continue

            result.created.append(
                CreatedInvoice(
                    invoice_id=invoice_id,
                    invoice_number=number,
                    client_name=group.display_name,
                    amount=pricing.amount,
                    currency=pricing.currency,
                    total_hours=group.total_hours,
                    due_date=due,
                )
            )

        logger.info(
            f"Batch complete: {len(result.created)} invoice(s) created, "
            f"{len(result.failures)} group(s) failed"
        )
        return result

    def invoice_client(
        self,
        client_name: str,
        contract_id: Optional[int] = None,
        company_id: Optional[int] = None,
        issued_date: Optional[dt.date] = None,
        manual_amount: Optional[Union[Decimal, float, str]] = None,
    ) -> CreatedInvoice:
        """Invoice one client's unbilled time.

        Args:
            client_name: Full or partial client name (case-insensitive)
            contract_id: Group to invoice; the client's first group when omitted
            company_id: Issuing company (first company on file when omitted)
            issued_date: Issue date (today when omitted)
            manual_amount: Total to use when the contract has no rate

        Returns:
            CreatedInvoice summary

        Raises:
            NotFoundError: If the client, contract group or company is missing
            NoUnbilledWorkError: If the client has no unbilled time
            NoRateConfiguredError: If the group cannot be priced
            StoreError: If the store cannot be read or written
        """
        client = self.directory_reader.find_client_by_name(client_name)
        groups = self.list_unbilled_groups_for_client(client.id)
        if not groups:
            raise NoUnbilledWorkError(
                f"No unbilled time found for {client.name}",
                recovery_hint="Track billable time for this client first",
            )

        if contract_id is None:
            group = groups[0]
        else:
            matching = [g for g in groups if g.contract_id == contract_id]
            if not matching:
                raise NotFoundError(
                    f"No unbilled time under contract {contract_id} for {client.name}"
                )
            group = matching[0]

        pricing = self._resolve_amount(group, manual_amount)
        company_id = self.directory_reader.resolve_company_id(company_id)
        issued = issued_date or dt.date.today()
        due = self.due_date_for(issued)
        number = generate_invoice_number(self.session, client.name, issued)

        invoice_id = self.generate_invoice_from_group(
            group, company_id, number, issued, due, manual_amount=manual_amount
        )
        return CreatedInvoice(
            invoice_id=invoice_id,
            invoice_number=number,
            client_name=group.display_name,
            amount=pricing.amount,
            currency=pricing.currency,
            total_hours=group.total_hours,
            due_date=due,
        )
