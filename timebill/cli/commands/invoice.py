"""Invoice commands: one client, or every client with unbilled time."""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Optional

import click

from timebill.cli.commands import engine_from_context
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import (
    format_error,
    format_hours,
    format_info,
    format_money,
    format_success,
    format_table,
)
from timebill.db.database import get_session
from timebill.services.reconciliation_service import CreatedInvoice, ReconciliationService


def parse_issue_date(value: Optional[str]) -> Optional[dt.date]:
    """Parse an issue date in YYYY-MM-DD format.

    Raises:
        click.BadParameter: If the date format is invalid
    """
    if value is None:
        return None
    try:
        return dt.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(
            f"Invalid date format: {value}. Expected YYYY-MM-DD",
            param_hint="--issued",
        )


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """Parse a positive invoice amount.

    Raises:
        click.BadParameter: If the amount is not a positive number
    """
    if value is None:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid amount: {value}", param_hint="--amount")
    if not amount.is_finite():
        raise click.BadParameter(f"Invalid amount: {value}", param_hint="--amount")
    if amount <= 0:
        raise click.BadParameter("Amount must be positive", param_hint="--amount")
    return amount


def _echo_created(invoice: CreatedInvoice) -> None:
    click.echo(format_success(f"Invoice created: {invoice.invoice_number}"))
    click.echo(f"  Invoice ID: {invoice.invoice_id}")
    click.echo(f"  Client: {invoice.client_name}")
    click.echo(f"  Amount: {format_money(invoice.amount, invoice.currency)}")
    click.echo(f"  Hours: {format_hours(invoice.total_hours)}")
    click.echo(f"  Due: {invoice.due_date.isoformat()}")


@click.command(name="invoice")
@click.argument("client_name")
@click.option("--contract-id", type=int, default=None, help="Invoice this contract's time")
@click.option("--company-id", type=int, default=None, help="Issuing company (default: first)")
@click.option("--issued", type=str, default=None, help="Issue date YYYY-MM-DD (default: today)")
@click.option(
    "--amount",
    type=str,
    default=None,
    help="Invoice total when the contract has no rate configured",
)
@click.pass_context
def invoice_client(
    ctx: click.Context,
    client_name: str,
    contract_id: Optional[int],
    company_id: Optional[int],
    issued: Optional[str],
    amount: Optional[str],
):
    """Create an invoice from a client's unbilled time.

    Without --contract-id the client's first billing group is invoiced.

    Example:
        timebill invoice acme
        timebill invoice "Beta GmbH" --contract-id 4 --issued 2025-02-01
    """
    issued_date = parse_issue_date(issued)
    manual_amount = parse_amount(amount)

    with with_error_handling(ctx.obj["debug"]):
        click.echo(format_info(f"Invoicing unbilled time for {client_name}..."))
        with get_session(engine_from_context(ctx)) as session:
            service = ReconciliationService(session, ctx.obj["settings"])
            created = service.invoice_client(
                client_name,
                contract_id=contract_id,
                company_id=company_id,
                issued_date=issued_date,
                manual_amount=manual_amount,
            )
        click.echo()
        _echo_created(created)


@click.command(name="invoice-all")
@click.option("--company-id", type=int, default=None, help="Issuing company (default: first)")
@click.option("--issued", type=str, default=None, help="Issue date YYYY-MM-DD (default: today)")
@click.pass_context
def invoice_all(ctx: click.Context, company_id: Optional[int], issued: Optional[str]):
    """Create one invoice per unbilled client/contract group.

    A group that cannot be invoiced is reported and skipped; the remaining
    groups are still invoiced.

    Example:
        timebill invoice-all
        timebill invoice-all --issued 2025-02-01
    """
    issued_date = parse_issue_date(issued)

    with with_error_handling(ctx.obj["debug"]):
        click.echo(format_info("Invoicing all unbilled time..."))
        with get_session(engine_from_context(ctx)) as session:
            service = ReconciliationService(session, ctx.obj["settings"])
            result = service.generate_invoices_for_all_unbilled_clients(
                company_id=company_id, issued_date=issued_date
            )

        if not result.created and not result.failures:
            click.echo(format_info("No unbilled time found."))
            return

        if result.created:
            rows = [
                [
                    invoice.invoice_number,
                    invoice.client_name,
                    format_hours(invoice.total_hours),
                    format_money(invoice.amount, invoice.currency),
                ]
                for invoice in result.created
            ]
            click.echo()
            click.echo(format_table(["Invoice", "Client", "Hours", "Amount"], rows))

        for failure in result.failures:
            click.echo(format_error(f"{failure.client_name}: {failure.error.message}"))

        click.echo()
        click.echo(
            format_success(
                f"Created {len(result.created)} invoice(s), "
                f"{len(result.failures)} group(s) skipped"
            )
        )
