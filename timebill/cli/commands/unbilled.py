"""List unbilled time command."""

from typing import Optional

import click

from timebill.cli.commands import engine_from_context
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import (
    format_hours,
    format_info,
    format_money,
    format_success,
    format_table,
    format_warning,
)
from timebill.db.database import get_session
from timebill.readers.directory_reader import DirectoryReader
from timebill.reports.unbilled_report import export_groups_csv
from timebill.services.reconciliation_service import ReconciliationService


@click.command(name="list-unbilled")
@click.option(
    "--client",
    "client_name",
    type=str,
    default=None,
    help="Only show this client (case-insensitive partial name)",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also export the summary to this CSV file",
)
@click.pass_context
def list_unbilled(ctx: click.Context, client_name: Optional[str], csv_path: Optional[str]):
    """List unbilled time grouped by client and contract.

    Displays a table with:
    - Client and contract
    - Pricing model and number of sessions
    - Hours and the amount that would be invoiced

    Example:
        timebill list-unbilled
        timebill list-unbilled --client acme --csv unbilled.csv
    """
    with with_error_handling(ctx.obj["debug"]):
        with get_session(engine_from_context(ctx)) as session:
            service = ReconciliationService(session, ctx.obj["settings"])
            if client_name:
                client = DirectoryReader(session).find_client_by_name(client_name)
                groups = service.list_unbilled_groups_for_client(client.id)
            else:
                groups = service.list_unbilled_groups()

            if not groups:
                click.echo(format_info("No unbilled time found."))
                return

            headers = ["Client", "Contract", "Pricing", "Sessions", "Hours", "Amount"]
            rows = []
            for group in groups:
                pricing = service.compute_amount(group)
                amount = (
                    format_money(pricing.amount, pricing.currency)
                    if pricing.is_billable
                    else "no rate"
                )
                rows.append(
                    [
                        group.client_name,
                        group.contract_name or "-",
                        group.pricing_model.value,
                        len(group.entries),
                        format_hours(group.total_hours),
                        amount,
                    ]
                )

            click.echo()
            click.echo(format_table(headers, rows))
            click.echo()
            click.echo(format_success(f"Found {len(groups)} unbilled group(s)"))

            unpriced = [g for g in groups if not service.compute_amount(g).is_billable]
            if unpriced:
                click.echo(
                    format_warning(
                        f"{len(unpriced)} group(s) have no rate configured and "
                        "cannot be invoiced without an explicit amount"
                    )
                )

            if csv_path:
                output = export_groups_csv(groups, csv_path)
                click.echo(format_success(f"Exported summary to {output}"))
