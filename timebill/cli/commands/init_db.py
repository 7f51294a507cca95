"""Initialize database command."""

import click

from timebill.cli.commands import engine_from_context
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import format_success
from timebill.db.database import init_db


@click.command(name="init-db")
@click.pass_context
def init_database(ctx: click.Context):
    """Create the database schema if it does not exist yet.

    Example:
        timebill init-db
        timebill --db-path ./billing.db init-db
    """
    with with_error_handling(ctx.obj["debug"]):
        engine = engine_from_context(ctx)
        init_db(engine)
        click.echo(format_success(f"Database ready: {engine.url.database}"))
