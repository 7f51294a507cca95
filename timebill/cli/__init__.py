"""timebill CLI.

Command-line interface for turning unbilled tracked time into invoices.
"""

from typing import Optional

import click

from timebill.cli.commands.init_db import init_database
from timebill.cli.commands.invoice import invoice_all, invoice_client
from timebill.cli.commands.unbilled import list_unbilled
from timebill.cli.error_handlers import with_error_handling
from timebill.config.logging_config import LoggingConfig, configure_logging
from timebill.config.settings import get_config

__version__ = "1.0.0"


@click.group(help="timebill - Invoice unbilled tracked time")
@click.version_option(version=__version__)
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    default=None,
    help="SQLite database file (overrides DATABASE_PATH)",
)
@click.option("--debug", is_flag=True, default=False, help="Verbose logs and stack traces")
@click.pass_context
def cli(ctx: click.Context, db_path: Optional[str], debug: bool):
    """timebill CLI main entry point."""
    with with_error_handling(debug):
        settings = get_config()
        configure_logging(LoggingConfig.from_settings(settings, debug=debug))

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["db_path"] = db_path
    ctx.obj["debug"] = debug or settings.debug


cli.add_command(init_database)
cli.add_command(list_unbilled)
cli.add_command(invoice_client)
cli.add_command(invoice_all)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
