"""Error handling for CLI commands."""

import sys
import traceback

import click
from pydantic import ValidationError

from timebill.cli.utils.formatters import format_error, format_warning
from timebill.services.errors import (
    NoRateConfiguredError,
    NotFoundError,
    NoUnbilledWorkError,
    ReconciliationError,
    StoreError,
)

# (error class, title, exit code); checked in order
_RECONCILIATION_EXIT_CODES = (
    (NotFoundError, "Not Found", 1),
    (NoUnbilledWorkError, "Nothing To Invoice", 2),
    (NoRateConfiguredError, "No Rate Configured", 3),
    (StoreError, "Database Error", 4),
)

EXIT_CONFIGURATION = 5
EXIT_ABORTED = 130
EXIT_UNEXPECTED = 255


def handle_cli_error(error: BaseException, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error.

    Args:
        error: The exception that occurred
        debug: Whether to show the full stack trace for unexpected errors

    Returns:
        Exit code for the command
    """
    if isinstance(error, ReconciliationError):
        for error_class, title, exit_code in _RECONCILIATION_EXIT_CODES:
            if isinstance(error, error_class):
                break
        else:
            title, exit_code = "Reconciliation Error", EXIT_UNEXPECTED

        click.echo(format_error(f"{title}: {error.message}"))
        if error.recovery_hint:
            click.echo(format_warning(f"Hint: {error.recovery_hint}"))
        if debug and isinstance(error, StoreError) and error.__cause__ is not None:
            click.echo(f"Cause: {error.__cause__!r}")
        return exit_code

    if isinstance(error, ValidationError):
        click.echo(format_error("Configuration Error"))
        click.echo(str(error))
        click.echo(format_warning("Hint: Check your environment variables and .env file"))
        return EXIT_CONFIGURATION

    if isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return EXIT_ABORTED

    click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
    click.echo(str(error))

    if debug:
        click.echo("\nFull stack trace:")
        click.echo(
            "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        )
    else:
        click.echo(format_warning("\nRun with --debug flag for full stack trace"))

    return EXIT_UNEXPECTED


class with_error_handling:
    """
    Context manager that turns exceptions into messages and exit codes.

    Example:
        @click.command()
        @click.pass_context
        def my_command(ctx):
            with with_error_handling(ctx.obj["debug"]):
                ...
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def __enter__(self) -> "with_error_handling":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None or isinstance(exc_val, (SystemExit, click.exceptions.Exit)):
            return False
        sys.exit(handle_cli_error(exc_val, self.debug))
