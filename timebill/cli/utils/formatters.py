"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import List, Sequence

import click


def format_success(message: str) -> str:
    """Format a success message in green."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message in red."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message in yellow."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message in blue."""
    return click.style(f"ℹ {message}", fg="blue")


def format_money(amount: Decimal, currency: str) -> str:
    """Format an amount with two decimals and its currency.

    Example:
        >>> format_money(Decimal("1575.0"), "USD")
        '1,575.00 USD'
    """
    return f"{amount:,.2f} {currency}"


def format_hours(hours: Decimal) -> str:
    """Format decimal hours with two decimals, e.g. ``5.00h``."""
    return f"{hours:.2f}h"


def format_table(
    headers: Sequence[str], rows: List[Sequence[object]], max_width: int = 40
) -> str:
    """Render rows as a boxed, left-aligned text table.

    Args:
        headers: Column headers
        rows: Data rows; cells are converted with str()
        max_width: Cells longer than this are truncated

    Returns:
        The table as a single string (empty when there are no headers)
    """
    if not headers:
        return ""

    cells = [[str(cell)[:max_width] for cell in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(cell))

    def render(values: Sequence[str]) -> str:
        padded = [f" {value:<{widths[i]}} " for i, value in enumerate(values[: len(widths)])]
        return "|" + "|".join(padded) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    lines = [separator, render(list(headers)), separator]
    if cells:
        lines.extend(render(row) for row in cells)
        lines.append(separator)
    return "\n".join(lines)
