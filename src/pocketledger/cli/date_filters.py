"""CLI helpers for date range resolution."""

from datetime import date

import click

from pocketledger.utils.date_parser import parse_date


def resolve_cli_month(
    ctx, *, year: int | None, month: int | None
) -> tuple[int | None, int | None]:
    """Resolve --year/--month options.

    A month without a year means that month of the current year. A year
    without a month is rejected. Neither means "current month" and is passed
    on as (None, None).
    """
    if year is not None and month is None:
        click.echo("Error: --year requires --month.", err=True)
        ctx.exit(1)
    if month is not None and year is None:
        year = date.today().year
    return year, month


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from explicit dates."""
    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    return start, end
