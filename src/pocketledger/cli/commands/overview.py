"""Monthly overview and advice commands."""

import click
from pocketledger.advisor import create_default_advisor
from pocketledger.domain.categorization import CategorizationService
from pocketledger.domain.overview import OverviewService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.date_filters import resolve_cli_month
from pocketledger.cli.user_resolution import current_user_id


@click.command("overview")
@click.option("--month", type=click.IntRange(1, 12), help="Month (1-12), default current")
@click.option("--year", type=int, help="Year, default current")
@click.pass_context
def show_overview(ctx, month: int | None, year: int | None):
    """Show balance, income and expenses for a month."""
    service = OverviewService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    year, month = resolve_cli_month(ctx, year=year, month=month)

    try:
        summary = service.monthly_overview(user_id, year=year, month=month)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nOverview {summary.period_start} to {summary.period_end}")
    click.echo("=" * 50)
    click.echo(f"Total balance: {summary.total_balance}")
    click.echo(f"Income:        {summary.income}")
    click.echo(f"Expenses:      {summary.expense}")
    click.echo(f"Net:           {summary.net}")
    if summary.expense_by_category:
        click.echo("\nExpenses by category:")
        ranked = sorted(summary.expense_by_category.items(), key=lambda item: item[1], reverse=True)
        for name, amount in ranked:
            click.echo(f"  {name:20s} {str(amount):>12s}")


@click.command("advise")
@click.option("--month", type=click.IntRange(1, 12), help="Month (1-12), default current")
@click.option("--year", type=int, help="Year, default current")
@click.option("--local", is_flag=True, help="Skip the advisor and print the local summary")
@click.pass_context
def advise(ctx, month: int | None, year: int | None, local: bool):
    """Get advice on a month of spending."""
    service = CategorizationService(
        ctx.obj["db"], advisor=None if local else create_default_advisor()
    )
    user_id = current_user_id(ctx)
    year, month = resolve_cli_month(ctx, year=year, month=month)

    try:
        text = service.advise(user_id, year=year, month=month)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(text)


def register_commands(cli):
    """Register overview and advise commands with main CLI."""
    cli.add_command(show_overview)
    cli.add_command(advise)
