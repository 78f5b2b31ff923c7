"""Budget commands."""

import click
from pocketledger.domain.budget import BudgetService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.date_filters import resolve_cli_month
from pocketledger.cli.user_resolution import current_user_id
from pocketledger.utils.amount_parser import parse_amount


def _parse_limit(ctx: click.Context, limit: str):
    try:
        return parse_amount(limit)
    except ValueError as e:
        click.echo(f"Error: Invalid limit: {e}", err=True)
        ctx.exit(1)


@click.group()
def budget_group():
    """Manage monthly budgets."""
    pass


@budget_group.command("set")
@click.argument("category_id", type=int)
@click.argument("limit")
@click.pass_context
def set_budget(ctx, category_id: int, limit: str):
    """Set a monthly spending limit on a category.

    Examples:
        pocketledger budget set 2 80000
    """
    service = BudgetService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    budget_limit = _parse_limit(ctx, limit)

    try:
        budget_id = service.create_budget(user_id, category_id, budget_limit)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created budget {budget_id}")


@budget_group.command("list")
@click.option("--month", type=click.IntRange(1, 12), help="Month (1-12), default current")
@click.option("--year", type=int, help="Year, default current")
@click.pass_context
def list_budgets(ctx, month: int | None, year: int | None):
    """Show every budget with what was spent in the month."""
    service = BudgetService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    year, month = resolve_cli_month(ctx, year=year, month=month)

    try:
        progress = service.list_budget_progress(user_id, year=year, month=month)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not progress:
        click.echo("No budgets found.")
        return

    first = progress[0]
    click.echo(f"\nBudgets {first.period_start} to {first.period_end}:")
    click.echo("-" * 80)
    for p in progress:
        flag = "  OVER LIMIT" if p.is_over_limit else ""
        click.echo(
            f"ID: {p.budget_id:3d} | {p.category_name:15s} | "
            f"spent {str(p.spent):>12s} of {str(p.limit):>12s} | "
            f"left {str(p.remaining):>12s}{flag}"
        )


@budget_group.command("edit")
@click.argument("budget_id", type=int)
@click.option("--limit", help="New limit")
@click.option("--category", "category_id", type=int, help="New category ID")
@click.pass_context
def edit_budget(ctx, budget_id: int, limit: str | None, category_id: int | None):
    """Change a budget's limit or category."""
    service = BudgetService(ctx.obj["db"])
    new_limit = _parse_limit(ctx, limit) if limit is not None else None

    try:
        service.update_budget(budget_id, limit=new_limit, category_id=category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated budget {budget_id}")


@budget_group.command("delete")
@click.argument("budget_id", type=int)
@click.pass_context
def delete_budget(ctx, budget_id: int):
    """Delete a budget."""
    service = BudgetService(ctx.obj["db"])

    try:
        service.delete_budget(budget_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted budget {budget_id}")


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
