"""Group (shared expense) commands."""

import click
from pocketledger.domain.entities import SplitMode
from pocketledger.domain.group import GroupService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.date_filters import resolve_cli_date_range, resolve_cli_month
from pocketledger.cli.user_resolution import current_user_id
from pocketledger.utils.amount_parser import parse_amount
from pocketledger.utils.date_parser import parse_date

MODE_CHOICE = click.Choice([mode.value for mode in SplitMode], case_sensitive=False)


def _parse_expense_inputs(ctx: click.Context, amount: str, splits: tuple[str, ...], date: str | None):
    """Parse amount, MEMBER_ID=AMOUNT splits and date, exiting on bad input."""
    try:
        total = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    member_amounts = []
    for item in splits:
        member, sep, value = item.partition("=")
        try:
            if not sep:
                raise ValueError("expected MEMBER_ID=AMOUNT")
            member_amounts.append((int(member), parse_amount(value)))
        except ValueError as e:
            click.echo(f"Error: Invalid split '{item}': {e}", err=True)
            ctx.exit(1)

    expense_date = None
    if date is not None:
        try:
            expense_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)
    return total, member_amounts or None, expense_date


def _expense_options(func):
    """Options shared by add-expense and edit-expense."""
    for option in reversed(
        [
            click.option("--payer", "payer_id", type=int, required=True, help="Member ID who paid"),
            click.option("--description", default="", help="Expense description"),
            click.option("--mode", type=MODE_CHOICE, default=SplitMode.EQUAL.value, help="Split mode"),
            click.option(
                "--participant",
                "participant_ids",
                type=int,
                multiple=True,
                help="EQUAL mode: member ID sharing the cost (repeatable, default all)",
            ),
            click.option(
                "--split",
                "splits",
                multiple=True,
                help="MANUAL mode: MEMBER_ID=AMOUNT (repeatable)",
            ),
            click.option("--date", help="Expense date (YYYY-MM-DD or relative like 'today')"),
        ]
    ):
        func = option(func)
    return func


@click.group()
def group_group():
    """Manage groups and shared expenses."""
    pass


@group_group.command("create")
@click.argument("name")
@click.option("--icon", help="Icon (emoji)")
@click.pass_context
def create_group(ctx, name: str, icon: str | None):
    """Create a group owned by the current user.

    The owner is added as the first member.
    """
    service = GroupService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    try:
        group_id = service.create_group(user_id, name, icon=icon)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created group '{name}' (ID: {group_id})")


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List the current user's groups."""
    service = GroupService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    groups = service.list_groups(user_id)
    if not groups:
        click.echo("No groups found.")
        return

    for g in groups:
        click.echo(
            f"ID: {g.id:3d} | {g.icon} {g.name:20s} | "
            f"{g.member_count} member(s) | {g.expense_count} expense(s)"
        )


@group_group.command("show")
@click.argument("group_id", type=int)
@click.option("--month", type=click.IntRange(1, 12), help="Only expenses of this month")
@click.option("--year", type=int, help="Year of --month")
@click.pass_context
def show_group(ctx, group_id: int, month: int | None, year: int | None):
    """Show members and expenses of a group."""
    service = GroupService(ctx.obj["db"])
    year, month = resolve_cli_month(ctx, year=year, month=month)

    try:
        detail = service.get_group_detail(group_id, year=year, month=month)
    except ValueError as e:
        handle_domain_error(ctx, e)

    names = {m.id: m.name for m in detail.members}
    click.echo(f"\n{detail.group.icon} {detail.group.name} (ID: {detail.group.id})")
    click.echo("\nMembers:")
    for m in detail.members:
        linked = " (linked)" if m.user_id is not None else ""
        click.echo(f"  {m.id:3d}: {m.name}{linked}")

    click.echo("\nExpenses:")
    if not detail.expenses:
        click.echo("  No expenses found.")
    for e in detail.expenses:
        marker = " [settlement]" if service.is_settlement(e) else ""
        click.echo(
            f"  ID: {e.id:3d} | {e.date} | {str(e.amount):>12s} | "
            f"paid by {names.get(e.payer_id, e.payer_id)} | {e.description}{marker}"
        )
        for s in e.splits:
            click.echo(f"        {names.get(s.member_id, s.member_id)}: {s.amount}")


@group_group.command("add-member")
@click.argument("group_id", type=int)
@click.argument("name_or_email")
@click.pass_context
def add_member(ctx, group_id: int, name_or_email: str):
    """Add a member by name, or by email of a registered user.

    Examples:
        pocketledger group add-member 1 "Juan"
        pocketledger group add-member 1 ana@example.com
    """
    service = GroupService(ctx.obj["db"])

    try:
        member_id = service.add_member(group_id, name_or_email)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added member {member_id} to group {group_id}")


@group_group.command("add-expense")
@click.argument("group_id", type=int)
@click.argument("amount")
@_expense_options
@click.pass_context
def add_expense(
    ctx,
    group_id: int,
    amount: str,
    payer_id: int,
    description: str,
    mode: str,
    participant_ids: tuple[int, ...],
    splits: tuple[str, ...],
    date: str | None,
):
    """Record a shared expense.

    Examples:
        pocketledger group add-expense 1 300 --payer 1 --description "Asado"
        pocketledger group add-expense 1 100 --payer 1 --mode manual --split 1=70 --split 2=30
        pocketledger group add-expense 1 500 --payer 2 --mode full_reimburse
    """
    service = GroupService(ctx.obj["db"])
    total, member_amounts, expense_date = _parse_expense_inputs(ctx, amount, splits, date)

    try:
        expense_id = service.create_expense(
            group_id=group_id,
            description=description,
            amount=total,
            payer_id=payer_id,
            split_mode=mode,
            participant_ids=list(participant_ids) or None,
            member_amounts=member_amounts,
            date=expense_date,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created expense {expense_id}")


@group_group.command("edit-expense")
@click.argument("expense_id", type=int)
@click.argument("amount")
@_expense_options
@click.pass_context
def edit_expense(
    ctx,
    expense_id: int,
    amount: str,
    payer_id: int,
    description: str,
    mode: str,
    participant_ids: tuple[int, ...],
    splits: tuple[str, ...],
    date: str | None,
):
    """Replace an expense and recompute all of its splits."""
    service = GroupService(ctx.obj["db"])
    total, member_amounts, expense_date = _parse_expense_inputs(ctx, amount, splits, date)

    try:
        service.update_expense(
            expense_id=expense_id,
            description=description,
            amount=total,
            payer_id=payer_id,
            split_mode=mode,
            participant_ids=list(participant_ids) or None,
            member_amounts=member_amounts,
            date=expense_date,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated expense {expense_id}")


@group_group.command("balance")
@click.argument("group_id", type=int)
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@click.pass_context
def group_balance(ctx, group_id: int, start_date: str | None, end_date: str | None):
    """Show the outstanding balance and what each member paid and owes."""
    service = GroupService(ctx.obj["db"])
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        outstanding = service.compute_outstanding_balance(group_id, start, end)
        positions = service.member_positions(group_id, start, end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Outstanding: {outstanding}")
    click.echo("-" * 60)
    for p in positions:
        click.echo(f"{p.name:20s} | paid {str(p.paid):>12s} | owes {str(p.owed):>12s} | net {p.net}")


@group_group.command("delete")
@click.argument("group_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_group(ctx, group_id: int, yes: bool):
    """Delete a group with all its members and expenses (owner only)."""
    service = GroupService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    if not yes and not click.confirm(f"Delete group {group_id} and all its expenses?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_group(group_id, user_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted group {group_id}")


def register_commands(cli):
    """Register group commands with main CLI."""
    cli.add_command(group_group, name="group")
