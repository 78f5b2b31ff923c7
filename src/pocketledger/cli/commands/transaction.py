"""Transaction management commands."""

import click
from pocketledger.domain.transaction import DEFAULT_PAGE_SIZE, TransactionService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.user_resolution import current_user_id
from pocketledger.utils.amount_parser import parse_amount
from pocketledger.utils.date_parser import parse_date

TYPE_CHOICE = click.Choice(["income", "expense"], case_sensitive=False)


def _parse_inputs(ctx: click.Context, amount: str | None, date: str | None):
    """Parse amount and date options, exiting on bad input."""
    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)
    return txn_amount, txn_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--wallet", "wallet_id", type=int, required=True, help="Wallet ID")
@click.option("--type", "transaction_type", type=TYPE_CHOICE, required=True, help="income or expense")
@click.option("--amount", required=True, help="Positive amount (e.g., 150.00)")
@click.option("--category", "category_id", type=int, help="Category ID (omit for uncategorized)")
@click.option("--description", default="", help="Transaction description")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.pass_context
def add_transaction(
    ctx,
    wallet_id: int,
    transaction_type: str,
    amount: str,
    category_id: int | None,
    description: str,
    date: str | None,
):
    """Record a transaction and update the wallet balance.

    Examples:
        pocketledger transaction add --wallet 1 --type expense --amount 150 --category 2 --description "Coto"
        pocketledger transaction add --wallet 1 --type income --amount 250000 --date yesterday
    """
    service = TransactionService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    txn_amount, txn_date = _parse_inputs(ctx, amount, date)

    try:
        transaction_id = service.create_transaction(
            user_id=user_id,
            wallet_id=wallet_id,
            category_id=category_id,
            transaction_type=transaction_type,
            amount=txn_amount,
            description=description,
            date=txn_date,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    wallet = service.wallets.get_wallet(wallet_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"Wallet '{wallet.name}' balance: {wallet.balance}")


@transaction_group.command("list")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True, help="Items per page")
@click.option("--search", default="", help="Match description or category name")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["income", "expense", "all"], case_sensitive=False),
    default="all",
    help="Filter by type",
)
@click.pass_context
def list_transactions(ctx, page: int, page_size: int, search: str, transaction_type: str):
    """List the current user's transactions, newest first."""
    service = TransactionService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    try:
        result = service.list_transactions(
            user_id,
            page=page,
            page_size=page_size,
            search=search,
            transaction_type=transaction_type,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No transactions found.")
        return

    click.echo(f"\nPage {result.page}/{result.total_pages} ({result.total} transaction(s))")
    click.echo("-" * 100)
    for txn in result.items:
        sign = "+" if txn.signed_amount.is_positive() else "-"
        category = txn.category_name or "Uncategorized"
        click.echo(
            f"ID: {txn.id:4d} | {txn.date} | {sign}{str(txn.amount):>12s} | "
            f"{category:15s} | Wallet {txn.wallet_id} | {txn.description}"
        )


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--wallet", "wallet_id", type=int, help="Wallet ID")
@click.option("--type", "transaction_type", type=TYPE_CHOICE, help="income or expense")
@click.option("--amount", help="Positive amount")
@click.option("--category", "category_id", type=int, help="Category ID")
@click.option("--uncategorize", is_flag=True, help="Clear the category")
@click.option("--description", help="Transaction description")
@click.option("--date", help="Transaction date")
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: int,
    wallet_id: int | None,
    transaction_type: str | None,
    amount: str | None,
    category_id: int | None,
    uncategorize: bool,
    description: str | None,
    date: str | None,
):
    """Edit a transaction.

    Options left out keep their current value. The balance effect moves to
    the new wallet/amount/type.

    Examples:
        pocketledger transaction edit 7 --amount 50
        pocketledger transaction edit 7 --wallet 2 --type income
    """
    service = TransactionService(ctx.obj["db"])
    txn_amount, txn_date = _parse_inputs(ctx, amount, date)

    try:
        current = service.require_transaction(transaction_id)
        if uncategorize:
            new_category = None
        else:
            new_category = category_id if category_id is not None else current.category_id
        service.update_transaction(
            transaction_id=transaction_id,
            wallet_id=wallet_id if wallet_id is not None else current.wallet_id,
            category_id=new_category,
            transaction_type=transaction_type or current.transaction_type,
            amount=txn_amount if txn_amount is not None else current.amount,
            description=description if description is not None else current.description,
            date=txn_date,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int):
    """Delete a transaction and reverse its balance effect."""
    service = TransactionService(ctx.obj["db"])

    try:
        service.delete_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
