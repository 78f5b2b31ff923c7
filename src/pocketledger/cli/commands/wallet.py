"""Wallet management commands."""

import click
from pocketledger import config
from pocketledger.domain.entities import WalletKind
from pocketledger.domain.wallet import WalletService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.user_resolution import current_user_id
from pocketledger.utils.amount_parser import parse_amount

KIND_CHOICE = click.Choice([kind.value for kind in WalletKind], case_sensitive=False)


def _parse_amount_option(ctx: click.Context, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def wallet_group():
    """Manage wallets."""
    pass


@wallet_group.command("create")
@click.argument("name", metavar="WALLET_NAME")
@click.option("--currency", default=None, help="Currency code (default from configuration)")
@click.option("--balance", default="0", help="Opening balance")
@click.option("--kind", type=KIND_CHOICE, default=WalletKind.DEBIT.value, help="Wallet kind")
@click.option("--bank", help="Bank name")
@click.option("--credit-limit", default="0", help="Credit limit (informational)")
@click.pass_context
def create_wallet(
    ctx,
    name: str,
    currency: str | None,
    balance: str,
    kind: str,
    bank: str | None,
    credit_limit: str,
):
    """Create a wallet for the current user.

    Examples:
        pocketledger --user ana@example.com wallet create "Galicia" --balance 1000 --bank Galicia
        pocketledger --user 1 wallet create "Visa" --kind CREDIT --credit-limit 500000
    """
    service = WalletService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    opening = _parse_amount_option(ctx, balance, "balance")
    limit = _parse_amount_option(ctx, credit_limit, "credit limit")

    try:
        wallet_id = service.create_wallet(
            user_id=user_id,
            name=name,
            currency=currency or config.DEFAULT_CURRENCY,
            balance=opening,
            kind=WalletKind(kind.upper()),
            bank=bank,
            credit_limit=limit,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created wallet '{name}' (ID: {wallet_id})")


@wallet_group.command("list")
@click.pass_context
def list_wallets(ctx):
    """List the current user's wallets and the total balance."""
    service = WalletService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    wallets = service.list_wallets(user_id)
    if not wallets:
        click.echo("No wallets found.")
        return

    click.echo("\nWallets:")
    click.echo("-" * 80)
    for w in wallets:
        bank = f" | Bank: {w.bank}" if w.bank else ""
        click.echo(
            f"ID: {w.id:3d} | {w.name:20s} | {w.kind.value:6s} | "
            f"{w.currency} {str(w.balance):>12s}{bank}"
        )
    click.echo("-" * 80)
    click.echo(f"Total balance: {service.total_balance(user_id)}")


@wallet_group.command("edit")
@click.argument("wallet_id", type=int)
@click.option("--name", help="New name")
@click.option("--currency", help="New currency code")
@click.option("--balance", help="Reset the stored balance to this value")
@click.option("--kind", type=KIND_CHOICE, help="New wallet kind")
@click.option("--bank", help="New bank name")
@click.option("--credit-limit", help="New credit limit")
@click.pass_context
def edit_wallet(
    ctx,
    wallet_id: int,
    name: str | None,
    currency: str | None,
    balance: str | None,
    kind: str | None,
    bank: str | None,
    credit_limit: str | None,
):
    """Edit a wallet.

    --balance overwrites the stored balance; it is not added to it.
    """
    service = WalletService(ctx.obj["db"])
    new_balance = _parse_amount_option(ctx, balance, "balance")
    new_limit = _parse_amount_option(ctx, credit_limit, "credit limit")

    try:
        service.update_wallet(
            wallet_id,
            name=name,
            currency=currency,
            balance=new_balance,
            kind=WalletKind(kind.upper()) if kind else None,
            bank=bank,
            credit_limit=new_limit,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated wallet {wallet_id}")


@wallet_group.command("delete")
@click.argument("wallet_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_wallet(ctx, wallet_id: int, yes: bool):
    """Delete a wallet together with all its transactions."""
    service = WalletService(ctx.obj["db"])

    wallet = service.get_wallet(wallet_id)
    if wallet is None:
        click.echo(f"Error: Wallet {wallet_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete wallet '{wallet.name}' (ID: {wallet_id}) and all its transactions?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        removed = service.delete_wallet(wallet_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted wallet '{wallet.name}' and {removed} transaction(s)")


def register_commands(cli):
    """Register wallet commands with main CLI."""
    cli.add_command(wallet_group, name="wallet")
