"""User management commands."""

import click
from pocketledger.domain.user import UserService
from pocketledger.cli.error_handling import handle_domain_error


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("register")
@click.argument("email")
@click.argument("name")
@click.option("--currency", help="Currency of the starter Cash wallet (default from configuration)")
@click.pass_context
def register_user(ctx, email: str, name: str, currency: str | None):
    """Register a user.

    The new user gets a "Cash" wallet and a default set of categories.

    Examples:
        pocketledger user register ana@example.com "Ana"
        pocketledger user register bob@example.com "Bob" --currency USD
    """
    service = UserService(ctx.obj["db"])

    try:
        user_id = service.register(email=email, name=name, currency=currency)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Registered user '{name}' <{email}> (ID: {user_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    service = UserService(ctx.obj["db"])

    users = service.list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 60)
    for u in users:
        click.echo(f"ID: {u.id:3d} | {u.name:20s} | {u.email}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
