"""Main CLI entry point."""

import click
from pocketledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from pocketledger.cli.commands import (
    user,
    wallet,
    category,
    transaction,
    budget,
    group,
    categorize,
    overview,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides POCKETLEDGER_DB_PATH environment variable)",
    envvar="POCKETLEDGER_DB_PATH",
)
@click.option(
    "--user",
    "user",
    help="Acting user email or ID (overrides POCKETLEDGER_USER environment variable)",
    envvar="POCKETLEDGER_USER",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None):
    """Pocketledger - personal and shared finance tracking.

    Record income and expenses against wallets, keep monthly budgets per
    category and split shared expenses inside groups.
    """
    ctx.ensure_object(dict)
    ctx.obj["user"] = user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
wallet.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
budget.register_commands(cli)
group.register_commands(cli)
categorize.register_commands(cli)
overview.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
