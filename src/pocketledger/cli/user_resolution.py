"""CLI helpers for resolving the acting user."""

from __future__ import annotations

import click
from pocketledger.domain.user import UserService
from pocketledger.utils.user_resolver import resolve_user


def resolve_user_or_exit(ctx: click.Context, user: str | int | None) -> int:
    """Resolve user email or ID, or exit with a CLI error.

    Falls back to the global --user option when no user is passed.
    """
    if user is None:
        user = ctx.obj.get("user")
    if user is None:
        click.echo(
            "Error: No user selected. Pass --user EMAIL|ID or set POCKETLEDGER_USER",
            err=True,
        )
        ctx.exit(1)
    try:
        return resolve_user(UserService(ctx.obj["db"]), user)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def current_user_id(ctx: click.Context) -> int:
    """ID of the user given with the global --user option."""
    return resolve_user_or_exit(ctx, None)
