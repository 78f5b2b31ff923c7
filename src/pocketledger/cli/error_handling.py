"""CLI error handling helpers."""

import click

from pocketledger.domain.errors import DomainError, PermissionDeniedError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, PermissionDeniedError):
        click.echo(f"Permission denied: {error}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
