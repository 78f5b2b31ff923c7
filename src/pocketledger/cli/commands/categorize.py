"""Categorization command."""

import click
from pocketledger.advisor import create_default_advisor
from pocketledger.domain.categorization import CategorizationService
from pocketledger.domain.category import CategoryService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.user_resolution import current_user_id


@click.command("categorize")
@click.argument("descriptions", nargs=-1, required=True)
@click.option("--local", is_flag=True, help="Use only the local keyword rules")
@click.pass_context
def categorize_descriptions(ctx, descriptions: tuple[str, ...], local: bool):
    """Suggest a category for each bank description.

    The configured advisor is asked first; the local keyword rules are used
    when it is not configured or fails.

    Examples:
        pocketledger categorize "COTO SUC 123" "UBER TRIP" "NETFLIX.COM"
    """
    db = ctx.obj["db"]
    user_id = current_user_id(ctx)
    service = CategorizationService(db, advisor=None if local else create_default_advisor())

    try:
        category_ids = service.categorize(user_id, descriptions)
    except ValueError as e:
        handle_domain_error(ctx, e)

    names = {c.id: c.name for c in CategoryService(db).list_categories(user_id)}
    for text, category_id in zip(descriptions, category_ids):
        label = names.get(category_id, "Uncategorized") if category_id else "Uncategorized"
        click.echo(f"{text} -> {label}")


def register_commands(cli):
    """Register categorize command with main CLI."""
    cli.add_command(categorize_descriptions)
