"""Category management commands."""

import click
from pocketledger.domain.category import CategoryService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.user_resolution import current_user_id

TYPE_CHOICE = click.Choice(["income", "expense"], case_sensitive=False)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option("--icon", help="Icon (emoji)")
@click.option("--type", "category_type", type=TYPE_CHOICE, default="expense", help="Category type")
@click.pass_context
def create_category(ctx, name: str, icon: str | None, category_type: str):
    """Create a category for the current user.

    Examples:
        pocketledger category create "Health" --icon 💊
        pocketledger category create "Freelance" --type income
    """
    service = CategoryService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    try:
        category_id = service.create_category(
            user_id=user_id, name=name, icon=icon, category_type=category_type
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name}' (ID: {category_id})")


@category_group.command("list")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="Only this type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List the current user's categories."""
    service = CategoryService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    categories = service.list_categories(user_id, category_type=category_type)
    if not categories:
        click.echo("No categories found.")
        return

    for c in categories:
        click.echo(f"ID: {c.id:3d} | {c.icon} {c.name:20s} | {c.category_type.value}")


@category_group.command("delete")
@click.argument("category_id", type=int)
@click.pass_context
def delete_category(ctx, category_id: int):
    """Delete a category.

    A category still used by transactions can't be deleted. Budgets on the
    category are removed with it.
    """
    service = CategoryService(ctx.obj["db"])

    try:
        service.delete_category(category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
