"""Category management commands."""

import click
from pennywise.cli.account_resolution import resolve_category_or_exit
from pennywise.cli.error_handling import handle_domain_error
from pennywise.domain.category import DEFAULT_COLOR, CategoryService
from pennywise.domain.entities import CategoryTreeNode
from pennywise.domain.errors import DomainError


def print_category_tree(nodes: list[CategoryTreeNode], indent: int = 0) -> None:
    """Recursively print category tree."""
    for node in nodes:
        prefix = "  " * indent
        cat = node.category
        click.echo(f"{prefix}{cat.name} (ID: {cat.id}) {cat.color}")
        if node.children:
            print_category_tree(node.children, indent + 1)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories in tree format."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    tree = service.get_category_tree()
    if not tree:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    print_category_tree(tree)


@category_group.command("create")
@click.argument("name")
@click.option("--parent", help="Parent category path (e.g., 'Food & Dining')")
@click.option("--color", default=DEFAULT_COLOR, show_default=True, help="Hex display color")
@click.pass_context
def create_category(ctx, name: str, parent: str | None, color: str):
    """Create a new category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(name=name, parent_path=parent, color=color)
    except DomainError as e:
        handle_domain_error(ctx, e)
    parent_str = f" under '{parent}'" if parent else ""
    click.echo(f"Created category '{name}'{parent_str} (ID: {category_id})")


@category_group.command("update")
@click.argument("category", metavar="CATEGORY")
@click.option("--name", help="New name")
@click.option("--color", help="New hex color")
@click.option("--parent", help="New parent category path or ID")
@click.option("--root", is_flag=True, help="Move the category to the top level")
@click.pass_context
def update_category(ctx, category: str, name: str | None, color: str | None, parent: str | None, root: bool):
    """Update a category.

    CATEGORY can be a category path or ID.

    Examples:
        pennywise category update "Food & Dining > Coffee" --name "Coffee & Tea"
        pennywise category update 12 --parent "Food & Dining"
        pennywise category update "Travel > Food & Dining" --root
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    category_id = resolve_category_or_exit(ctx, service, category)
    parent_id = resolve_category_or_exit(ctx, service, parent) if parent is not None else None

    try:
        service.update_category(
            category_id=category_id,
            name=name,
            color=color,
            parent_id=parent_id,
            clear_parent=root,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated category {service.format_category_path(category_id)}")


@category_group.command("delete")
@click.argument("category", metavar="CATEGORY")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_category(ctx, category: str, yes: bool):
    """Delete a category with its subcategories and their rules.

    Transactions in the deleted categories become uncategorized.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    category_id = resolve_category_or_exit(ctx, service, category)
    path = service.format_category_path(category_id)

    if not yes and not click.confirm(
        f"Delete '{path}', its subcategories and their rules?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{path}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
