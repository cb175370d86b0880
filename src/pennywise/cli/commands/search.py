"""Quick search command."""

import click
from pennywise.domain.category import CategoryService
from pennywise.domain.search import MIN_QUERY_LENGTH, SearchService


@click.command("search")
@click.argument("query")
@click.option("--limit", type=int, default=5, show_default=True, help="Maximum transactions to show")
@click.pass_context
def search(ctx, query: str, limit: int):
    """Find transactions, accounts and categories containing QUERY.

    Examples:
        pennywise search coffee
        pennywise search "whole foods" --limit 20
    """
    db = ctx.obj["db"]
    results = SearchService(db).search(query, transaction_limit=limit)

    if results.is_empty:
        if len(query.strip()) < MIN_QUERY_LENGTH:
            click.echo(f"Search text must be at least {MIN_QUERY_LENGTH} characters.")
        else:
            click.echo("No matches found.")
        return

    if results.transactions:
        click.echo("Transactions:")
        for txn in results.transactions:
            click.echo(f"  {txn.id:<6} {str(txn.date):<12} {txn.signed_amount:>12,.2f}  {txn.description}")
    if results.accounts:
        click.echo("Accounts:")
        for acc in results.accounts:
            click.echo(f"  {acc.id:<6} {acc.name} ({acc.account_type})")
    if results.categories:
        category_service = CategoryService(db)
        click.echo("Categories:")
        for cat in results.categories:
            click.echo(f"  {cat.id:<6} {category_service.format_category_path(cat.id)}")


def register_commands(cli):
    """Register search command with main CLI."""
    cli.add_command(search)
