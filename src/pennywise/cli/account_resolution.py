"""CLI helpers for account and category resolution."""

from __future__ import annotations

import click
from pennywise.domain.account import AccountService
from pennywise.domain.category import CategoryService
from pennywise.domain.errors import NotFoundError


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return account_service.resolve_account(account)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, category: str
) -> int:
    """Resolve category path or ID, or exit with a CLI error."""
    if category.isdigit():
        found = category_service.get_category(int(category))
        if found is None:
            click.echo(f"Error: Category {category} not found", err=True)
            ctx.exit(1)
        return found.id
    try:
        return category_service.require_category_by_path(category).id
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
