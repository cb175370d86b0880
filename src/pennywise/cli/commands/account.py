"""Account management commands."""

import click
from pennywise.cli.account_resolution import resolve_account_or_exit
from pennywise.cli.error_handling import handle_domain_error
from pennywise.domain.account import AccountService
from pennywise.domain.errors import DomainError
from pennywise.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", default="checking", show_default=True, help="Account type (checking, savings, credit card, ...)")
@click.option("--currency", default="USD", show_default=True, help="ISO currency code")
@click.option("--balance", default="0", help="Opening balance (e.g., 1500.00)")
@click.option("--description", help="Optional description")
@click.pass_context
def create_account(ctx, name: str, account_type: str, currency: str, balance: str, description: str | None):
    """Create a new account.

    Examples:
        pennywise account create "Checking"
        pennywise account create "Savings" --type savings --balance 2500
        pennywise account create "Travel Card" --type "credit card" --currency EUR
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        opening_balance = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        account_id = service.create_account(
            name=name,
            account_type=account_type,
            currency=currency,
            balance=opening_balance,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type:12s} | "
            f"{acc.balance:>12,.2f} {acc.currency}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str) -> None:
    """Show account details.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.require_account(account_id)
    transaction_count = db.get_account_transaction_count(account_id)

    click.echo(f"Account ID: {acc.id}")
    click.echo(f"  Name: {acc.name}")
    click.echo(f"  Type: {acc.account_type}")
    click.echo(f"  Balance: {acc.balance:,.2f} {acc.currency}")
    if acc.description:
        click.echo(f"  Description: {acc.description}")
    click.echo(f"  Transactions: {transaction_count}")
    click.echo(f"  Created: {acc.created_at}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--type", "account_type", help="New account type (optional)")
@click.option("--currency", help="New currency code (optional)")
@click.option("--description", help="New description (optional)")
@click.pass_context
def rename_account(
    ctx,
    account: str,
    new_name: str,
    account_type: str | None,
    currency: str | None,
    description: str | None,
) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.
    NEW_NAME is the new name for the account.

    Examples:
        pennywise account rename "Checking" "Main Checking"
        pennywise account rename 1 "Savings" --type savings
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.update_account(
            account_id=account_id,
            name=new_name,
            account_type=account_type,
            currency=currency,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed account to '{new_name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if it has no transactions. Use
    'transaction delete' to remove them first.

    Examples:
        pennywise account delete "Checking"
        pennywise account delete 1 --yes
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.require_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
