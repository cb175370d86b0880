"""Transaction management commands."""

import click
from pennywise.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from pennywise.cli.error_handling import handle_domain_error
from pennywise.domain.account import AccountService
from pennywise.domain.category import CategoryService
from pennywise.domain.entities import Direction, RecurringFrequency
from pennywise.domain.errors import DomainError
from pennywise.domain.transaction import TransactionService
from pennywise.utils.amount_parser import parse_amount
from pennywise.utils.date_parser import parse_date

DIRECTIONS = [d.value for d in Direction]
FREQUENCIES = [f.value for f in RecurringFrequency]


def _parse_date_or_exit(ctx, value: str, label: str = "date"):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--amount", required=True, help="Transaction amount (e.g., 123.45 or -123.45)"
)
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--type",
    "direction",
    type=click.Choice(DIRECTIONS, case_sensitive=False),
    help="CREDIT or DEBIT (default: from the amount's sign, negative is DEBIT)",
)
@click.option("--category", help="Category path (e.g., 'Food & Dining > Groceries') or ID")
@click.option("--location", help="Location name")
@click.option("--lat", type=float, help="Latitude")
@click.option("--lon", type=float, help="Longitude")
@click.option("--recurring", type=click.Choice(FREQUENCIES, case_sensitive=False), help="Mark as recurring with this frequency")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    date: str,
    amount: str,
    description: str,
    direction: str | None,
    category: str | None,
    location: str | None,
    lat: float | None,
    lon: float | None,
    recurring: str | None,
):
    """Add a transaction manually.

    Examples:
        pennywise transaction add --account 1 --date 2024-01-15 --amount -50.00 --description "Grocery store"
        pennywise transaction add --account Checking --date today --amount 1000 --type CREDIT --category "Income > Salary"
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    txn_date = _parse_date_or_exit(ctx, date)
    signed_amount = _parse_amount_or_exit(ctx, amount)

    if direction is None:
        direction = Direction.DEBIT if signed_amount < 0 else Direction.CREDIT

    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), category)

    try:
        transaction_id = transaction_service.create_transaction(
            account_id=account_id,
            amount=abs(signed_amount),
            direction=direction,
            date=txn_date,
            description=description,
            category_id=category_id,
            latitude=lat,
            longitude=lon,
            location_name=location,
            is_recurring=recurring is not None,
            recurring_frequency=RecurringFrequency(recurring.upper()) if recurring else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = transaction_service.require_transaction(transaction_id)
    account_obj = account_service.require_account(account_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Account: {account_obj.name}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {txn.signed_amount:,.2f} ({txn.direction.value})")
    click.echo(f"  Description: {txn.description}")
    if category:
        click.echo(f"  Category: {category}")
    click.echo(f"  Balance: {account_obj.balance:,.2f} {account_obj.currency}")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show all fields of a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)

    try:
        txn = service.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    account = AccountService(db).get_account(txn.account_id)

    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {txn.amount:,.2f}")
    click.echo(f"  Type: {txn.direction.value}")
    click.echo(f"  Account: {account.name if account else 'Unknown'} (ID: {txn.account_id})")
    if txn.category_id:
        click.echo(f"  Category: {category_service.format_category_path(txn.category_id)}")
    else:
        click.echo("  Category: Uncategorized")
    click.echo(f"  Description: {txn.description}")
    if txn.location_name:
        click.echo(f"  Location: {txn.location_name}")
    if txn.latitude is not None and txn.longitude is not None:
        click.echo(f"  Coordinates: {txn.latitude}, {txn.longitude}")
    if txn.is_recurring:
        frequency = txn.recurring_frequency.value if txn.recurring_frequency else "unspecified"
        click.echo(f"  Recurring: {frequency}")
    click.echo(f"  Created: {txn.created_at}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", help="Transaction amount magnitude (e.g., 123.45)")
@click.option("--type", "direction", type=click.Choice(DIRECTIONS, case_sensitive=False), help="CREDIT or DEBIT")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category path (e.g., 'Food & Dining > Groceries') or empty string to clear")
@click.option("--location", help="Location name")
@click.option("--lat", type=float, help="Latitude")
@click.option("--lon", type=float, help="Longitude")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date: str | None,
    amount: str | None,
    direction: str | None,
    description: str | None,
    category: str | None,
    location: str | None,
    lat: float | None,
    lon: float | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Use --category "" to clear the
    category. Changing the amount or type moves the account balance by the
    difference.

    Examples:
        pennywise transaction update 1 --amount 75.00
        pennywise transaction update 1 --type CREDIT --category "Income > Other Income"
        pennywise transaction update 1 --category ""  # Clear category
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn_date = _parse_date_or_exit(ctx, date) if date is not None else None
    txn_amount = abs(_parse_amount_or_exit(ctx, amount)) if amount is not None else None

    category_id = None
    clear_category = False
    if category is not None:
        if category == "":
            # Empty string means clear category
            clear_category = True
        else:
            category_id = resolve_category_or_exit(ctx, CategoryService(db), category)

    try:
        transaction_service.update_transaction(
            transaction_id=transaction_id,
            amount=txn_amount,
            direction=direction,
            date=txn_date,
            description=description,
            category_id=category_id,
            latitude=lat,
            longitude=lon,
            location_name=location,
            clear_category=clear_category,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--category", help="Category path (e.g., 'Food & Dining > Groceries')")
@click.option("--account", help="Account name or ID")
@click.option("--type", "direction", type=click.Choice(DIRECTIONS, case_sensitive=False), help="Only CREDIT or DEBIT")
@click.option("--uncategorized", is_flag=True, help="Show only uncategorized transactions")
@click.option("--search", help="Only transactions whose description contains this text")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    account: str | None,
    direction: str | None,
    uncategorized: bool,
    search: str | None,
):
    """View transactions with optional filters.

    Use --uncategorized to show only transactions without a category.
    Account can be specified by name or ID.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)
    account_service = AccountService(db)

    start = _parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = _parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    # Empty category path means uncategorized
    if uncategorized:
        category = ""

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        category_path=category,
        account_id=account_id,
        direction=direction,
        description_contains=search,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12} {'Account':<20} {'Category':<30} {'Description':<30}"
    )
    click.echo("-" * 110)

    for txn in transactions:
        account_name = accounts.get(txn.account_id, "Unknown")
        category_name = ""
        if txn.category_id:
            category_name = category_service.format_category_path(txn.category_id)

        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.signed_amount:>12,.2f} {account_name[:20]:<20} "
            f"{category_name[:30]:<30} {txn.description[:30]:<30}"
        )

    total_expenses = sum(txn.amount for txn in transactions if txn.direction == Direction.DEBIT)
    total_income = sum(txn.amount for txn in transactions if txn.direction == Direction.CREDIT)
    click.echo("-" * 110)
    click.echo(
        f"{'TOTAL':<6} {'':<12} Expenses: {total_expenses:,.2f} | "
        f"Income: {total_income:,.2f} | Count: {len(transactions)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and reverse its effect on the balance.

    Examples:
        pennywise transaction delete 1
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
