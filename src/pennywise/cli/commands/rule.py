"""Categorization rule commands."""

from decimal import Decimal

import click
from pennywise.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from pennywise.cli.error_handling import handle_domain_error
from pennywise.domain.account import AccountService
from pennywise.domain.category import CategoryService
from pennywise.domain.entities import CategorizationRule, MatchField
from pennywise.domain.errors import DomainError
from pennywise.domain.rule import RuleService
from pennywise.utils.amount_parser import parse_amount
from pennywise.utils.date_parser import parse_date

MATCH_FIELDS = [field.value for field in MatchField]


def _parse_bound(ctx, label: str, value: str | None) -> Decimal | None:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _format_bounds(rule: CategorizationRule) -> str:
    if rule.min_amount is None and rule.max_amount is None:
        return ""
    low = f"{rule.min_amount:,.2f}" if rule.min_amount is not None else ""
    high = f"{rule.max_amount:,.2f}" if rule.max_amount is not None else ""
    return f"[{low}..{high}]"


@click.group()
def rule_group():
    """Manage categorization rules."""
    pass


@rule_group.command("create")
@click.argument("name")
@click.option("--category", required=True, help="Category path or ID assigned on match")
@click.option(
    "--field",
    "match_field",
    type=click.Choice(MATCH_FIELDS, case_sensitive=False),
    default=MatchField.DESCRIPTION.value,
    show_default=True,
    help="What the rule looks at",
)
@click.option("--pattern", default="", help="Comma-separated keywords, date tokens or amount range")
@click.option("--min-amount", help="Lower bound on the amount")
@click.option("--max-amount", help="Upper bound on the amount")
@click.option("--priority", type=int, default=0, show_default=True, help="Higher runs first")
@click.option("--inactive", is_flag=True, help="Create the rule disabled")
@click.pass_context
def create_rule(
    ctx,
    name: str,
    category: str,
    match_field: str,
    pattern: str,
    min_amount: str | None,
    max_amount: str | None,
    priority: int,
    inactive: bool,
):
    """Create a categorization rule.

    Examples:
        pennywise rule create "Coffee" --category "Food & Dining > Coffee & Snacks" --pattern "starbucks,peet's" --priority 10
        pennywise rule create "Small stuff" --category Other --field AMOUNT_RANGE --min-amount 0 --max-amount 20
        pennywise rule create "Weekend" --category Entertainment --field DATE --pattern "sat,sun"
    """
    db = ctx.obj["db"]
    service = RuleService(db)

    category_id = resolve_category_or_exit(ctx, CategoryService(db), category)

    try:
        rule_id = service.create_rule(
            name=name,
            category_id=category_id,
            match_field=match_field,
            match_pattern=pattern,
            min_amount=_parse_bound(ctx, "minimum amount", min_amount),
            max_amount=_parse_bound(ctx, "maximum amount", max_amount),
            priority=priority,
            is_active=not inactive,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created rule '{name}' (ID: {rule_id})")


@rule_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Show only active rules")
@click.pass_context
def list_rules(ctx, active_only: bool):
    """List rules in evaluation order."""
    db = ctx.obj["db"]
    service = RuleService(db)
    category_service = CategoryService(db)

    rules = service.list_rules(active_only=active_only)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo(f"\n{'ID':<5} {'Pri':>4} {'On':<3} {'Name':<20} {'Field':<13} {'Pattern':<30} {'Amount':<18} Category")
    click.echo("-" * 120)
    for rule in rules:
        click.echo(
            f"{rule.id:<5} {rule.priority:>4} {'yes' if rule.is_active else 'no':<3} "
            f"{rule.name[:20]:<20} {rule.match_field.value:<13} {rule.match_pattern[:30]:<30} "
            f"{_format_bounds(rule):<18} {category_service.format_category_path(rule.category_id)}"
        )


@rule_group.command("update")
@click.argument("rule_id", type=int)
@click.option("--name", help="New name")
@click.option("--category", help="New category path or ID")
@click.option("--field", "match_field", type=click.Choice(MATCH_FIELDS, case_sensitive=False), help="New match field")
@click.option("--pattern", help="New pattern")
@click.option("--min-amount", help="New lower bound")
@click.option("--max-amount", help="New upper bound")
@click.option("--clear-bounds", is_flag=True, help="Remove both amount bounds before applying new ones")
@click.option("--priority", type=int, help="New priority")
@click.pass_context
def update_rule(
    ctx,
    rule_id: int,
    name: str | None,
    category: str | None,
    match_field: str | None,
    pattern: str | None,
    min_amount: str | None,
    max_amount: str | None,
    clear_bounds: bool,
    priority: int | None,
):
    """Update a rule. Only the given options change."""
    db = ctx.obj["db"]
    service = RuleService(db)

    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), category)

    try:
        service.update_rule(
            rule_id=rule_id,
            name=name,
            category_id=category_id,
            match_field=match_field,
            match_pattern=pattern,
            min_amount=_parse_bound(ctx, "minimum amount", min_amount),
            max_amount=_parse_bound(ctx, "maximum amount", max_amount),
            priority=priority,
            clear_bounds=clear_bounds,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated rule {rule_id}")


def _set_active(ctx, rule_id: int, is_active: bool) -> None:
    service = RuleService(ctx.obj["db"])
    try:
        service.set_active(rule_id, is_active)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{'Enabled' if is_active else 'Disabled'} rule {rule_id}")


@rule_group.command("enable")
@click.argument("rule_id", type=int)
@click.pass_context
def enable_rule(ctx, rule_id: int):
    """Enable a rule."""
    _set_active(ctx, rule_id, True)


@rule_group.command("disable")
@click.argument("rule_id", type=int)
@click.pass_context
def disable_rule(ctx, rule_id: int):
    """Disable a rule without deleting it."""
    _set_active(ctx, rule_id, False)


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule."""
    service = RuleService(ctx.obj["db"])
    try:
        service.delete_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted rule {rule_id}")


@rule_group.command("apply")
@click.option("--account", help="Only categorize transactions of this account (name or ID)")
@click.pass_context
def apply_rules(ctx, account: str | None):
    """Categorize existing uncategorized transactions with the active rules."""
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    assigned = RuleService(db).apply_to_uncategorized(account_id=account_id)
    click.echo(f"Categorized {len(assigned)} transaction(s)")


@rule_group.command("test")
@click.argument("description")
@click.option("--amount", default="0", help="Transaction amount")
@click.option("--date", "txn_date", default="today", help="Transaction date")
@click.pass_context
def test_rules(ctx, description: str, amount: str, txn_date: str):
    """Show which rule would categorize a transaction.

    Examples:
        pennywise rule test "STARBUCKS #1234" --amount 5.75
        pennywise rule test "Payroll ACME" --amount 3500 --date 2024-01-31
    """
    db = ctx.obj["db"]
    try:
        value = abs(parse_amount(amount))
        on = parse_date(txn_date)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    rule = RuleService(db).find_match(description, value, on)
    if rule is None:
        click.echo("No rule matches")
        return
    path = CategoryService(db).format_category_path(rule.category_id)
    click.echo(f"Matched rule '{rule.name}' (ID: {rule.id}) -> {path}")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
