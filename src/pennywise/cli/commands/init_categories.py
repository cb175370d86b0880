"""Initialize default categories and sample rules."""

from decimal import Decimal

import click
from pennywise.domain.category import CategoryService
from pennywise.domain.entities import MatchField
from pennywise.domain.errors import DomainError
from pennywise.domain.rule import RuleService


# Initial category tree structure: (name, parent path, color)
INITIAL_CATEGORIES = [
    # Root categories
    ("Income", None, "#8b5cf6"),
    ("Food & Dining", None, "#10b981"),
    ("Transportation", None, "#3b82f6"),
    ("Shopping", None, "#14b8a6"),
    ("Bills & Utilities", None, "#6366f1"),
    ("Entertainment", None, "#ec4899"),
    ("Health & Fitness", None, "#ef4444"),
    ("Travel", None, "#f97316"),
    ("Other", None, "#6b7280"),
    # Income subcategories
    ("Salary", "Income", "#8b5cf6"),
    ("Investment", "Income", "#8b5cf6"),
    ("Other Income", "Income", "#8b5cf6"),
    # Food & Dining subcategories
    ("Groceries", "Food & Dining", "#10b981"),
    ("Restaurants", "Food & Dining", "#f59e0b"),
    ("Coffee & Snacks", "Food & Dining", "#f59e0b"),
    # Transportation subcategories
    ("Gas", "Transportation", "#3b82f6"),
    ("Public Transit", "Transportation", "#3b82f6"),
    ("Parking", "Transportation", "#3b82f6"),
    # Shopping subcategories
    ("Clothing", "Shopping", "#14b8a6"),
    ("Electronics", "Shopping", "#14b8a6"),
    # Bills & Utilities subcategories
    ("Electricity", "Bills & Utilities", "#6366f1"),
    ("Internet", "Bills & Utilities", "#6366f1"),
    ("Phone", "Bills & Utilities", "#6366f1"),
    # Entertainment subcategories
    ("Streaming", "Entertainment", "#ec4899"),
    ("Movies", "Entertainment", "#ec4899"),
    # Health & Fitness subcategories
    ("Pharmacy", "Health & Fitness", "#ef4444"),
    ("Doctor", "Health & Fitness", "#ef4444"),
    # Travel subcategories
    ("Flights", "Travel", "#f97316"),
    ("Hotels", "Travel", "#f97316"),
]

# Sample rules: (name, category path, pattern, min amount, priority)
SAMPLE_RULES = [
    ("Grocery Stores", "Food & Dining > Groceries", "whole foods,costco,safeway,trader joe", None, 10),
    ("Transportation", "Transportation", "uber,lyft,taxi,gas station", None, 9),
    ("Restaurants", "Food & Dining > Restaurants", "restaurant,cafe,diner,pizzeria", None, 8),
    ("Monthly Income", "Income > Salary", "salary,paycheck,income", Decimal("1000"), 5),
]


def create_default_categories(service: CategoryService) -> tuple[int, list[str]]:
    """Create every default category whose path does not exist yet.

    Returns:
        Tuple of (number created, warning messages)
    """
    created = 0
    warnings = []

    # Parents come before their children in INITIAL_CATEGORIES
    for category_name, parent_path, color in INITIAL_CATEGORIES:
        path = f"{parent_path} > {category_name}" if parent_path else category_name
        if service.get_category_by_path(path) is not None:
            continue
        try:
            service.create_category(name=category_name, parent_path=parent_path, color=color)
            created += 1
        except DomainError as e:
            warnings.append(f"Could not create category '{path}': {e}")

    return created, warnings


def create_sample_rules(category_service: CategoryService, rule_service: RuleService) -> int:
    """Create the sample description rules, skipping those already present."""
    existing = {rule.name for rule in rule_service.list_rules()}
    created = 0
    for name, category_path, pattern, min_amount, priority in SAMPLE_RULES:
        if name in existing:
            continue
        category = category_service.get_category_by_path(category_path)
        if category is None:
            continue
        rule_service.create_rule(
            name=name,
            category_id=category.id,
            match_field=MatchField.DESCRIPTION,
            match_pattern=pattern,
            min_amount=min_amount,
            priority=priority,
        )
        created += 1
    return created


@click.command("init-categories")
@click.option("--force", is_flag=True, help="Add missing defaults even if categories already exist")
@click.option("--with-rules", is_flag=True, help="Also create sample categorization rules")
@click.pass_context
def init_categories(ctx, force: bool, with_rules: bool):
    """Initialize database with default category tree."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    # Check if categories already exist
    existing = service.list_categories()
    if existing and not force:
        click.echo("Categories already exist. Use --force to add missing defaults.")
        return

    click.echo("Creating initial category tree...")
    created, warnings = create_default_categories(service)
    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)

    if not warnings:
        click.echo(f"Successfully created {created} categories.")
    else:
        click.echo(f"Created {created} categories with {len(warnings)} errors.")

    if with_rules:
        rule_count = create_sample_rules(service, RuleService(db))
        click.echo(f"Created {rule_count} sample rules.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
