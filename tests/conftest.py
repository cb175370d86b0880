"""Shared pytest fixtures for pennywise tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
import pytest

from pennywise.database.factories import create_sqlite_database
from pennywise.domain.account import AccountService
from pennywise.domain.category import CategoryService
from pennywise.domain.csv_import import CSVImportService
from pennywise.domain.entities import CategorizationRule, MatchField
from pennywise.domain.rule import RuleService
from pennywise.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def fresh_db(temp_db):
    """Open a second connection to the temporary database.

    Used to check what a command run through the CLI actually committed.
    """
    def _open():
        db = create_sqlite_database(database_path=temp_db.database_path)
        db.connect()
        return db

    return _open


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(
        name="Test Account", account_type="checking", balance=Decimal("1000.00")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def sample_categories(category_service):
    """Initialize default categories and return their IDs by path."""
    from pennywise.cli.commands.init_categories import INITIAL_CATEGORIES, create_default_categories

    create_default_categories(category_service)

    category_ids = {}
    for category_name, parent_path, _ in INITIAL_CATEGORIES:
        path = f"{parent_path} > {category_name}" if parent_path else category_name
        category_ids[path] = category_service.get_category_by_path(path).id
    return category_ids


@pytest.fixture
def sample_rules(rule_service, sample_categories):
    """Create a small rule set and return rule IDs by name."""
    return {
        "Coffee": rule_service.create_rule(
            name="Coffee",
            category_id=sample_categories["Food & Dining > Coffee & Snacks"],
            match_field=MatchField.DESCRIPTION,
            match_pattern="starbucks,peet's",
            priority=10,
        ),
        "Groceries": rule_service.create_rule(
            name="Groceries",
            category_id=sample_categories["Food & Dining > Groceries"],
            match_field=MatchField.DESCRIPTION,
            match_pattern="whole foods,safeway",
            priority=5,
        ),
        "Salary": rule_service.create_rule(
            name="Salary",
            category_id=sample_categories["Income > Salary"],
            match_field=MatchField.DESCRIPTION,
            match_pattern="payroll,salary",
            min_amount=Decimal("1000"),
            priority=5,
        ),
    }


@pytest.fixture
def make_rule():
    """Build in-memory rule entities for pure evaluator tests."""
    counter = {"id": 0}

    def _make(
        match_field=MatchField.DESCRIPTION,
        match_pattern="",
        category_id=1,
        priority=0,
        min_amount=None,
        max_amount=None,
        is_active=True,
        created_at=None,
        name=None,
    ):
        counter["id"] += 1
        return CategorizationRule(
            id=counter["id"],
            name=name or f"rule {counter['id']}",
            category_id=category_id,
            match_field=match_field,
            match_pattern=match_pattern,
            min_amount=min_amount,
            max_amount=max_amount,
            priority=priority,
            is_active=is_active,
            created_at=created_at or datetime(2024, 1, 1, 0, 0, counter["id"]),
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
