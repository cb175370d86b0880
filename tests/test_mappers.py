"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from pennywise.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    CategorizationRule as ORMCategorizationRule,
    Transaction as ORMTransaction,
)
from pennywise.database.mappers import (
    account_to_domain,
    category_to_domain,
    rule_to_domain,
    transaction_to_domain,
)
from pennywise.domain.entities import (
    Account,
    Category,
    Direction,
    MatchField,
    RecurringFrequency,
    Transaction,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id=1,
            name="Checking",
            account_type="checking",
            currency="USD",
            balance=Decimal("125.40"),
            description="Main account",
            created_at=datetime.now(UTC),
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.balance == Decimal("125.40")
        assert domain_account.description == "Main account"
        assert domain_account.created_at == orm_account.created_at

    def test_float_balance_becomes_decimal(self):
        orm_account = ORMAccount(
            id=1,
            name="Checking",
            account_type="checking",
            currency="USD",
            balance=12.5,
            created_at=datetime.now(UTC),
        )

        assert account_to_domain(orm_account).balance == Decimal("12.5")


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_to_domain_with_parent(self):
        """Test converting ORM Category with parent to domain Category."""
        orm_category = ORMCategory(
            id=2,
            name="Groceries",
            color="#10b981",
            parent_id=1,
            created_at=datetime.now(UTC),
        )
        domain_category = category_to_domain(orm_category)

        assert isinstance(domain_category, Category)
        assert domain_category.parent_id == 1
        assert domain_category.color == "#10b981"


class TestRuleMapper:
    """Tests for CategorizationRule mapper."""

    def test_rule_to_domain(self):
        orm_rule = ORMCategorizationRule(
            id=3,
            name="Salary",
            category_id=2,
            match_field="DESCRIPTION",
            match_pattern="payroll",
            min_amount=Decimal("1000"),
            max_amount=None,
            priority=5,
            is_active=True,
            created_at=datetime.now(UTC),
        )
        rule = rule_to_domain(orm_rule)

        assert rule.match_field == MatchField.DESCRIPTION
        assert rule.min_amount == Decimal("1000")
        assert rule.max_amount is None
        assert rule.priority == 5


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction to domain Transaction."""
        orm_transaction = ORMTransaction(
            id=1,
            account_id=1,
            amount=Decimal("50.00"),
            direction="DEBIT",
            date=date(2024, 1, 15),
            description="Grocery store",
            category_id=1,
            latitude=37.7,
            longitude=-122.4,
            location_name="Market St",
            is_recurring=True,
            recurring_frequency="WEEKLY",
            created_at=datetime.now(UTC),
        )
        domain_transaction = transaction_to_domain(orm_transaction)

        assert isinstance(domain_transaction, Transaction)
        assert domain_transaction.direction == Direction.DEBIT
        assert domain_transaction.signed_amount == Decimal("-50.00")
        assert domain_transaction.recurring_frequency == RecurringFrequency.WEEKLY
        assert domain_transaction.location_name == "Market St"

    def test_transaction_to_domain_with_none_fields(self):
        """Test converting ORM Transaction with None optional fields."""
        orm_transaction = ORMTransaction(
            id=1,
            account_id=1,
            amount=Decimal("5.00"),
            direction="CREDIT",
            date=date(2024, 1, 15),
            description="Refund",
            category_id=None,
            is_recurring=False,
            recurring_frequency=None,
            created_at=datetime.now(UTC),
        )
        domain_transaction = transaction_to_domain(orm_transaction)

        assert domain_transaction.category_id is None
        assert domain_transaction.latitude is None
        assert domain_transaction.recurring_frequency is None
