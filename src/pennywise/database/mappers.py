"""Mapper functions to convert between domain models and SQLAlchemy models.

Enum-valued columns are stored as plain strings and converted here.
"""

from decimal import Decimal
from typing import Optional

from pennywise.domain import entities as domain
from pennywise.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    CategorizationRule as ORMCategorizationRule,
    Transaction as ORMTransaction,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        currency=orm_account.currency,
        balance=_decimal(orm_account.balance),
        description=orm_account.description,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        color=orm_category.color,
        parent_id=orm_category.parent_id,
        created_at=orm_category.created_at,
    )


def rule_to_domain(orm_rule: ORMCategorizationRule) -> domain.CategorizationRule:
    """Convert SQLAlchemy CategorizationRule model to domain entity."""
    return domain.CategorizationRule(
        id=orm_rule.id,
        name=orm_rule.name,
        category_id=orm_rule.category_id,
        match_field=domain.MatchField(orm_rule.match_field),
        match_pattern=orm_rule.match_pattern,
        min_amount=_decimal(orm_rule.min_amount),
        max_amount=_decimal(orm_rule.max_amount),
        priority=orm_rule.priority,
        is_active=orm_rule.is_active,
        created_at=orm_rule.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    frequency = orm_transaction.recurring_frequency
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        amount=_decimal(orm_transaction.amount),
        direction=domain.Direction(orm_transaction.direction),
        date=orm_transaction.date,
        description=orm_transaction.description,
        category_id=orm_transaction.category_id,
        latitude=orm_transaction.latitude,
        longitude=orm_transaction.longitude,
        location_name=orm_transaction.location_name,
        is_recurring=orm_transaction.is_recurring,
        recurring_frequency=domain.RecurringFrequency(frequency) if frequency else None,
        created_at=orm_transaction.created_at,
    )
