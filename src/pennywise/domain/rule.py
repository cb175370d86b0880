"""Categorization rule domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from pennywise.database.base import Database
from pennywise.domain.entities import CategorizationRule as RuleEntity, MatchField
from pennywise.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    rule_not_found,
)
from pennywise.domain.rule_evaluator import matching_rule

logger = logging.getLogger(__name__)

PATTERN_REQUIRED = (MatchField.DESCRIPTION, MatchField.DATE)


def _check_bounds(min_amount: Optional[Decimal], max_amount: Optional[Decimal]) -> None:
    for label, value in (("Minimum", min_amount), ("Maximum", max_amount)):
        if value is not None and value < 0:
            raise ValidationError(f"{label} amount cannot be negative")
    if min_amount is not None and max_amount is not None and min_amount > max_amount:
        raise ValidationError(
            f"Minimum amount {min_amount} is greater than maximum amount {max_amount}"
        )


class RuleService:
    """Service for managing categorization rules."""

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(
        self,
        name: str,
        category_id: int,
        match_field: MatchField | str,
        match_pattern: str = "",
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        priority: int = 0,
        is_active: bool = True,
    ) -> int:
        """Create a categorization rule.

        Args:
            name: Display name
            category_id: Category assigned when the rule matches
            match_field: DESCRIPTION, AMOUNT, AMOUNT_RANGE or DATE
            match_pattern: Comma-separated keywords, date tokens or amount range
            min_amount: Optional lower bound on the transaction magnitude
            max_amount: Optional upper bound on the transaction magnitude
            priority: Higher priorities are evaluated first
            is_active: Inactive rules are never evaluated

        Returns:
            Rule ID

        Raises:
            ValidationError: If the rule definition is invalid
            NotFoundError: If the category doesn't exist
        """
        name = name.strip() if name else ""
        if not name:
            raise ValidationError("Name is required")
        try:
            field = MatchField.parse(match_field)
        except ValueError as e:
            raise ValidationError(str(e))
        match_pattern = (match_pattern or "").strip()
        if field in PATTERN_REQUIRED and not match_pattern:
            raise ValidationError(f"A match pattern is required for {field.value} rules")
        _check_bounds(min_amount, max_amount)

        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        rule_id = self.db.create_rule(
            name=name,
            category_id=category_id,
            match_field=field,
            match_pattern=match_pattern,
            min_amount=min_amount,
            max_amount=max_amount,
            priority=priority,
            is_active=is_active,
        )
        logger.info("Created rule %d (%s) with priority %d", rule_id, name, priority)
        return rule_id

    def get_rule(self, rule_id: int) -> Optional[RuleEntity]:
        """Get rule by ID."""
        return self.db.get_rule(rule_id)

    def require_rule(self, rule_id: int) -> RuleEntity:
        """Get rule by ID or raise NotFoundError."""
        rule = self.db.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def list_rules(self, active_only: bool = False) -> list[RuleEntity]:
        """List rules in evaluation order (priority desc, oldest first)."""
        return self.db.list_rules(active_only=active_only)

    def list_active(self) -> list[RuleEntity]:
        """List only the rules that take part in categorization."""
        return self.db.list_rules(active_only=True)

    def update_rule(
        self,
        rule_id: int,
        name: Optional[str] = None,
        category_id: Optional[int] = None,
        match_field: Optional[MatchField | str] = None,
        match_pattern: Optional[str] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        priority: Optional[int] = None,
        is_active: Optional[bool] = None,
        clear_bounds: bool = False,
    ) -> None:
        """Update a rule. Only provided fields change.

        Raises:
            NotFoundError: If the rule or new category doesn't exist
            ValidationError: If the resulting rule would be invalid
        """
        existing = self.require_rule(rule_id)

        if name is not None and not name.strip():
            raise ValidationError("Name is required")

        field = None
        if match_field is not None:
            try:
                field = MatchField.parse(match_field)
            except ValueError as e:
                raise ValidationError(str(e))

        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        final_field = field or existing.match_field
        final_pattern = match_pattern.strip() if match_pattern is not None else existing.match_pattern
        if final_field in PATTERN_REQUIRED and not final_pattern:
            raise ValidationError(f"A match pattern is required for {final_field.value} rules")

        base_min = None if clear_bounds else existing.min_amount
        base_max = None if clear_bounds else existing.max_amount
        _check_bounds(
            min_amount if min_amount is not None else base_min,
            max_amount if max_amount is not None else base_max,
        )

        self.db.update_rule(
            rule_id=rule_id,
            name=name.strip() if name is not None else None,
            category_id=category_id,
            match_field=field,
            match_pattern=match_pattern.strip() if match_pattern is not None else None,
            min_amount=min_amount,
            max_amount=max_amount,
            priority=priority,
            is_active=is_active,
            clear_bounds=clear_bounds,
        )

    def set_active(self, rule_id: int, is_active: bool) -> None:
        """Enable or disable a rule."""
        self.require_rule(rule_id)
        self.db.update_rule(rule_id=rule_id, is_active=is_active)

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule doesn't exist
        """
        self.require_rule(rule_id)
        self.db.delete_rule(rule_id)

    def find_match(
        self, description: str, amount: Decimal, txn_date: date
    ) -> Optional[RuleEntity]:
        """Return the active rule that would categorize these fields, if any."""
        return matching_rule(self.db.list_rules(active_only=True), description, amount, txn_date)

    def apply_to_uncategorized(self, account_id: Optional[int] = None) -> dict[int, int]:
        """Categorize existing uncategorized transactions with the active rules.

        Only runs when asked to; rule changes are never applied retroactively
        on their own.

        Args:
            account_id: Optional account to restrict to

        Returns:
            Mapping of transaction ID -> assigned category ID
        """
        rules = self.db.list_rules(active_only=True)
        assigned: dict[int, int] = {}
        if not rules:
            return assigned

        for txn in self.db.list_transactions(account_id=account_id, uncategorized=True):
            rule = matching_rule(rules, txn.description, txn.amount, txn.date)
            if rule is None:
                continue
            self.db.update_transaction_category(txn.id, rule.category_id)
            assigned[txn.id] = rule.category_id

        logger.info("Rules categorized %d existing transactions", len(assigned))
        return assigned
