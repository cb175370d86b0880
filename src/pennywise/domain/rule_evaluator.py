"""Categorization rule evaluation.

Rules are evaluated highest priority first, oldest first among equal
priorities, and the first matching rule decides the category. Evaluation is
a pure function of its inputs.
"""

import logging
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from pennywise.domain.entities import CategorizationRule, MatchField

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_AMOUNT_RANGE = re.compile(r"^\s*(\d+(?:\.\d+)?)?\s*-\s*(\d+(?:\.\d+)?)?\s*$")
_DAY_RANGE = re.compile(r"^(\d{1,2})\s*-\s*(\d{1,2})$")


def _split_pattern(pattern: str) -> list[str]:
    return [part.strip() for part in pattern.split(",") if part.strip()]


def _to_decimal(text: str) -> Optional[Decimal]:
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def _within(amount: Decimal, minimum: Optional[Decimal], maximum: Optional[Decimal]) -> bool:
    if minimum is not None and amount < minimum:
        return False
    if maximum is not None and amount > maximum:
        return False
    return True


def pattern_bounds(pattern: str) -> tuple[Optional[Decimal], Optional[Decimal]]:
    """Read amount bounds from a rule pattern.

    "10-20" -> (10, 20), "10-" -> (10, None), "-20" -> (None, 20),
    "15.99" -> (15.99, 15.99). Anything else -> (None, None).
    """
    text = pattern.strip()
    if not text:
        return None, None
    match = _AMOUNT_RANGE.match(text)
    if match:
        low, high = match.groups()
        return (Decimal(low) if low else None, Decimal(high) if high else None)
    exact = _to_decimal(text)
    if exact is not None and exact.is_finite():
        return exact, exact
    return None, None


def _date_token_matches(token: str, txn_date: date) -> bool:
    token = token.lower()

    for index, name in enumerate(WEEKDAYS):
        if token == name or token == name[:3]:
            return txn_date.weekday() == index

    if token.isdigit():
        return txn_date.day == int(token)

    day_range = _DAY_RANGE.match(token)
    if day_range:
        first, last = (int(g) for g in day_range.groups())
        return first <= txn_date.day <= last

    try:
        return date.fromisoformat(token) == txn_date
    except ValueError:
        return False


def rule_matches(
    rule: CategorizationRule, description: str, amount: Decimal, txn_date: date
) -> bool:
    """Return True if ``rule`` matches a transaction with these fields.

    ``amount`` is the transaction magnitude.
    """
    if rule.match_field in (MatchField.AMOUNT, MatchField.AMOUNT_RANGE):
        minimum, maximum = rule.min_amount, rule.max_amount
        if minimum is None and maximum is None:
            minimum, maximum = pattern_bounds(rule.match_pattern)
        return _within(amount, minimum, maximum)

    # Bounds narrow description and date rules ("salary" over 1000)
    if not _within(amount, rule.min_amount, rule.max_amount):
        return False

    if rule.match_field == MatchField.DESCRIPTION:
        text = (description or "").lower()
        return any(candidate.lower() in text for candidate in _split_pattern(rule.match_pattern))

    if rule.match_field == MatchField.DATE:
        return any(_date_token_matches(token, txn_date) for token in _split_pattern(rule.match_pattern))

    return False


def sort_rules(rules: Iterable[CategorizationRule]) -> list[CategorizationRule]:
    """Return rules in evaluation order: priority desc, then oldest first."""
    by_age = sorted(rules, key=lambda r: (r.created_at, r.id))
    return sorted(by_age, key=lambda r: r.priority, reverse=True)


def matching_rule(
    rules: Iterable[CategorizationRule],
    description: str,
    amount: Decimal,
    txn_date: date,
) -> Optional[CategorizationRule]:
    """Return the first active rule, in evaluation order, that matches."""
    for rule in sort_rules(r for r in rules if r.is_active):
        if rule_matches(rule, description, amount, txn_date):
            logger.debug("Rule %d (%s) matched %r", rule.id, rule.name, description)
            return rule
    return None


def evaluate_rules(
    rules: Iterable[CategorizationRule],
    description: str,
    amount: Decimal,
    txn_date: date,
) -> Optional[int]:
    """Return the category ID chosen by ``rules``, or None when nothing matches."""
    rule = matching_rule(rules, description, amount, txn_date)
    return rule.category_id if rule is not None else None
