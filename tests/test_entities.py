"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, date, UTC
from decimal import Decimal

from pennywise.domain.entities import (
    Account,
    ColumnMapping,
    Direction,
    MatchField,
    Transaction,
    TransactionDraft,
    signed,
)


class TestAccount:
    """Tests for Account entity."""

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(
            id=1,
            name="Checking",
            account_type="checking",
            currency="USD",
            balance=Decimal("10.00"),
            description=None,
            created_at=datetime.now(UTC),
        )
        with pytest.raises(FrozenInstanceError):
            account.balance = Decimal("0")

    def test_account_equality(self):
        """Test Account entity equality."""
        created_at = datetime.now(UTC)
        values = dict(
            id=1,
            name="Checking",
            account_type="checking",
            currency="USD",
            balance=Decimal("0"),
            description=None,
            created_at=created_at,
        )
        assert Account(**values) == Account(**values)


class TestDirection:
    """Tests for Direction and MatchField parsing."""

    def test_parse_case_insensitive(self):
        assert Direction.parse(" credit ") == Direction.CREDIT
        assert Direction.parse(Direction.DEBIT) is Direction.DEBIT

    def test_parse_invalid(self):
        with pytest.raises(ValueError, match="Must be CREDIT or DEBIT"):
            Direction.parse("both")

    def test_match_field_parse(self):
        assert MatchField.parse("amount_range") == MatchField.AMOUNT_RANGE
        with pytest.raises(ValueError, match="Invalid match field"):
            MatchField.parse("merchant")

    def test_signed(self):
        assert signed(Decimal("5"), Direction.CREDIT) == Decimal("5")
        assert signed(Decimal("5"), Direction.DEBIT) == Decimal("-5")


class TestTransaction:
    """Tests for Transaction and TransactionDraft."""

    def test_signed_amount(self):
        txn = Transaction(
            id=1,
            account_id=1,
            amount=Decimal("45.50"),
            direction=Direction.DEBIT,
            date=date(2024, 1, 15),
            description="Coffee",
            category_id=None,
            latitude=None,
            longitude=None,
            location_name=None,
            is_recurring=False,
            recurring_frequency=None,
            created_at=datetime.now(UTC),
        )
        assert txn.signed_amount == Decimal("-45.50")

    def test_draft_defaults(self):
        draft = TransactionDraft(
            row_number=3,
            amount=Decimal("2500.00"),
            direction=Direction.CREDIT,
            date=date(2024, 1, 31),
            description="Payroll",
        )
        assert draft.signed_amount == Decimal("2500.00")
        assert draft.category_id is None
        assert draft.latitude is None


class TestColumnMapping:
    """Tests for ColumnMapping helpers."""

    def test_missing_required_in_order(self):
        assert ColumnMapping().missing_required() == ["date", "amount", "description"]
        assert ColumnMapping(amount="Amt").missing_required() == ["date", "description"]

    def test_as_dict_only_resolved_fields(self):
        mapping = ColumnMapping(date="Date", type="Type")
        assert mapping.as_dict() == {"date": "Date", "type": "Type"}
