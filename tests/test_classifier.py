"""Tests for turning CSV rows into transaction drafts."""

from datetime import date
from decimal import Decimal

import pytest

from pennywise.domain.classifier import classify_row, classify_rows, resolve_direction
from pennywise.domain.entities import ColumnMapping, Direction
from pennywise.domain.errors import RowError


BASIC = ColumnMapping(date="Date", amount="Amount", description="Description")
WITH_TYPE = ColumnMapping(date="Date", amount="Amount", description="Description", type="Type")


def row(date_value="2024-01-15", amount="45.50", description="Coffee Shop", **extra):
    values = {"Date": date_value, "Amount": amount, "Description": description}
    values.update(extra)
    return values


class TestResolveDirection:
    """Tests for credit/debit precedence."""

    def test_type_keywords_win(self):
        assert resolve_direction("Deposit", "100.00") == Direction.CREDIT
        assert resolve_direction("CREDIT", "-100.00") == Direction.CREDIT
        assert resolve_direction("ATM Withdrawal", "100.00") == Direction.DEBIT
        assert resolve_direction("debit", "100.00") == Direction.DEBIT

    def test_negative_amount_is_debit(self):
        assert resolve_direction(None, "-120.00") == Direction.DEBIT
        assert resolve_direction(None, "-120.00", default_direction=Direction.CREDIT) == Direction.DEBIT

    def test_positive_amount_without_type_uses_default(self):
        assert resolve_direction(None, "45.50") == Direction.DEBIT
        assert resolve_direction(None, "45.50", default_direction=Direction.CREDIT) == Direction.CREDIT

    def test_positive_amount_with_unknown_type_is_credit(self):
        assert resolve_direction("POS", "45.50") == Direction.CREDIT

    def test_negative_amount_beats_unknown_type(self):
        assert resolve_direction("POS", "-45.50") == Direction.DEBIT

    def test_authoritative_type_ignores_sign(self):
        """A present type cell without keywords falls back to the default."""
        assert (
            resolve_direction("POS", "-45.50", default_direction=Direction.CREDIT, type_column_authoritative=True)
            == Direction.CREDIT
        )
        assert resolve_direction("POS", "45.50", type_column_authoritative=True) == Direction.DEBIT

    def test_authoritative_flag_without_type_cell_uses_sign(self):
        assert resolve_direction(None, "-5", type_column_authoritative=True) == Direction.DEBIT

    def test_unparsable_leading_text_uses_default(self):
        """The sign is read from the raw cell, so '-$5' has no readable number."""
        assert resolve_direction(None, "-$5.00", default_direction=Direction.CREDIT) == Direction.CREDIT


class TestClassifyRow:
    """Tests for single row classification."""

    def test_positive_amount_defaults_to_debit(self):
        draft = classify_row(row(), BASIC, 1)

        assert draft.amount == Decimal("45.50")
        assert draft.direction == Direction.DEBIT
        assert draft.date == date(2024, 1, 15)
        assert draft.description == "Coffee Shop"
        assert draft.row_number == 1

    def test_default_direction_credit(self):
        draft = classify_row(row(), BASIC, 1, default_direction=Direction.CREDIT)

        assert draft.direction == Direction.CREDIT

    def test_negative_amount_stored_as_magnitude(self):
        draft = classify_row(row(amount="-120.00"), BASIC, 1)

        assert draft.amount == Decimal("120.00")
        assert draft.direction == Direction.DEBIT
        assert draft.signed_amount == Decimal("-120.00")

    def test_deposit_type_is_credit(self):
        draft = classify_row(row(amount="2500.00", Type="deposit"), WITH_TYPE, 1)

        assert draft.direction == Direction.CREDIT
        assert draft.amount == Decimal("2500.00")

    def test_currency_symbols_and_separators_stripped(self):
        draft = classify_row(row(amount="$1,234.56"), BASIC, 1)

        assert draft.amount == Decimal("1234.56")

    def test_amount_rounded_to_cents(self):
        draft = classify_row(row(amount="10.005"), BASIC, 1)

        assert draft.amount == Decimal("10.00")

    def test_rounding_is_logged(self, caplog):
        with caplog.at_level("WARNING", logger="pennywise.domain.classifier"):
            draft = classify_row(row(amount="45.555"), BASIC, 6)

        assert draft.amount == Decimal("45.56")
        assert "Row 6: amount 45.555 rounded to 45.56" in caplog.text

    @pytest.mark.parametrize("amount", ["0.00", "0.004", "-0"])
    def test_zero_amount_rejected(self, amount):
        with pytest.raises(RowError, match="Row 2: Invalid amount"):
            classify_row(row(amount=amount), BASIC, 2)

    def test_description_trimmed(self):
        draft = classify_row(row(description="  Grocery Store  "), BASIC, 1)

        assert draft.description == "Grocery Store"

    @pytest.mark.parametrize(
        "values",
        [
            {"date_value": ""},
            {"amount": "   "},
            {"description": ""},
        ],
    )
    def test_missing_required_fields(self, values):
        with pytest.raises(RowError) as excinfo:
            classify_row(row(**values), BASIC, 4)

        assert str(excinfo.value) == "Row 4: Missing required fields"
        assert excinfo.value.row_number == 4

    def test_invalid_date(self):
        with pytest.raises(RowError, match="Row 2: Invalid date format"):
            classify_row(row(date_value="not a date"), BASIC, 2)

    def test_relative_dates_rejected(self):
        with pytest.raises(RowError, match="Invalid date format"):
            classify_row(row(date_value="yesterday"), BASIC, 1)

    def test_invalid_amount(self):
        with pytest.raises(RowError, match="Row 3: Invalid amount"):
            classify_row(row(amount="N/A"), BASIC, 3)

    def test_optional_fields(self):
        mapping = ColumnMapping(
            date="Date",
            amount="Amount",
            description="Description",
            location_name="Location",
            latitude="Lat",
            longitude="Lon",
            category="Category",
        )
        draft = classify_row(
            row(Location="Market St", Lat="37.7749", Lon="-122.4194", Category="Groceries"),
            mapping,
            1,
        )

        assert draft.location_name == "Market St"
        assert draft.latitude == pytest.approx(37.7749)
        assert draft.longitude == pytest.approx(-122.4194)
        assert draft.category_name == "Groceries"
        assert draft.category_id is None

    def test_bad_coordinates_dropped(self):
        mapping = ColumnMapping(
            date="Date", amount="Amount", description="Description", latitude="Lat", longitude="Lon"
        )
        draft = classify_row(row(Lat="north", Lon="nan"), mapping, 1)

        assert draft.latitude is None
        assert draft.longitude is None


class TestClassifyRows:
    """Tests for batch classification."""

    def test_bad_rows_reported_and_skipped(self):
        """Rows 3 and 7 have bad dates; the other eight survive."""
        rows = [row(date_value=f"2024-01-{day:02d}") for day in range(1, 11)]
        rows[2] = row(date_value="31/31/2024")
        rows[6] = row(date_value="garbage")

        drafts, errors = classify_rows(rows, BASIC)

        assert len(drafts) == 8
        assert errors == ["Row 3: Invalid date format", "Row 7: Invalid date format"]
        assert [d.row_number for d in drafts] == [1, 2, 4, 5, 6, 8, 9, 10]

    def test_all_rows_valid(self):
        drafts, errors = classify_rows([row(), row(amount="-3")], BASIC)

        assert errors == []
        assert [d.direction for d in drafts] == [Direction.DEBIT, Direction.DEBIT]

    def test_empty_input(self):
        assert classify_rows([], BASIC) == ([], [])
