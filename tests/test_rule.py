"""Tests for categorization rule service and commands."""

from datetime import date
from decimal import Decimal

import pytest
from pennywise.cli.main import cli
from pennywise.domain.entities import Direction, MatchField
from pennywise.domain.errors import NotFoundError, ValidationError


class TestRuleService:
    """Tests for RuleService."""

    def test_create_and_get(self, rule_service, sample_categories):
        rule_id = rule_service.create_rule(
            name="Streaming",
            category_id=sample_categories["Entertainment > Streaming"],
            match_field="description",
            match_pattern=" netflix,spotify ",
            priority=3,
        )
        rule = rule_service.get_rule(rule_id)

        assert rule.match_field == MatchField.DESCRIPTION
        assert rule.match_pattern == "netflix,spotify"
        assert rule.priority == 3
        assert rule.is_active is True
        assert rule.min_amount is None

    def test_create_requires_pattern_for_description(self, rule_service, sample_categories):
        with pytest.raises(ValidationError, match="match pattern is required"):
            rule_service.create_rule(
                name="Empty", category_id=sample_categories["Other"], match_field=MatchField.DESCRIPTION
            )

    def test_amount_rule_needs_no_pattern(self, rule_service, sample_categories):
        rule_id = rule_service.create_rule(
            name="Big",
            category_id=sample_categories["Other"],
            match_field=MatchField.AMOUNT,
            min_amount=Decimal("1000"),
        )

        assert rule_service.get_rule(rule_id).min_amount == Decimal("1000")

    def test_min_greater_than_max_rejected(self, rule_service, sample_categories):
        with pytest.raises(ValidationError, match="greater than maximum"):
            rule_service.create_rule(
                name="Backwards",
                category_id=sample_categories["Other"],
                match_field=MatchField.AMOUNT_RANGE,
                min_amount=Decimal("50"),
                max_amount=Decimal("10"),
            )

    def test_unknown_match_field(self, rule_service, sample_categories):
        with pytest.raises(ValidationError, match="Invalid match field"):
            rule_service.create_rule(
                name="Odd", category_id=sample_categories["Other"], match_field="MERCHANT", match_pattern="x"
            )

    def test_unknown_category(self, rule_service):
        with pytest.raises(NotFoundError):
            rule_service.create_rule(
                name="Lost", category_id=404, match_field=MatchField.DESCRIPTION, match_pattern="x"
            )

    def test_list_in_evaluation_order(self, rule_service, sample_rules):
        names = [rule.name for rule in rule_service.list_rules()]

        assert names == ["Coffee", "Groceries", "Salary"]

    def test_disable_and_list_active(self, rule_service, sample_rules):
        rule_service.set_active(sample_rules["Coffee"], False)

        assert rule_service.get_rule(sample_rules["Coffee"]).is_active is False
        assert [r.name for r in rule_service.list_active()] == ["Groceries", "Salary"]

    def test_update_rule(self, rule_service, sample_rules, sample_categories):
        rule_service.update_rule(
            sample_rules["Groceries"],
            match_pattern="costco",
            priority=20,
            category_id=sample_categories["Shopping"],
        )
        rule = rule_service.get_rule(sample_rules["Groceries"])

        assert rule.match_pattern == "costco"
        assert rule.priority == 20
        assert rule.category_id == sample_categories["Shopping"]

    def test_update_checks_bounds_against_existing(self, rule_service, sample_rules):
        with pytest.raises(ValidationError):
            rule_service.update_rule(sample_rules["Salary"], max_amount=Decimal("10"))

    def test_clear_bounds(self, rule_service, sample_rules):
        rule_service.update_rule(sample_rules["Salary"], clear_bounds=True)

        rule = rule_service.get_rule(sample_rules["Salary"])
        assert rule.min_amount is None
        assert rule.max_amount is None

    def test_delete_rule(self, rule_service, sample_rules):
        rule_service.delete_rule(sample_rules["Coffee"])

        assert rule_service.get_rule(sample_rules["Coffee"]) is None
        with pytest.raises(NotFoundError, match="Rule"):
            rule_service.delete_rule(sample_rules["Coffee"])

    def test_find_match(self, rule_service, sample_rules, sample_categories):
        rule = rule_service.find_match("PAYROLL ACME", Decimal("3500"), date(2024, 1, 31))

        assert rule.id == sample_rules["Salary"]
        assert rule_service.find_match("PAYROLL ACME", Decimal("20"), date(2024, 1, 31)) is None

    def test_apply_to_uncategorized(
        self, rule_service, transaction_service, sample_account, sample_rules, sample_categories
    ):
        coffee_id = transaction_service.create_transaction(
            account_id=sample_account.id,
            amount=Decimal("5.75"),
            direction=Direction.DEBIT,
            date=date(2024, 1, 15),
            description="Starbucks",
        )
        manual_id = transaction_service.create_transaction(
            account_id=sample_account.id,
            amount=Decimal("60"),
            direction=Direction.DEBIT,
            date=date(2024, 1, 16),
            description="Safeway",
            category_id=sample_categories["Shopping"],
        )
        unknown_id = transaction_service.create_transaction(
            account_id=sample_account.id,
            amount=Decimal("12"),
            direction=Direction.DEBIT,
            date=date(2024, 1, 17),
            description="Bookshop",
        )

        assigned = rule_service.apply_to_uncategorized()

        assert assigned == {coffee_id: sample_categories["Food & Dining > Coffee & Snacks"]}
        assert transaction_service.get_transaction(manual_id).category_id == sample_categories["Shopping"]
        assert transaction_service.get_transaction(unknown_id).category_id is None

    def test_new_rule_is_not_retroactive(
        self, rule_service, transaction_service, sample_account, sample_categories
    ):
        txn_id = transaction_service.create_transaction(
            account_id=sample_account.id,
            amount=Decimal("5"),
            direction=Direction.DEBIT,
            date=date(2024, 1, 15),
            description="Starbucks",
        )

        rule_service.create_rule(
            name="Coffee",
            category_id=sample_categories["Food & Dining > Coffee & Snacks"],
            match_field=MatchField.DESCRIPTION,
            match_pattern="starbucks",
        )

        assert transaction_service.get_transaction(txn_id).category_id is None


def test_rule_create_command(cli_runner, temp_db, sample_categories, fresh_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "rule",
            "create",
            "Coffee",
            "--category",
            "Food & Dining > Coffee & Snacks",
            "--pattern",
            "starbucks",
            "--priority",
            "10",
        ],
    )

    assert result.exit_code == 0
    assert "Created rule 'Coffee'" in result.output
    rule = fresh_db().list_rules()[0]
    assert rule.priority == 10
    assert rule.match_field == MatchField.DESCRIPTION


def test_rule_create_amount_range_command(cli_runner, temp_db, sample_categories):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "rule",
            "create",
            "Small",
            "--category",
            "Other",
            "--field",
            "amount_range",
            "--min-amount",
            "0",
            "--max-amount",
            "20",
        ],
    )

    assert result.exit_code == 0


def test_rule_create_unknown_category(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "rule", "create", "X", "--category", "Nope", "--pattern", "x"],
    )

    assert result.exit_code == 1
    assert "Category 'Nope' not found" in result.output


def test_rule_list_command(cli_runner, temp_db, sample_rules):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "rule", "list"])

    assert result.exit_code == 0
    assert "Coffee" in result.output
    assert "Food & Dining > Coffee & Snacks" in result.output
    assert "[1,000.00..]" in result.output


def test_rule_disable_enable_command(cli_runner, temp_db, sample_rules, fresh_db):
    rule_id = str(sample_rules["Coffee"])

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "rule", "disable", rule_id])
    assert result.exit_code == 0
    assert fresh_db().get_rule(sample_rules["Coffee"]).is_active is False

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "rule", "enable", rule_id])
    assert result.exit_code == 0
    assert fresh_db().get_rule(sample_rules["Coffee"]).is_active is True


def test_rule_delete_missing(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "rule", "delete", "77"])

    assert result.exit_code == 1
    assert "Rule 77 not found" in result.output


def test_rule_test_command(cli_runner, temp_db, sample_rules):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "rule", "test", "STARBUCKS #1234", "--amount", "5.75"],
    )

    assert result.exit_code == 0
    assert "Matched rule 'Coffee'" in result.output
    assert "Food & Dining > Coffee & Snacks" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "rule", "test", "Bookshop", "--amount", "5"]
    )
    assert "No rule matches" in result.output


def test_rule_apply_command(cli_runner, temp_db, sample_account, sample_rules, transaction_service):
    transaction_service.create_transaction(
        account_id=sample_account.id,
        amount=Decimal("5.75"),
        direction=Direction.DEBIT,
        date=date(2024, 1, 15),
        description="Starbucks",
    )

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "rule", "apply", "--account", "Test Account"]
    )

    assert result.exit_code == 0
    assert "Categorized 1 transaction(s)" in result.output
