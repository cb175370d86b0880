"""CSV import domain service."""

import csv
import io
import logging
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from pennywise.database.base import Database
from pennywise.domain.account import AccountService
from pennywise.domain.category import CategoryService
from pennywise.domain.classifier import classify_rows
from pennywise.domain.column_mapper import detect_columns, resolve_mapping
from pennywise.domain.entities import ColumnMapping, Direction, TransactionDraft
from pennywise.domain.errors import BatchImportError, ValidationError
from pennywise.domain.rule_evaluator import evaluate_rules

logger = logging.getLogger(__name__)

SNIFF_DELIMITERS = ",;\t|"


def _read_text(csv_path: Path) -> str:
    try:
        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ValidationError(
            f"Could not read CSV: {csv_path.name} is not UTF-8 encoded (byte {e.start})"
        ) from e


def _read_rows(csv_text: str) -> tuple[list[str], list[dict[str, Optional[str]]]]:
    """Parse CSV text into its header and the non-blank data rows."""
    sample = csv_text[:1024]
    try:
        delimiter = csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        delimiter = ","

    reader = csv.DictReader(io.StringIO(csv_text), delimiter=delimiter)
    try:
        headers = reader.fieldnames
        if not headers:
            raise ValidationError("CSV file has no header row")

        rows = [
            row
            for row in reader
            if any(value and value.strip() for value in row.values() if isinstance(value, str))
        ]
    except csv.Error as e:
        raise ValidationError(f"Could not read CSV: line {reader.line_num}: {e}") from e
    return list(headers), rows


class CSVImportService:
    """Service for importing bank statement CSV files into an account."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.account_service = AccountService(db)
        self.category_service = CategoryService(db)

    def import_csv(
        self,
        csv_file_path: str,
        account_id: int,
        column_mapping: Optional[ColumnMapping] = None,
        column_overrides: Optional[dict[str, Optional[str]]] = None,
        default_direction: Optional[Direction] = None,
        type_column_authoritative: bool = False,
        apply_rules: bool = True,
    ) -> dict[str, Any]:
        """Import transactions from a CSV file.

        See import_csv_text for arguments and return value.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file is not UTF-8 text
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        csv_text = _read_text(csv_path)

        logger.info("Importing %s into account %d", csv_path, account_id)
        return self.import_csv_text(
            csv_text,
            account_id,
            column_mapping=column_mapping,
            column_overrides=column_overrides,
            default_direction=default_direction,
            type_column_authoritative=type_column_authoritative,
            apply_rules=apply_rules,
        )

    def import_csv_text(
        self,
        csv_text: str,
        account_id: int,
        column_mapping: Optional[ColumnMapping] = None,
        column_overrides: Optional[dict[str, Optional[str]]] = None,
        default_direction: Optional[Direction] = None,
        type_column_authoritative: bool = False,
        apply_rules: bool = True,
    ) -> dict[str, Any]:
        """Import transactions from CSV text.

        Rows that fail to parse are reported and skipped. The remaining rows
        are stored together with a single balance adjustment, or not at all.

        Args:
            csv_text: CSV content including the header row
            account_id: Account receiving the transactions
            column_mapping: Explicit mapping; detected from the header when None
            column_overrides: Field -> header replacements applied on top of detection
            default_direction: Direction for rows nothing else decides (DEBIT when None)
            type_column_authoritative: Let a non-blank type cell override the amount sign
            apply_rules: Categorize uncategorized rows with the active rules

        Returns:
            Dict with import statistics:
            - imported: number of transactions stored
            - categorized: number of stored transactions with a category
            - balance_change: signed sum added to the account balance
            - errors: list of "Row N: reason" messages
            - mapping: the column mapping that was used

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the CSV has no header row or cannot be read
            MappingIncompleteError: If required columns can't be resolved
            BatchImportError: If no row produced a valid transaction
        """
        self.account_service.require_account(account_id)

        headers, rows = _read_rows(csv_text)
        mapping = resolve_mapping(headers, column_mapping, column_overrides)

        drafts, errors = classify_rows(
            rows,
            mapping,
            default_direction=default_direction,
            type_column_authoritative=type_column_authoritative,
        )
        for message in errors:
            logger.warning(message)

        if not drafts:
            raise BatchImportError(errors)

        drafts = self._assign_categories(drafts, apply_rules)

        self.db.import_transactions(account_id, drafts)

        balance_change = sum((d.signed_amount for d in drafts), Decimal("0"))
        categorized = sum(1 for d in drafts if d.category_id is not None)
        logger.info(
            "Imported %d transactions (%d categorized, %d rows skipped)",
            len(drafts),
            categorized,
            len(errors),
        )
        return {
            "imported": len(drafts),
            "categorized": categorized,
            "balance_change": balance_change,
            "errors": errors,
            "mapping": mapping,
        }

    def _assign_categories(
        self, drafts: list[TransactionDraft], apply_rules: bool
    ) -> list[TransactionDraft]:
        # A category named in the file wins over rules.
        rules = self.db.list_rules(active_only=True) if apply_rules else []
        assigned = []
        for draft in drafts:
            category_id = None
            if draft.category_name:
                category = self.category_service.resolve_category(draft.category_name)
                if category is None:
                    logger.warning(
                        "Row %d: unknown category '%s' ignored",
                        draft.row_number,
                        draft.category_name,
                    )
                else:
                    category_id = category.id
            if category_id is None and rules:
                category_id = evaluate_rules(rules, draft.description, draft.amount, draft.date)
            assigned.append(replace(draft, category_id=category_id))
        return assigned

    def detect_columns_in_file(self, csv_file_path: str) -> tuple[list[str], ColumnMapping]:
        """Read only the header of a CSV file and detect its column mapping.

        Returns:
            Tuple of (headers, detected mapping)

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the CSV has no header row or cannot be read
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        headers, _ = _read_rows(_read_text(csv_path))
        return headers, detect_columns(headers)
