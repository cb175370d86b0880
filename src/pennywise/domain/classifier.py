"""Turn raw CSV rows into transaction drafts."""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping, Optional

from pennywise.domain.entities import ColumnMapping, Direction, TransactionDraft
from pennywise.domain.errors import RowError
from pennywise.utils.amount_parser import parse_leading_number, strip_to_number
from pennywise.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

CREDIT_KEYWORDS = ("credit", "deposit")
DEBIT_KEYWORDS = ("debit", "withdrawal")


def _value(row: Mapping[str, Optional[str]], column: Optional[str]) -> Optional[str]:
    """Return the stripped cell for ``column``, or None when absent or blank."""
    if column is None:
        return None
    raw = row.get(column)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _coordinate(row: Mapping[str, Optional[str]], column: Optional[str], row_number: int) -> Optional[float]:
    text = _value(row, column)
    if text is None:
        return None
    try:
        value = float(text)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value):
        logger.warning("Row %d: ignoring non-numeric %s value %r", row_number, column, text)
        return None
    return value


def resolve_direction(
    type_value: Optional[str],
    raw_amount: str,
    default_direction: Optional[Direction] = None,
    type_column_authoritative: bool = False,
) -> Direction:
    """Decide whether a row is a credit or a debit.

    Precedence:
      1. a type cell containing credit/deposit or debit/withdrawal;
      2. a raw amount that reads as negative -> DEBIT;
      3. a type cell is present (without keywords) and the amount is positive -> CREDIT;
      4. ``default_direction``, else DEBIT.

    With ``type_column_authoritative`` a non-blank type cell skips 2 and 3.

    Args:
        type_value: Cell from the type column, or None when unmapped or blank
        raw_amount: Amount cell exactly as it appeared in the CSV
        default_direction: Fallback direction supplied by the caller
        type_column_authoritative: Never let the sign override a present type cell
    """
    fallback = default_direction or Direction.DEBIT

    if type_value is not None:
        lowered = type_value.lower()
        if any(word in lowered for word in CREDIT_KEYWORDS):
            return Direction.CREDIT
        if any(word in lowered for word in DEBIT_KEYWORDS):
            return Direction.DEBIT
        if type_column_authoritative:
            return fallback

    signed_value = parse_leading_number(raw_amount)
    if signed_value is not None:
        if signed_value < 0:
            return Direction.DEBIT
        if signed_value > 0 and type_value is not None:
            return Direction.CREDIT

    return fallback


def classify_row(
    row: Mapping[str, Optional[str]],
    mapping: ColumnMapping,
    row_number: int,
    default_direction: Optional[Direction] = None,
    type_column_authoritative: bool = False,
) -> TransactionDraft:
    """Convert one CSV row into a transaction draft.

    Args:
        row: Header -> cell value, as produced by csv.DictReader
        mapping: Resolved column mapping
        row_number: 1-based data row number used in error messages
        default_direction: Direction used when nothing in the row decides it
        type_column_authoritative: See resolve_direction

    Returns:
        TransactionDraft

    Raises:
        RowError: If a required field is missing or unparsable
    """
    date_str = _value(row, mapping.date)
    amount_str = _value(row, mapping.amount)
    description = _value(row, mapping.description)

    if date_str is None or amount_str is None or description is None:
        raise RowError(row_number, "Missing required fields")

    try:
        txn_date = parse_date(date_str, allow_relative=False)
    except ValueError:
        raise RowError(row_number, "Invalid date format")

    stripped = strip_to_number(amount_str)
    if stripped is None:
        raise RowError(row_number, "Invalid amount")
    try:
        amount = abs(stripped).quantize(Decimal("0.01"))
    except InvalidOperation:
        raise RowError(row_number, "Invalid amount")
    if amount == 0:
        raise RowError(row_number, "Invalid amount")
    if amount != abs(stripped):
        logger.warning("Row %d: amount %s rounded to %s", row_number, amount_str.strip(), amount)

    direction = resolve_direction(
        _value(row, mapping.type),
        amount_str,
        default_direction=default_direction,
        type_column_authoritative=type_column_authoritative,
    )

    latitude = _coordinate(row, mapping.latitude, row_number)
    longitude = _coordinate(row, mapping.longitude, row_number)

    logger.debug("Row %d: %s %s on %s", row_number, direction.value, amount, txn_date)

    return TransactionDraft(
        row_number=row_number,
        amount=amount,
        direction=direction,
        date=txn_date,
        description=description,
        category_name=_value(row, mapping.category),
        latitude=latitude,
        longitude=longitude,
        location_name=_value(row, mapping.location_name),
    )


def classify_rows(
    rows: Iterable[Mapping[str, Optional[str]]],
    mapping: ColumnMapping,
    default_direction: Optional[Direction] = None,
    type_column_authoritative: bool = False,
) -> tuple[list[TransactionDraft], list[str]]:
    """Classify every row, collecting per-row errors instead of stopping.

    Returns:
        Tuple of (drafts, error messages), both in input order
    """
    drafts = []
    errors = []
    for row_number, row in enumerate(rows, start=1):
        try:
            drafts.append(
                classify_row(
                    row,
                    mapping,
                    row_number,
                    default_direction=default_direction,
                    type_column_authoritative=type_column_authoritative,
                )
            )
        except RowError as e:
            errors.append(str(e))
    return drafts, errors
