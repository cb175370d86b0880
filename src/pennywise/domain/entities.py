"""Domain model entities for pennywise.

These are pure data classes representing business concepts, independent of
database schema. Import-time values (column mappings, drafts) live here too
since they never touch the database directly.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Whether a transaction increases (CREDIT) or decreases (DEBIT) a balance."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    @classmethod
    def parse(cls, value: "str | Direction") -> "Direction":
        """Parse a direction from a case-insensitive string."""
        if isinstance(value, Direction):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Invalid direction '{value}'. Must be CREDIT or DEBIT")


class MatchField(str, Enum):
    """Transaction field a categorization rule is evaluated against."""

    DESCRIPTION = "DESCRIPTION"
    AMOUNT = "AMOUNT"
    AMOUNT_RANGE = "AMOUNT_RANGE"
    DATE = "DATE"

    @classmethod
    def parse(cls, value: "str | MatchField") -> "MatchField":
        """Parse a match field from a case-insensitive string."""
        if isinstance(value, MatchField):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid match field '{value}'. Must be one of: {valid}")


class RecurringFrequency(str, Enum):
    """How often a recurring transaction repeats."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


def signed(amount: Decimal, direction: Direction) -> Decimal:
    """Return the balance delta of a magnitude moving in ``direction``."""
    return amount if direction == Direction.CREDIT else -amount


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    name: str
    account_type: str
    currency: str
    balance: Decimal
    description: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with a parent reference."""

    id: int
    name: str
    color: str
    parent_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always a non-negative magnitude; the sign lives in
    ``direction``.
    """

    id: int
    account_id: int
    amount: Decimal
    direction: Direction
    date: date
    description: str
    category_id: Optional[int]
    latitude: Optional[float]
    longitude: Optional[float]
    location_name: Optional[str]
    is_recurring: bool
    recurring_frequency: Optional[RecurringFrequency]
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount with credits positive and debits negative."""
        return signed(self.amount, self.direction)


@dataclass(frozen=True)
class CategorizationRule:
    """User-defined rule that assigns a category to matching transactions."""

    id: int
    name: str
    category_id: int
    match_field: MatchField
    match_pattern: str
    min_amount: Optional[Decimal]
    max_amount: Optional[Decimal]
    priority: int
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class ColumnMapping:
    """Logical transaction field -> CSV header name, for one import."""

    date: Optional[str] = None
    amount: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    location_name: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    category: Optional[str] = None

    REQUIRED_FIELDS = ("date", "amount", "description")

    def missing_required(self) -> list[str]:
        """Return required fields that have no header assigned."""
        return [name for name in self.REQUIRED_FIELDS if getattr(self, name) is None]

    def as_dict(self) -> dict[str, str]:
        """Return only the fields that resolved to a header."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class TransactionDraft:
    """A classified CSV row that has not been persisted yet."""

    row_number: int
    amount: Decimal
    direction: Direction
    date: date
    description: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_name: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with credits positive and debits negative."""
        return signed(self.amount, self.direction)


@dataclass(frozen=True)
class CategoryTreeNode:
    """Category with its nested children, for hierarchical display."""

    category: Category
    children: list["CategoryTreeNode"] = field(default_factory=list)


@dataclass(frozen=True)
class SearchResults:
    """Matches for a quick search across transactions, accounts and categories."""

    transactions: list[Transaction] = field(default_factory=list)
    accounts: list[Account] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.transactions or self.accounts or self.categories)
