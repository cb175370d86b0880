"""Abstract database interface.

Implementations keep every account's cached balance in step with its
transactions: creating, updating, deleting and importing transactions
adjust the balance in the same unit of work as the row change.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from pennywise.domain.entities import (
    Account,
    Category,
    CategorizationRule,
    CategoryTreeNode,
    Direction,
    MatchField,
    RecurringFrequency,
    Transaction,
    TransactionDraft,
)


class Database(ABC):
    """Abstract database interface for pennywise."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: str,
        currency: str = "USD",
        balance: Decimal = Decimal("0"),
        description: Optional[str] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by exact name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def search_accounts(self, text: str, limit: Optional[int] = None) -> list[Account]:
        """Find accounts whose name contains ``text`` ignoring case."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        currency: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update account fields that are not None."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Count transactions that belong to an account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, name: str, color: str = "#3b82f6", parent_id: Optional[int] = None
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_path(self, path: str) -> Optional[Category]:
        """Get category by path (e.g., 'Food & Dining > Groceries')."""
        pass

    @abstractmethod
    def find_categories_by_name(self, name: str) -> list[Category]:
        """Find categories whose name equals ``name`` ignoring case."""
        pass

    @abstractmethod
    def search_categories(self, text: str, limit: Optional[int] = None) -> list[Category]:
        """Find categories whose name contains ``text`` ignoring case."""
        pass

    @abstractmethod
    def list_categories(self, parent_id: Optional[int] = None) -> list[Category]:
        """List categories under ``parent_id`` (root categories when None)."""
        pass

    @abstractmethod
    def get_category_tree(self) -> list[CategoryTreeNode]:
        """Get all categories as a forest of root nodes."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        parent_id: Optional[int] = None,
        clear_parent: bool = False,
    ) -> None:
        """Update category fields. ``clear_parent`` makes it a root category."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category with its subcategories and their rules.

        Transactions in any removed category become uncategorized.
        """
        pass

    # Categorization rule operations
    @abstractmethod
    def create_rule(
        self,
        name: str,
        category_id: int,
        match_field: MatchField,
        match_pattern: str,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        priority: int = 0,
        is_active: bool = True,
    ) -> int:
        """Create a categorization rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[CategorizationRule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, active_only: bool = False) -> list[CategorizationRule]:
        """List rules ordered by priority (highest first), then creation."""
        pass

    @abstractmethod
    def update_rule(
        self,
        rule_id: int,
        name: Optional[str] = None,
        category_id: Optional[int] = None,
        match_field: Optional[MatchField] = None,
        match_pattern: Optional[str] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        priority: Optional[int] = None,
        is_active: Optional[bool] = None,
        clear_bounds: bool = False,
    ) -> None:
        """Update rule fields that are not None. ``clear_bounds`` unsets both bounds first."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        account_id: int,
        amount: Decimal,
        direction: Direction,
        date: date,
        description: str,
        category_id: Optional[int] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        location_name: Optional[str] = None,
        is_recurring: bool = False,
        recurring_frequency: Optional[RecurringFrequency] = None,
    ) -> int:
        """Create a transaction and apply its signed amount to the account balance."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        amount: Optional[Decimal] = None,
        direction: Optional[Direction] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        location_name: Optional[str] = None,
        is_recurring: Optional[bool] = None,
        recurring_frequency: Optional[RecurringFrequency] = None,
        update_category: bool = False,
    ) -> None:
        """Update transaction fields and adjust the balance by the signed delta.

        Args:
            update_category: If True, write category_id even when it is None
        """
        pass

    @abstractmethod
    def update_transaction_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Set or clear the category of a transaction."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and reverse its effect on the account balance."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        direction: Optional[Direction] = None,
        uncategorized: bool = False,
        description_contains: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            category_id: Optional category ID filter
            account_id: Optional account ID filter
            direction: Optional CREDIT/DEBIT filter
            uncategorized: If True, only return transactions without a category
            description_contains: Only descriptions containing this text, ignoring case
            limit: Maximum number of transactions to return
        """
        pass

    @abstractmethod
    def import_transactions(
        self, account_id: int, drafts: Sequence[TransactionDraft]
    ) -> list[int]:
        """Insert all drafts and adjust the balance once by their signed sum.

        Either every draft is stored together with the balance change or
        nothing is. Returns the new transaction IDs in draft order.
        """
        pass
