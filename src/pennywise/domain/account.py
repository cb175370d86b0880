"""Account domain service."""

from decimal import Decimal
from typing import Optional
from pennywise.database.base import Database
from pennywise.domain.entities import Account as AccountEntity
from pennywise.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        account_type: str = "checking",
        currency: str = "USD",
        balance: Decimal = Decimal("0"),
        description: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            account_type: Free-form account type (checking, savings, ...)
            currency: ISO currency code
            balance: Opening balance
            description: Optional description

        Returns:
            Account ID

        Raises:
            ValidationError: If name or currency is invalid
            ConflictError: If account name already exists
        """
        name = name.strip() if name else ""
        if not name:
            raise ValidationError("Name is required")
        if not account_type or not account_type.strip():
            raise ValidationError("Type is required")
        currency = currency.strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError(f"Invalid currency code '{currency}'")

        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            name=name,
            account_type=account_type.strip(),
            currency=currency,
            balance=balance,
            description=description,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()

    def get_balance(self, account_id: int) -> Decimal:
        """Get the current balance of an account.

        Raises:
            NotFoundError: If account not found
        """
        return self.require_account(account_id).balance

    def resolve_account(self, account: str | int) -> int:
        """Resolve an account name or ID to an account ID.

        Integers and numeric strings are treated as IDs, anything else as a name.

        Raises:
            NotFoundError: If account is not found
        """
        if isinstance(account, int):
            self.require_account(account)
            return account

        try:
            account_id = int(account)
        except (ValueError, TypeError):
            account_id = None

        if account_id is not None:
            if self.db.get_account(account_id) is None:
                raise NotFoundError(f"Account ID {account_id} not found")
            return account_id

        found = self.db.get_account_by_name(account)
        if found is None:
            raise NotFoundError(f"Account '{account}' not found")
        return found.id

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        currency: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update account fields.

        The balance is not editable here: it follows the account's transactions.

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name is taken by another account
        """
        self.require_account(account_id)

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Name is required")
            existing = self.db.get_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise ConflictError(f"Account with name '{name}' already exists")

        if currency is not None:
            currency = currency.strip().upper()
            if len(currency) != 3 or not currency.isalpha():
                raise ValidationError(f"Invalid currency code '{currency}'")

        self.db.update_account(
            account_id=account_id,
            name=name,
            account_type=account_type,
            currency=currency,
            description=description,
        )

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If account not found
            DependencyError: If the account still has transactions
        """
        self.require_account(account_id)

        transaction_count = self.db.get_account_transaction_count(account_id)
        if transaction_count > 0:
            raise DependencyError(account_delete_blocked(account_id, transaction_count))

        self.db.delete_account(account_id)
