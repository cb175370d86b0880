"""Transaction domain service."""

import logging
from typing import Optional
from datetime import date
from decimal import Decimal
from pennywise.database.base import Database
from pennywise.domain.entities import (
    Direction,
    RecurringFrequency,
    Transaction as TransactionEntity,
)
from pennywise.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    category_path_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


def _check_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    if latitude is not None and not -90 <= latitude <= 90:
        raise ValidationError(f"Latitude {latitude} is out of range")
    if longitude is not None and not -180 <= longitude <= 180:
        raise ValidationError(f"Longitude {longitude} is out of range")


class TransactionService:
    """Service for managing transactions.

    Every change goes through the database layer, which keeps the owning
    account's balance in step.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        account_id: int,
        amount: Decimal,
        direction: Direction | str,
        date: date,
        description: str,
        category_id: Optional[int] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        location_name: Optional[str] = None,
        is_recurring: bool = False,
        recurring_frequency: Optional[RecurringFrequency] = None,
    ) -> int:
        """Create a transaction.

        Args:
            account_id: Account ID
            amount: Positive magnitude
            direction: CREDIT or DEBIT
            date: Transaction date
            description: Description
            category_id: Optional category ID
            latitude: Optional latitude
            longitude: Optional longitude
            location_name: Optional location name
            is_recurring: Whether the transaction repeats
            recurring_frequency: How often it repeats

        Returns:
            Transaction ID

        Raises:
            ValidationError: If amount, description or coordinates are invalid
            NotFoundError: If account or category doesn't exist
        """
        if amount <= 0:
            raise ValidationError("Amount must be positive")
        description = description.strip() if description else ""
        if not description:
            raise ValidationError("Description is required")
        try:
            direction = Direction.parse(direction)
        except ValueError as e:
            raise ValidationError(str(e))
        _check_coordinates(latitude, longitude)
        if recurring_frequency is not None and not is_recurring:
            raise ValidationError("A recurring frequency requires a recurring transaction")

        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        transaction_id = self.db.create_transaction(
            account_id=account_id,
            amount=amount,
            direction=direction,
            date=date,
            description=description,
            category_id=category_id,
            latitude=latitude,
            longitude=longitude,
            location_name=location_name,
            is_recurring=is_recurring,
            recurring_frequency=recurring_frequency,
        )
        logger.debug("Created transaction %d on account %d", transaction_id, account_id)
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_category(self, transaction_id: int, category_path: Optional[str]) -> None:
        """Update transaction category.

        Args:
            transaction_id: Transaction ID
            category_path: Category path (e.g., "Food & Dining > Groceries") or None

        Raises:
            NotFoundError: If transaction or category doesn't exist
        """
        self.require_transaction(transaction_id)

        category_id = None
        if category_path is not None:
            category = self.db.get_category_by_path(category_path)
            if category is None:
                raise NotFoundError(category_path_not_found(category_path))
            category_id = category.id

        self.db.update_transaction_category(transaction_id, category_id)

    def update_transaction(
        self,
        transaction_id: int,
        amount: Optional[Decimal] = None,
        direction: Optional[Direction | str] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        location_name: Optional[str] = None,
        is_recurring: Optional[bool] = None,
        recurring_frequency: Optional[RecurringFrequency] = None,
        clear_category: bool = False,
    ) -> None:
        """Update transaction fields.

        When amount or direction change, the account balance moves by the
        difference between the new and the old signed amount.

        Raises:
            NotFoundError: If transaction or category doesn't exist
            ValidationError: If new values are invalid
        """
        self.require_transaction(transaction_id)

        if amount is not None and amount <= 0:
            raise ValidationError("Amount must be positive")
        if description is not None and not description.strip():
            raise ValidationError("Description is required")
        if direction is not None:
            try:
                direction = Direction.parse(direction)
            except ValueError as e:
                raise ValidationError(str(e))
        _check_coordinates(latitude, longitude)

        if clear_category:
            if category_id is not None:
                raise ValidationError("Cannot set both category_id and clear_category")
        elif category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        self.db.update_transaction(
            transaction_id=transaction_id,
            amount=amount,
            direction=direction,
            date=date,
            description=description.strip() if description is not None else None,
            category_id=category_id,
            latitude=latitude,
            longitude=longitude,
            location_name=location_name,
            is_recurring=is_recurring,
            recurring_frequency=recurring_frequency,
            update_category=clear_category,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction, reversing its effect on the account balance.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_path: Optional[str] = None,
        account_id: Optional[int] = None,
        direction: Optional[Direction | str] = None,
        description_contains: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            category_path: Optional category path filter (empty string for uncategorized)
            account_id: Optional account ID filter
            direction: Optional CREDIT/DEBIT filter
            description_contains: Optional text the description must contain (case-insensitive)

        Returns:
            List of transaction entities, newest first
        """
        category_id = None
        uncategorized = False
        if category_path is not None:
            if category_path == "":
                uncategorized = True
            else:
                category = self.db.get_category_by_path(category_path)
                if category is None:
                    return []
                category_id = category.id

        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            account_id=account_id,
            direction=Direction.parse(direction) if direction is not None else None,
            uncategorized=uncategorized,
            description_contains=description_contains or None,
        )
