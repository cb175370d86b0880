"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class MappingIncompleteError(ValidationError):
    """Required CSV columns could not be detected from the header row."""

    def __init__(self, missing: list[str], detected: dict[str, str], available: list[str]):
        self.missing = missing
        self.detected = detected
        self.available = available
        detected_str = ", ".join(f"{k}={v!r}" for k, v in detected.items()) or "none"
        super().__init__(
            f"Could not detect required columns: {', '.join(missing)}. "
            f"Detected: {detected_str}. "
            f"Available columns: {', '.join(available) or 'none'}"
        )


class RowError(ValidationError):
    """A single CSV row could not be turned into a transaction."""

    def __init__(self, row_number: int, reason: str):
        self.row_number = row_number
        self.reason = reason
        super().__init__(f"Row {row_number}: {reason}")


class BatchImportError(ValidationError):
    """No row of an import produced a valid transaction."""

    def __init__(self, errors: list[str], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message or "No valid transactions to import")


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_path_not_found(path: str) -> str:
    """Return message for missing category by path."""
    return f"Category '{path}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing categorization rule."""
    return f"Rule {rule_id} not found"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account still has transactions."""
    return (
        f"Cannot delete account {account_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please delete them first."
    )
