"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class UnbalancedEntryError(ValidationError):
    """Journal entry debits and credits differ."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Journal entry is unbalanced: debits {total_debit} != credits {total_credit}"
        )


class DuplicateAccountCodeError(ConflictError):
    """Account code already used by an active account."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Active account with code '{code}' already exists")


class OverAllocationError(ValidationError):
    """Allocations would exceed the payment amount."""

    def __init__(self, payment_id: int, payment_amount: Decimal, allocated_total: Decimal):
        self.payment_id = payment_id
        self.payment_amount = payment_amount
        self.allocated_total = allocated_total
        super().__init__(
            f"Payment {payment_id} over-allocated: {allocated_total} allocated "
            f"against an amount of {payment_amount}"
        )


class ImmutableEntryError(ConflictError):
    """Posted journal entries cannot be changed."""

    def __init__(self, journal_id: int, action: str = "modify"):
        self.journal_id = journal_id
        super().__init__(f"Cannot {action} journal entry {journal_id}: it is posted")


class StorageError(RuntimeError):
    """Underlying database failure (connection loss, constraint violation)."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str) -> str:
    """Return message for missing account by code."""
    return f"Account with code '{code}' not found"


def account_inactive(account_id: int) -> str:
    """Return message for postings to a deactivated account."""
    return f"Account {account_id} is inactive"


def journal_entry_not_found(journal_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {journal_id} not found"


def payment_not_found(payment_id: int) -> str:
    """Return message for missing customer payment."""
    return f"Customer payment {payment_id} not found"
