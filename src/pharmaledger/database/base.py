"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date
from decimal import Decimal

from pharmaledger.domain.entities import (
    Account,
    JournalEntry,
    JournalLine,
    CustomerPayment,
    PaymentAllocation,
    LedgerPosting,
)


class Database(ABC):
    """Abstract database interface for pharmaledger.

    Write methods return the id of the affected row; read methods return
    domain entities or None.
    """

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

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes into one atomic unit.

        Writes inside the block are committed when the outermost block exits
        normally and rolled back if it raises. Blocks may be nested.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, code: str, name: str, account_type: str, description: Optional[str] = None
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID, active or not."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by exact code, preferring the active one."""
        pass

    @abstractmethod
    def list_accounts(
        self, account_type: Optional[str] = None, include_inactive: bool = False
    ) -> list[Account]:
        """List accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update account fields that are not None."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Hard-delete an account row."""
        pass

    @abstractmethod
    def get_account_line_count(self, account_id: int) -> int:
        """Count journal lines that reference an account."""
        pass

    # Journal entry operations
    @abstractmethod
    def create_journal_entry(
        self,
        entry_number: str,
        entry_date: date,
        memo: Optional[str] = None,
        reference: Optional[str] = None,
        status: str = "draft",
        reversal_of_id: Optional[int] = None,
    ) -> int:
        """Create a journal entry header. Returns entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, journal_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def get_reversal_of(self, journal_id: int) -> Optional[JournalEntry]:
        """Get the entry that reverses the given entry, if any."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest date first. Bounds are inclusive."""
        pass

    @abstractmethod
    def get_last_entry_number(self, prefix: str) -> Optional[str]:
        """Get the highest entry number starting with prefix, if any."""
        pass

    @abstractmethod
    def update_journal_entry(
        self,
        journal_id: int,
        entry_date: Optional[date] = None,
        memo: Optional[str] = None,
        reference: Optional[str] = None,
        status: Optional[str] = None,
    ) -> None:
        """Update journal entry fields that are not None."""
        pass

    @abstractmethod
    def delete_journal_entry(self, journal_id: int) -> None:
        """Delete a journal entry and its lines."""
        pass

    # Journal line operations
    @abstractmethod
    def create_journal_line(
        self,
        journal_id: int,
        account_id: int,
        debit_amount: Decimal,
        credit_amount: Decimal,
        position: int,
        description: Optional[str] = None,
    ) -> int:
        """Create a journal line. Returns line ID."""
        pass

    @abstractmethod
    def get_journal_lines(self, journal_id: int) -> list[JournalLine]:
        """Get lines of an entry ordered by position ascending."""
        pass

    @abstractmethod
    def delete_journal_lines(self, journal_id: int) -> None:
        """Delete every line of an entry."""
        pass

    @abstractmethod
    def list_postings(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[str] = "posted",
    ) -> list[LedgerPosting]:
        """List journal lines with their entry dates for reporting."""
        pass

    # Customer payment operations
    @abstractmethod
    def create_customer_payment(
        self,
        customer_id: int,
        payment_date: date,
        amount: Decimal,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> int:
        """Create a customer payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_customer_payment(self, payment_id: int) -> Optional[CustomerPayment]:
        """Get customer payment by ID."""
        pass

    @abstractmethod
    def list_customer_payments(
        self,
        customer_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[CustomerPayment]:
        """List customer payments, newest payment date first."""
        pass

    @abstractmethod
    def update_customer_payment(
        self,
        payment_id: int,
        customer_id: Optional[int] = None,
        payment_date: Optional[date] = None,
        amount: Optional[Decimal] = None,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> None:
        """Update customer payment fields that are not None."""
        pass

    @abstractmethod
    def delete_customer_payment(self, payment_id: int) -> None:
        """Delete a customer payment and its allocations."""
        pass

    # Payment allocation operations
    @abstractmethod
    def create_payment_allocation(
        self,
        payment_id: int,
        target_type: str,
        target_id: int,
        allocated_amount: Decimal,
    ) -> int:
        """Create a payment allocation. Returns allocation ID."""
        pass

    @abstractmethod
    def get_payment_allocations(self, payment_id: int) -> list[PaymentAllocation]:
        """Get allocations of a payment in creation order."""
        pass

    @abstractmethod
    def count_allocations_to_target(self, target_type: str, target_id: int) -> int:
        """Count allocations, across all payments, that point at one target."""
        pass
