"""Ledger facade bundling the domain services.

Exposes the storage operations the ERP's HTTP layer calls, one method per
operation, delegating to the individual services.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from pharmaledger.database.base import Database
from pharmaledger.domain.account import AccountService
from pharmaledger.domain.entities import (
    Account,
    AccountType,
    AllocationTarget,
    CustomerPayment,
    JournalEntry,
    JournalLine,
    JournalStatus,
    NewJournalLine,
    NewPaymentAllocation,
    PaymentAllocation,
)
from pharmaledger.domain.journal import JournalService
from pharmaledger.domain.payment import PaymentService
from pharmaledger.domain.posting import PostingService
from pharmaledger.domain.reporting import ReportingService


class Ledger:
    """Entry point to the account registry, journal, payments and reports."""

    def __init__(self, db: Database):
        self.db = db
        self.accounts = AccountService(db)
        self.journal = JournalService(db)
        self.payments = PaymentService(db)
        self.reports = ReportingService(db)
        self.postings = PostingService(db)

    # Accounts
    def list_accounts(self, account_type: AccountType | str | None = None) -> list[Account]:
        return self.accounts.list_accounts(account_type)

    def get_account(self, account_id: int) -> Optional[Account]:
        return self.accounts.get_account(account_id)

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType | str,
        description: Optional[str] = None,
    ) -> Account:
        account_id = self.accounts.create_account(code, name, account_type, description)
        return self.accounts.require_account(account_id)

    def update_account(self, account_id: int, **changes) -> Account:
        return self.accounts.update_account(account_id, **changes)

    def delete_account(self, account_id: int) -> bool:
        return self.accounts.delete_account(account_id)

    # Journal
    def get_journal_entries(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: JournalStatus | str | None = None,
    ) -> list[JournalEntry]:
        return self.journal.get_journal_entries(date_from, date_to, status)

    def get_journal_entry(self, journal_id: int) -> Optional[JournalEntry]:
        return self.journal.get_journal_entry(journal_id)

    def get_journal_lines(self, journal_id: int) -> list[JournalLine]:
        return self.journal.get_journal_lines(journal_id)

    def create_journal_entry(
        self,
        entry_date: date,
        lines: Sequence[NewJournalLine],
        memo: Optional[str] = None,
        reference: Optional[str] = None,
        status: JournalStatus | str = JournalStatus.DRAFT,
    ) -> JournalEntry:
        return self.journal.create_journal_entry(
            entry_date, lines, memo=memo, reference=reference, status=status
        )

    def create_journal_line(
        self, journal_id: int, line: NewJournalLine, position: Optional[int] = None
    ) -> JournalLine:
        return self.journal.create_journal_line(journal_id, line, position)

    def update_journal_entry(self, journal_id: int, **changes) -> JournalEntry:
        return self.journal.update_journal_entry(journal_id, **changes)

    def delete_journal_entry(self, journal_id: int) -> None:
        self.journal.delete_journal_entry(journal_id)

    # Payments
    def get_customer_payments(
        self,
        customer_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[CustomerPayment]:
        return self.payments.get_customer_payments(customer_id, date_from, date_to)

    def get_customer_payment(self, payment_id: int) -> Optional[CustomerPayment]:
        return self.payments.get_customer_payment(payment_id)

    def get_payment_allocations(self, payment_id: int) -> list[PaymentAllocation]:
        return self.payments.get_payment_allocations(payment_id)

    def create_customer_payment(
        self,
        customer_id: int,
        payment_date: date,
        amount: Decimal | str | int,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
        allocations: Sequence[NewPaymentAllocation] = (),
    ) -> CustomerPayment:
        return self.payments.create_customer_payment(
            customer_id,
            payment_date,
            amount,
            reference=reference,
            payment_method=payment_method,
            allocations=allocations,
        )

    def create_payment_allocation(
        self,
        payment_id: int,
        target_id: int,
        allocated_amount: Decimal | str | int,
        target_type: AllocationTarget | str = AllocationTarget.INVOICE,
    ) -> PaymentAllocation:
        return self.payments.create_payment_allocation(
            payment_id, target_id, allocated_amount, target_type
        )

    def update_customer_payment(self, payment_id: int, **changes) -> CustomerPayment:
        return self.payments.update_customer_payment(payment_id, **changes)

    def delete_customer_payment(self, payment_id: int) -> None:
        self.payments.delete_customer_payment(payment_id)
