"""Domain model entities for pharmaledger.

These are pure data classes representing ledger concepts, independent of
database schema. Storage returns them, services and the CLI consume them.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0.00")


class AccountType(str, Enum):
    """Chart-of-accounts classification."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class JournalStatus(str, Enum):
    """Journal entry lifecycle state. Transitions are one-way: draft -> posted."""

    DRAFT = "draft"
    POSTED = "posted"


class AllocationTarget(str, Enum):
    """Kind of document a payment allocation settles."""

    INVOICE = "invoice"
    JOURNAL_ENTRY = "journal_entry"


class GroupBy(str, Enum):
    """Grouping keys for journal line aggregation."""

    ACCOUNT = "account"
    MONTH = "month"
    ACCOUNT_MONTH = "account_month"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    code: str
    name: str
    type: AccountType
    is_active: bool
    created_at: datetime
    description: Optional[str] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header. Lines are fetched separately."""

    id: int
    entry_number: str
    date: date
    memo: Optional[str]
    reference: Optional[str]
    status: JournalStatus
    created_at: datetime
    reversal_of_id: Optional[int] = None
    posted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_posted(self) -> bool:
        return self.status == JournalStatus.POSTED


@dataclass(frozen=True)
class JournalLine:
    """One debit or credit posting within a journal entry."""

    id: int
    journal_id: int
    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    position: int
    description: Optional[str] = None


@dataclass(frozen=True)
class NewJournalLine:
    """A journal line that has not been written yet."""

    account_id: int
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    description: Optional[str] = None


@dataclass(frozen=True)
class CustomerPayment:
    """Payment received from a customer."""

    id: int
    customer_id: int
    payment_date: date
    amount: Decimal
    created_at: datetime
    reference: Optional[str] = None
    payment_method: Optional[str] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PaymentAllocation:
    """Portion of a payment assigned to an invoice or journal entry."""

    id: int
    payment_id: int
    target_type: AllocationTarget
    target_id: int
    allocated_amount: Decimal
    created_at: datetime


@dataclass(frozen=True)
class NewPaymentAllocation:
    """A payment allocation that has not been written yet."""

    target_id: int
    allocated_amount: Decimal
    target_type: AllocationTarget = AllocationTarget.INVOICE


@dataclass(frozen=True)
class LedgerPosting:
    """A journal line together with the date of its entry, used by reporting."""

    entry_date: date
    line: JournalLine


@dataclass(frozen=True)
class LineTotals:
    """Debit and credit totals for one aggregation group."""

    debit_total: Decimal = ZERO
    credit_total: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        """Debit minus credit."""
        return self.debit_total - self.credit_total

    def add(self, line: JournalLine) -> "LineTotals":
        return LineTotals(
            debit_total=self.debit_total + line.debit_amount,
            credit_total=self.credit_total + line.credit_amount,
        )


@dataclass(frozen=True)
class TrialBalanceRow:
    account: Account
    debit_total: Decimal
    credit_total: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Per-account debit/credit totals for a date window."""

    start_date: Optional[date]
    end_date: Optional[date]
    rows: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


@dataclass(frozen=True)
class AccountBalance:
    """Signed balance of one account in a statement section."""

    account: Account
    amount: Decimal


@dataclass(frozen=True)
class ProfitAndLoss:
    start_date: Optional[date]
    end_date: Optional[date]
    revenue: tuple[AccountBalance, ...]
    expenses: tuple[AccountBalance, ...]
    total_revenue: Decimal
    total_expenses: Decimal

    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses

    @property
    def profit_margin(self) -> Decimal:
        """Net income as a percentage of revenue, 0 when there is no revenue."""
        if self.total_revenue == 0:
            return ZERO
        return (self.net_income / self.total_revenue * 100).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class BalanceSheet:
    as_of: Optional[date]
    assets: tuple[AccountBalance, ...]
    liabilities: tuple[AccountBalance, ...]
    equity: tuple[AccountBalance, ...]
    current_earnings: Decimal = ZERO
    total_assets: Decimal = ZERO
    total_liabilities: Decimal = ZERO
    total_equity: Decimal = ZERO

    @property
    def is_balanced(self) -> bool:
        """Assets equal liabilities plus equity (current earnings included)."""
        return self.total_assets == self.total_liabilities + self.total_equity


@dataclass(frozen=True)
class LedgerSummary:
    """Aggregated journal line totals keyed by the requested grouping."""

    group_by: GroupBy
    start_date: Optional[date]
    end_date: Optional[date]
    groups: dict = field(default_factory=dict)
