"""Automatic journal postings for invoices, customer payments and expenses."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from pharmaledger.database.base import Database
from pharmaledger.domain.account import AccountService
from pharmaledger.domain.entities import JournalEntry, JournalStatus, NewJournalLine
from pharmaledger.domain.errors import NotFoundError, ValidationError, account_code_not_found
from pharmaledger.domain.journal import JournalService
from pharmaledger.domain.money import to_money
from pharmaledger.domain.payment import PaymentService

logger = logging.getLogger(__name__)

# Standard chart codes the postings rely on
CASH = "1100"
ACCOUNTS_RECEIVABLE = "1200"
INVENTORY = "1300"
ACCOUNTS_PAYABLE = "2100"
TAX_PAYABLE = "2200"
SALES_REVENUE = "4100"
COST_OF_GOODS_SOLD = "5100"
OFFICE_EXPENSES = "6100"
UTILITIES = "6300"

EXPENSE_CATEGORY_CODES = {
    "office supplies": OFFICE_EXPENSES,
    "utilities": UTILITIES,
    "travel": OFFICE_EXPENSES,
    "marketing": OFFICE_EXPENSES,
    "equipment": OFFICE_EXPENSES,
    "rent": OFFICE_EXPENSES,
    "insurance": OFFICE_EXPENSES,
    "professional services": OFFICE_EXPENSES,
    "other": OFFICE_EXPENSES,
}


def expense_account_code(category: Optional[str]) -> str:
    """Map an expense category to its account code, defaulting to office expenses."""
    return EXPENSE_CATEGORY_CODES.get((category or "").strip().lower(), OFFICE_EXPENSES)


class PostingService:
    """Service that turns business documents into posted journal entries."""

    def __init__(self, db: Database):
        """Initialize posting service.

        Args:
            db: Database instance
        """
        self.db = db
        self.accounts = AccountService(db)
        self.journal = JournalService(db)
        self.payments = PaymentService(db)

    def _account_id(self, code: str) -> int:
        account = self.accounts.get_account_by_code(code)
        if account is None or not account.is_active:
            raise NotFoundError(account_code_not_found(code))
        return account.id

    def post_invoice(
        self,
        invoice_number: str,
        customer_name: str,
        entry_date: date,
        net_amount: Decimal | str | int,
        tax_amount: Decimal | str | int = 0,
    ) -> JournalEntry:
        """Post a sales invoice.

        Debits receivables with the gross amount and credits sales revenue
        with the net amount and tax payable with the tax.

        Raises:
            ValidationError: If the net amount is not positive or the tax is negative
            NotFoundError: If a standard account is missing
        """
        net = to_money(net_amount, "Net amount")
        tax = to_money(tax_amount, "Tax amount")
        if net <= 0:
            raise ValidationError(f"Net amount must be greater than zero, got {net}")
        if tax < 0:
            raise ValidationError(f"Tax amount cannot be negative, got {tax}")

        lines = [
            NewJournalLine(
                account_id=self._account_id(ACCOUNTS_RECEIVABLE),
                debit_amount=net + tax,
                description=f"Invoice {invoice_number}",
            ),
            NewJournalLine(
                account_id=self._account_id(SALES_REVENUE),
                credit_amount=net,
                description=f"Sales revenue - Invoice {invoice_number}",
            ),
        ]
        if tax > 0:
            lines.append(
                NewJournalLine(
                    account_id=self._account_id(TAX_PAYABLE),
                    credit_amount=tax,
                    description=f"Sales tax - Invoice {invoice_number}",
                )
            )

        entry = self.journal.create_journal_entry(
            entry_date=entry_date,
            lines=lines,
            memo=f"Sale to {customer_name}",
            reference=f"Invoice {invoice_number}",
            status=JournalStatus.POSTED,
        )
        logger.info("Posted invoice %s as %s", invoice_number, entry.entry_number)
        return entry

    def post_customer_payment(
        self, payment_id: int, customer_name: Optional[str] = None
    ) -> JournalEntry:
        """Post a recorded customer payment: debit cash, credit receivables.

        Raises:
            NotFoundError: If the payment or a standard account is missing
        """
        payment = self.payments.require_customer_payment(payment_id)
        payer = customer_name or f"customer {payment.customer_id}"

        entry = self.journal.create_journal_entry(
            entry_date=payment.payment_date,
            lines=[
                NewJournalLine(
                    account_id=self._account_id(CASH),
                    debit_amount=payment.amount,
                    description=f"Payment from {payer}",
                ),
                NewJournalLine(
                    account_id=self._account_id(ACCOUNTS_RECEIVABLE),
                    credit_amount=payment.amount,
                    description=f"Payment from {payer}",
                ),
            ],
            memo=f"Payment from {payer}",
            reference=payment.reference or f"Payment {payment.id}",
            status=JournalStatus.POSTED,
        )
        logger.info("Posted payment %s as %s", payment_id, entry.entry_number)
        return entry

    def post_expense(
        self,
        category: str,
        description: str,
        amount: Decimal | str | int,
        entry_date: date,
        vendor: Optional[str] = None,
    ) -> JournalEntry:
        """Post an expense paid in cash: debit the mapped expense account, credit cash.

        Unknown categories are booked to office expenses.
        """
        value = to_money(amount, "Expense amount")
        if value <= 0:
            raise ValidationError(f"Expense amount must be greater than zero, got {value}")

        entry = self.journal.create_journal_entry(
            entry_date=entry_date,
            lines=[
                NewJournalLine(
                    account_id=self._account_id(expense_account_code(category)),
                    debit_amount=value,
                    description=description,
                ),
                NewJournalLine(
                    account_id=self._account_id(CASH),
                    credit_amount=value,
                    description=f"Payment for {description}",
                ),
            ],
            memo=description,
            reference=vendor or "General Expense",
            status=JournalStatus.POSTED,
        )
        logger.info("Posted %s expense as %s", category, entry.entry_number)
        return entry
