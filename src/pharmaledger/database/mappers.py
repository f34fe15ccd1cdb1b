"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from decimal import Decimal

from pharmaledger.domain import entities as domain
from pharmaledger.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    CustomerPayment as ORMCustomerPayment,
    PaymentAllocation as ORMPaymentAllocation,
)


def _money(value) -> Decimal:
    """Normalise a Numeric column value to a two-place Decimal."""
    if value is None:
        return domain.ZERO
    return Decimal(value).quantize(Decimal("0.01"))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        is_active=bool(orm_account.is_active),
        created_at=orm_account.created_at,
        description=orm_account.description,
        updated_at=orm_account.updated_at,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        entry_number=orm_entry.entry_number,
        date=orm_entry.date,
        memo=orm_entry.memo,
        reference=orm_entry.reference,
        status=domain.JournalStatus(orm_entry.status),
        created_at=orm_entry.created_at,
        reversal_of_id=orm_entry.reversal_of_id,
        posted_at=orm_entry.posted_at,
        updated_at=orm_entry.updated_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.id,
        journal_id=orm_line.journal_id,
        account_id=orm_line.account_id,
        debit_amount=_money(orm_line.debit_amount),
        credit_amount=_money(orm_line.credit_amount),
        position=orm_line.position,
        description=orm_line.description,
    )


def customer_payment_to_domain(orm_payment: ORMCustomerPayment) -> domain.CustomerPayment:
    """Convert SQLAlchemy CustomerPayment model to domain CustomerPayment entity."""
    return domain.CustomerPayment(
        id=orm_payment.id,
        customer_id=orm_payment.customer_id,
        payment_date=orm_payment.payment_date,
        amount=_money(orm_payment.amount),
        created_at=orm_payment.created_at,
        reference=orm_payment.reference,
        payment_method=orm_payment.payment_method,
        updated_at=orm_payment.updated_at,
    )


def payment_allocation_to_domain(orm_allocation: ORMPaymentAllocation) -> domain.PaymentAllocation:
    """Convert SQLAlchemy PaymentAllocation model to domain PaymentAllocation entity."""
    return domain.PaymentAllocation(
        id=orm_allocation.id,
        payment_id=orm_allocation.payment_id,
        target_type=domain.AllocationTarget(orm_allocation.target_type),
        target_id=orm_allocation.target_id,
        allocated_amount=_money(orm_allocation.allocated_amount),
        created_at=orm_allocation.created_at,
    )
