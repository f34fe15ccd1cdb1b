"""Payment allocator domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from pharmaledger.database.base import Database
from pharmaledger.domain.entities import (
    AllocationTarget,
    CustomerPayment,
    NewPaymentAllocation,
    PaymentAllocation,
)
from pharmaledger.domain.errors import (
    NotFoundError,
    OverAllocationError,
    ValidationError,
    journal_entry_not_found,
    payment_not_found,
)
from pharmaledger.domain.money import money_sum, to_money

logger = logging.getLogger(__name__)


def parse_target_type(value: AllocationTarget | str) -> AllocationTarget:
    """Coerce a string to an AllocationTarget."""
    if isinstance(value, AllocationTarget):
        return value
    try:
        return AllocationTarget(str(value).strip().lower().replace("-", "_"))
    except ValueError:
        raise ValidationError(
            f"Unknown allocation target '{value}'. Valid targets: invoice, journal_entry"
        )


def _positive_money(value, field_name: str) -> Decimal:
    amount = to_money(value, field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero, got {amount}")
    return amount


class PaymentService:
    """Service for recording customer payments and allocating them."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db

    def require_customer_payment(self, payment_id: int) -> CustomerPayment:
        """Get customer payment by ID or raise NotFoundError."""
        payment = self.db.get_customer_payment(payment_id)
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        return payment

    def get_customer_payment(self, payment_id: int) -> Optional[CustomerPayment]:
        """Get customer payment by ID."""
        return self.db.get_customer_payment(payment_id)

    def get_customer_payments(
        self,
        customer_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[CustomerPayment]:
        """List payments, newest payment date first."""
        return self.db.list_customer_payments(
            customer_id=customer_id, date_from=date_from, date_to=date_to
        )

    def get_payment_allocations(self, payment_id: int) -> list[PaymentAllocation]:
        """List allocations of a payment in creation order."""
        return self.db.get_payment_allocations(payment_id)

    def get_allocated_total(self, payment_id: int) -> Decimal:
        """Sum of all allocations recorded against a payment."""
        return money_sum(a.allocated_amount for a in self.db.get_payment_allocations(payment_id))

    def get_unallocated_amount(self, payment_id: int) -> Decimal:
        """Part of a payment not yet allocated."""
        payment = self.require_customer_payment(payment_id)
        return payment.amount - self.get_allocated_total(payment_id)

    def create_customer_payment(
        self,
        customer_id: int,
        payment_date: date,
        amount: Decimal | str | int,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
        allocations: Sequence[NewPaymentAllocation] = (),
    ) -> CustomerPayment:
        """Record a customer payment, optionally allocating it in the same transaction.

        Args:
            customer_id: Paying customer
            payment_date: Date the payment was received
            amount: Positive payment amount
            reference: Optional reference (cheque or transfer number)
            payment_method: Optional method (cash, bank transfer, ...)
            allocations: Optional allocations written atomically with the payment

        Returns:
            The created CustomerPayment

        Raises:
            ValidationError: If the amount is not positive
            OverAllocationError: If the allocations exceed the amount
        """
        payment_amount = _positive_money(amount, "Payment amount")

        with self.db.transaction():
            payment_id = self.db.create_customer_payment(
                customer_id=customer_id,
                payment_date=payment_date,
                amount=payment_amount,
                reference=reference,
                payment_method=payment_method,
            )
            for allocation in allocations:
                self.create_payment_allocation(
                    payment_id=payment_id,
                    target_id=allocation.target_id,
                    allocated_amount=allocation.allocated_amount,
                    target_type=allocation.target_type,
                )

        logger.info(
            "Recorded payment %s of %s from customer %s", payment_id, payment_amount, customer_id
        )
        return self.require_customer_payment(payment_id)

    def create_payment_allocation(
        self,
        payment_id: int,
        target_id: int,
        allocated_amount: Decimal | str | int,
        target_type: AllocationTarget | str = AllocationTarget.INVOICE,
    ) -> PaymentAllocation:
        """Allocate part of a payment to an invoice or journal entry.

        The check and the insert run in one transaction so that the sum of a
        payment's allocations never exceeds its amount.

        Raises:
            NotFoundError: If the payment, or a journal entry target, does not exist
            ValidationError: If the amount is not positive
            OverAllocationError: If the allocation would exceed the payment amount
        """
        amount = _positive_money(allocated_amount, "Allocated amount")
        target = parse_target_type(target_type)

        with self.db.transaction():
            payment = self.require_customer_payment(payment_id)
            if target == AllocationTarget.JOURNAL_ENTRY and self.db.get_journal_entry(target_id) is None:
                raise NotFoundError(journal_entry_not_found(target_id))

            new_total = self.get_allocated_total(payment_id) + amount
            if new_total > payment.amount:
                logger.warning(
                    "Rejected allocation of %s to payment %s: total %s exceeds %s",
                    amount,
                    payment_id,
                    new_total,
                    payment.amount,
                )
                raise OverAllocationError(payment_id, payment.amount, new_total)

            allocation_id = self.db.create_payment_allocation(
                payment_id=payment_id,
                target_type=target.value,
                target_id=target_id,
                allocated_amount=amount,
            )

        return next(
            a for a in self.db.get_payment_allocations(payment_id) if a.id == allocation_id
        )

    def update_customer_payment(
        self,
        payment_id: int,
        customer_id: Optional[int] = None,
        payment_date: Optional[date] = None,
        amount: Decimal | str | int | None = None,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> CustomerPayment:
        """Update a payment.

        Raises:
            NotFoundError: If the payment does not exist
            OverAllocationError: If the new amount is below the allocated total
        """
        new_amount = _positive_money(amount, "Payment amount") if amount is not None else None

        with self.db.transaction():
            self.require_customer_payment(payment_id)
            if new_amount is not None:
                allocated = self.get_allocated_total(payment_id)
                if allocated > new_amount:
                    raise OverAllocationError(payment_id, new_amount, allocated)

            self.db.update_customer_payment(
                payment_id,
                customer_id=customer_id,
                payment_date=payment_date,
                amount=new_amount,
                reference=reference,
                payment_method=payment_method,
            )
        return self.require_customer_payment(payment_id)

    def delete_customer_payment(self, payment_id: int) -> None:
        """Delete a payment together with its allocations."""
        self.require_customer_payment(payment_id)
        self.db.delete_customer_payment(payment_id)
        logger.info("Deleted payment %s", payment_id)
