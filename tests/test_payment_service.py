"""Tests for PaymentService."""

import pytest
from datetime import date
from decimal import Decimal

from pharmaledger.domain.entities import AllocationTarget, NewPaymentAllocation
from pharmaledger.domain.errors import NotFoundError, OverAllocationError, ValidationError


@pytest.fixture
def payment(payment_service):
    """A payment of 1000.00 from customer 7."""
    return payment_service.create_customer_payment(
        customer_id=7, payment_date=date(2025, 3, 1), amount="1000", reference="CHQ-1"
    )


def test_create_customer_payment(payment):
    assert payment.amount == Decimal("1000.00")
    assert payment.customer_id == 7
    assert payment.reference == "CHQ-1"


@pytest.mark.parametrize("amount", ["0", "-10", "10.001"])
def test_create_payment_rejects_bad_amounts(payment_service, amount):
    with pytest.raises(ValidationError):
        payment_service.create_customer_payment(
            customer_id=7, payment_date=date(2025, 3, 1), amount=amount
        )


def test_over_allocation_rejected(payment_service, payment):
    """600 then 500 against a 1000 payment: the second allocation fails."""
    payment_service.create_payment_allocation(payment.id, target_id=1, allocated_amount="600")

    with pytest.raises(OverAllocationError) as exc_info:
        payment_service.create_payment_allocation(payment.id, target_id=2, allocated_amount="500")

    assert exc_info.value.allocated_total == Decimal("1100.00")
    assert exc_info.value.payment_amount == Decimal("1000.00")
    allocations = payment_service.get_payment_allocations(payment.id)
    assert [a.allocated_amount for a in allocations] == [Decimal("600.00")]
    assert payment_service.get_unallocated_amount(payment.id) == Decimal("400.00")


def test_full_allocation_allowed(payment_service, payment):
    payment_service.create_payment_allocation(payment.id, target_id=1, allocated_amount="600")
    payment_service.create_payment_allocation(payment.id, target_id=2, allocated_amount="400")

    assert payment_service.get_allocated_total(payment.id) == Decimal("1000.00")
    assert payment_service.get_unallocated_amount(payment.id) == Decimal("0.00")


def test_allocation_to_missing_payment(payment_service):
    with pytest.raises(NotFoundError):
        payment_service.create_payment_allocation(999, target_id=1, allocated_amount="1")


def test_allocation_to_journal_entry(payment_service, payment, make_sale):
    entry = make_sale(250)

    allocation = payment_service.create_payment_allocation(
        payment.id, target_id=entry.id, allocated_amount="250", target_type="journal_entry"
    )

    assert allocation.target_type == AllocationTarget.JOURNAL_ENTRY
    assert allocation.target_id == entry.id


def test_allocation_to_missing_journal_entry(payment_service, payment):
    with pytest.raises(NotFoundError):
        payment_service.create_payment_allocation(
            payment.id, target_id=999, allocated_amount="1", target_type=AllocationTarget.JOURNAL_ENTRY
        )


def test_unknown_target_type(payment_service, payment):
    with pytest.raises(ValidationError, match="Unknown allocation target"):
        payment_service.create_payment_allocation(
            payment.id, target_id=1, allocated_amount="1", target_type="order"
        )


def test_payment_with_allocations_is_atomic(payment_service):
    """Allocations exceeding the amount leave no payment behind."""
    with pytest.raises(OverAllocationError):
        payment_service.create_customer_payment(
            customer_id=7,
            payment_date=date(2025, 3, 1),
            amount="1000",
            allocations=[
                NewPaymentAllocation(target_id=1, allocated_amount=Decimal("600")),
                NewPaymentAllocation(target_id=2, allocated_amount=Decimal("500")),
            ],
        )

    assert payment_service.get_customer_payments() == []


def test_payment_with_allocations(payment_service):
    payment = payment_service.create_customer_payment(
        customer_id=7,
        payment_date=date(2025, 3, 1),
        amount="1000",
        allocations=[NewPaymentAllocation(target_id=1, allocated_amount=Decimal("600"))],
    )

    assert payment_service.get_unallocated_amount(payment.id) == Decimal("400.00")


def test_get_customer_payments_filters(payment_service):
    older = payment_service.create_customer_payment(7, date(2025, 1, 10), "100")
    newer = payment_service.create_customer_payment(7, date(2025, 2, 10), "200")
    other = payment_service.create_customer_payment(8, date(2025, 2, 15), "300")

    assert [p.id for p in payment_service.get_customer_payments()] == [other.id, newer.id, older.id]
    assert [p.id for p in payment_service.get_customer_payments(customer_id=7)] == [
        newer.id,
        older.id,
    ]
    window = payment_service.get_customer_payments(
        date_from=date(2025, 2, 1), date_to=date(2025, 2, 10)
    )
    assert [p.id for p in window] == [newer.id]


def test_update_payment_below_allocated_rejected(payment_service, payment):
    payment_service.create_payment_allocation(payment.id, target_id=1, allocated_amount="600")

    with pytest.raises(OverAllocationError):
        payment_service.update_customer_payment(payment.id, amount="500")

    updated = payment_service.update_customer_payment(payment.id, amount="700", payment_method="bank")
    assert updated.amount == Decimal("700.00")
    assert updated.payment_method == "bank"


def test_delete_payment_removes_allocations(payment_service, payment):
    payment_service.create_payment_allocation(payment.id, target_id=1, allocated_amount="600")

    payment_service.delete_customer_payment(payment.id)

    assert payment_service.get_customer_payment(payment.id) is None
    assert payment_service.get_payment_allocations(payment.id) == []


def test_delete_missing_payment(payment_service):
    with pytest.raises(NotFoundError):
        payment_service.delete_customer_payment(999)
