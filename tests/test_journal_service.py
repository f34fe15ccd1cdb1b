"""Tests for JournalService."""

import pytest
from datetime import date
from decimal import Decimal

from pharmaledger.domain.entities import JournalStatus, NewJournalLine
from pharmaledger.domain.errors import (
    ConflictError,
    DependencyError,
    ImmutableEntryError,
    NotFoundError,
    StorageError,
    UnbalancedEntryError,
    ValidationError,
)


def _lines(accounts, debit, credit):
    return [
        NewJournalLine(account_id=accounts["1000"].id, debit_amount=Decimal(debit)),
        NewJournalLine(account_id=accounts["4000"].id, credit_amount=Decimal(credit)),
    ]


class TestCreateJournalEntry:
    """Tests for entry creation and the balance check."""

    def test_balanced_entry_is_created(self, journal_service, sample_accounts):
        """A 500/500 entry is stored with its lines and validates as balanced."""
        entry = journal_service.create_journal_entry(
            entry_date=date(2025, 1, 1), lines=_lines(sample_accounts, "500", "500")
        )

        assert entry.status == JournalStatus.DRAFT
        assert entry.entry_number == "JE-202501-0001"
        assert journal_service.validate_journal_entry_balance(entry.id) is True
        lines = journal_service.get_journal_lines(entry.id)
        assert [line.position for line in lines] == [1, 2]
        assert lines[0].account_id == sample_accounts["1000"].id

    def test_unbalanced_entry_is_rejected(self, journal_service, sample_accounts):
        """A 500/499.99 entry is rejected and nothing is persisted."""
        with pytest.raises(UnbalancedEntryError) as exc_info:
            journal_service.create_journal_entry(
                entry_date=date(2025, 1, 1), lines=_lines(sample_accounts, "500", "499.99")
            )

        assert exc_info.value.total_debit == Decimal("500.00")
        assert exc_info.value.total_credit == Decimal("499.99")
        assert journal_service.get_journal_entries() == []

    def test_one_cent_difference_is_not_tolerated(self, journal_service, sample_accounts):
        """Balance is exact, no rounding tolerance."""
        with pytest.raises(UnbalancedEntryError):
            journal_service.create_journal_entry(
                entry_date=date(2025, 1, 1), lines=_lines(sample_accounts, "0.01", "0.02")
            )

    def test_float_amounts_balance_exactly(self, journal_service, sample_accounts):
        """0.1 + 0.2 debits balance a 0.3 credit."""
        entry = journal_service.create_journal_entry(
            entry_date=date(2025, 1, 1),
            lines=[
                NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=0.1),
                NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=0.2),
                NewJournalLine(account_id=sample_accounts["4000"].id, credit_amount=0.3),
            ],
        )
        assert journal_service.validate_journal_entry_balance(entry.id)

    def test_requires_two_lines(self, journal_service, sample_accounts):
        with pytest.raises(ValidationError, match="at least 2 lines"):
            journal_service.create_journal_entry(
                entry_date=date(2025, 1, 1),
                lines=[NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=Decimal("1"))],
            )

    @pytest.mark.parametrize(
        "debit,credit",
        [("0", "0"), ("5", "5"), ("-5", "0"), ("1.001", "0")],
    )
    def test_malformed_lines_rejected(self, journal_service, sample_accounts, debit, credit):
        """Each line needs exactly one positive two-place amount."""
        lines = [
            NewJournalLine(
                account_id=sample_accounts["1000"].id,
                debit_amount=Decimal(debit),
                credit_amount=Decimal(credit),
            ),
            NewJournalLine(account_id=sample_accounts["4000"].id, credit_amount=Decimal("5")),
        ]
        with pytest.raises(ValidationError):
            journal_service.create_journal_entry(entry_date=date(2025, 1, 1), lines=lines)

    def test_unknown_account_rejected(self, journal_service, sample_accounts):
        lines = [
            NewJournalLine(account_id=999, debit_amount=Decimal("5")),
            NewJournalLine(account_id=sample_accounts["4000"].id, credit_amount=Decimal("5")),
        ]
        with pytest.raises(NotFoundError):
            journal_service.create_journal_entry(entry_date=date(2025, 1, 1), lines=lines)

    def test_inactive_account_rejected(self, journal_service, account_service, sample_accounts):
        account_service.deactivate_account(sample_accounts["4000"].id)
        with pytest.raises(ValidationError, match="inactive"):
            journal_service.create_journal_entry(
                entry_date=date(2025, 1, 1), lines=_lines(sample_accounts, "5", "5")
            )

    def test_storage_failure_mid_write_rolls_back(
        self, journal_service, temp_db, sample_accounts, monkeypatch
    ):
        """A failure after the header and first line leaves no partial entry."""
        original = temp_db.create_journal_line
        calls = []

        def failing_create_line(*args, **kwargs):
            calls.append(1)
            if len(calls) == 2:
                raise StorageError("connection lost")
            return original(*args, **kwargs)

        monkeypatch.setattr(temp_db, "create_journal_line", failing_create_line)

        with pytest.raises(StorageError):
            journal_service.create_journal_entry(
                entry_date=date(2025, 1, 1), lines=_lines(sample_accounts, "5", "5")
            )

        monkeypatch.undo()
        assert journal_service.get_journal_entries() == []
        assert temp_db.get_account_line_count(sample_accounts["1000"].id) == 0

    def test_entry_numbers_are_sequential_per_month(self, journal_service, make_sale):
        first = make_sale(10, entry_date=date(2025, 1, 5))
        second = make_sale(10, entry_date=date(2025, 1, 20))
        other_month = make_sale(10, entry_date=date(2025, 2, 1))

        assert first.entry_number == "JE-202501-0001"
        assert second.entry_number == "JE-202501-0002"
        assert other_month.entry_number == "JE-202502-0001"

    def test_entry_number_follows_highest_after_delete(self, journal_service, make_sale):
        make_sale(10, status="draft")
        second = make_sale(10, status="draft")
        journal_service.delete_journal_entry(
            next(e.id for e in journal_service.get_journal_entries() if e.id != second.id)
        )

        third = make_sale(10, status="draft")
        assert third.entry_number == "JE-202501-0003"

    def test_entry_number_past_four_digits(self, journal_service, temp_db):
        """JE-202501-10000 sorts above JE-202501-9999, so numbering keeps climbing."""
        temp_db.create_journal_entry(entry_number="JE-202501-9999", entry_date=date(2025, 1, 2))
        assert journal_service.next_entry_number(date(2025, 1, 3)) == "JE-202501-10000"

        temp_db.create_journal_entry(entry_number="JE-202501-10000", entry_date=date(2025, 1, 3))
        assert journal_service.next_entry_number(date(2025, 1, 4)) == "JE-202501-10001"


class TestJournalLines:
    """Tests for line retrieval and appending."""

    def test_get_journal_lines_is_idempotent(self, journal_service, make_sale):
        entry = make_sale(100)

        assert journal_service.get_journal_lines(entry.id) == journal_service.get_journal_lines(entry.id)

    def test_zero_line_entry_is_balanced(self, journal_service, make_sale, temp_db):
        """An entry without lines balances trivially (0 == 0)."""
        entry = make_sale(100, status="draft")
        temp_db.delete_journal_lines(entry.id)

        assert journal_service.get_journal_lines(entry.id) == []
        assert journal_service.validate_journal_entry_balance(entry.id) is True

    def test_append_line_to_draft(self, journal_service, make_sale, sample_accounts):
        """Appending a line may unbalance a draft until it is fixed."""
        entry = make_sale(500, status="draft")

        line = journal_service.create_journal_line(
            entry.id, NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=Decimal("0.01"))
        )

        assert line.position == 3
        assert journal_service.validate_journal_entry_balance(entry.id) is False
        with pytest.raises(UnbalancedEntryError):
            journal_service.post_journal_entry(entry.id)

    def test_append_line_position_conflict(self, journal_service, make_sale, sample_accounts):
        entry = make_sale(500, status="draft")
        with pytest.raises(ConflictError):
            journal_service.create_journal_line(
                entry.id,
                NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=Decimal("1")),
                position=1,
            )

    def test_append_line_to_posted_entry_rejected(self, journal_service, make_sale, sample_accounts):
        entry = make_sale(500)
        with pytest.raises(ImmutableEntryError):
            journal_service.create_journal_line(
                entry.id, NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=Decimal("1"))
            )

    def test_append_line_to_missing_entry(self, journal_service, sample_accounts):
        with pytest.raises(NotFoundError):
            journal_service.create_journal_line(
                999, NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=Decimal("1"))
            )


class TestLifecycle:
    """Tests for draft editing, posting, reversal and deletion."""

    def test_post_draft(self, journal_service, make_sale):
        entry = make_sale(100, status="draft")

        posted = journal_service.post_journal_entry(entry.id)

        assert posted.status == JournalStatus.POSTED
        assert posted.posted_at is not None

    def test_post_twice_rejected(self, journal_service, make_sale):
        entry = make_sale(100)
        with pytest.raises(ImmutableEntryError):
            journal_service.post_journal_entry(entry.id)

    def test_update_draft_replaces_lines(self, journal_service, make_sale, sample_accounts):
        entry = make_sale(100, status="draft")

        updated = journal_service.update_journal_entry(
            entry.id, memo="Corrected", lines=_lines(sample_accounts, "250", "250")
        )

        assert updated.memo == "Corrected"
        lines = journal_service.get_journal_lines(entry.id)
        assert [line.debit_amount for line in lines] == [Decimal("250.00"), Decimal("0.00")]

    def test_update_with_unbalanced_lines_keeps_old_lines(
        self, journal_service, make_sale, sample_accounts
    ):
        entry = make_sale(100, status="draft")

        with pytest.raises(UnbalancedEntryError):
            journal_service.update_journal_entry(entry.id, lines=_lines(sample_accounts, "250", "25"))

        lines = journal_service.get_journal_lines(entry.id)
        assert lines[0].debit_amount == Decimal("100.00")

    def test_update_posted_entry_rejected(self, journal_service, make_sale):
        entry = make_sale(100)
        with pytest.raises(ImmutableEntryError):
            journal_service.update_journal_entry(entry.id, memo="changed")

    def test_delete_posted_entry_rejected(self, journal_service, make_sale):
        entry = make_sale(100)
        with pytest.raises(ImmutableEntryError):
            journal_service.delete_journal_entry(entry.id)
        assert journal_service.get_journal_entry(entry.id) is not None

    def test_delete_draft(self, journal_service, make_sale):
        entry = make_sale(100, status="draft")
        journal_service.delete_journal_entry(entry.id)
        assert journal_service.get_journal_entry(entry.id) is None
        assert journal_service.get_journal_lines(entry.id) == []

    def test_delete_draft_with_payment_allocation_rejected(
        self, journal_service, payment_service, make_sale
    ):
        entry = make_sale(100, status="draft")
        payment = payment_service.create_customer_payment(7, date(2025, 1, 5), "100")
        payment_service.create_payment_allocation(
            payment.id, target_id=entry.id, allocated_amount="40", target_type="journal_entry"
        )

        with pytest.raises(DependencyError, match="payment allocation"):
            journal_service.delete_journal_entry(entry.id)
        assert journal_service.get_journal_entry(entry.id) is not None

    def test_reverse_posted_entry(self, journal_service, make_sale, sample_accounts):
        entry = make_sale(100, entry_date=date(2025, 1, 10))

        reversal = journal_service.reverse_journal_entry(entry.id, entry_date=date(2025, 1, 31))

        assert reversal.is_posted
        assert reversal.reversal_of_id == entry.id
        assert reversal.memo == f"Reversal of {entry.entry_number}"
        lines = journal_service.get_journal_lines(reversal.id)
        assert lines[0].account_id == sample_accounts["1000"].id
        assert lines[0].credit_amount == Decimal("100.00")
        assert lines[1].debit_amount == Decimal("100.00")

    def test_reverse_after_account_deactivated(
        self, journal_service, account_service, make_sale, sample_accounts
    ):
        """A referenced account is deactivated on delete but its entries stay reversible."""
        entry = make_sale(100)
        assert account_service.delete_account(sample_accounts["4000"].id) is False

        reversal = journal_service.reverse_journal_entry(entry.id)

        lines = journal_service.get_journal_lines(reversal.id)
        assert lines[1].account_id == sample_accounts["4000"].id
        assert lines[1].debit_amount == Decimal("100.00")
        assert journal_service.validate_journal_entry_balance(reversal.id)

    def test_new_entry_on_deactivated_account_still_rejected(
        self, journal_service, account_service, make_sale, sample_accounts
    ):
        make_sale(100)
        account_service.delete_account(sample_accounts["4000"].id)

        with pytest.raises(ValidationError, match="inactive"):
            journal_service.create_journal_entry(
                entry_date=date(2025, 1, 2), lines=_lines(sample_accounts, "5", "5")
            )

    def test_reverse_twice_rejected(self, journal_service, make_sale):
        entry = make_sale(100)
        journal_service.reverse_journal_entry(entry.id)
        with pytest.raises(ConflictError, match="already reversed"):
            journal_service.reverse_journal_entry(entry.id)

    def test_reverse_draft_rejected(self, journal_service, make_sale):
        entry = make_sale(100, status="draft")
        with pytest.raises(ValidationError):
            journal_service.reverse_journal_entry(entry.id)


class TestQueries:
    """Tests for listing entries by range and period."""

    def test_filter_by_status(self, journal_service, make_sale):
        draft = make_sale(10, status="draft")
        posted = make_sale(20)

        assert [e.id for e in journal_service.get_journal_entries(status="draft")] == [draft.id]
        assert [e.id for e in journal_service.get_journal_entries(status=JournalStatus.POSTED)] == [
            posted.id
        ]

    def test_date_range_is_inclusive(self, journal_service, make_sale):
        make_sale(10, entry_date=date(2024, 12, 31))
        inside_start = make_sale(10, entry_date=date(2025, 1, 1))
        inside_end = make_sale(10, entry_date=date(2025, 1, 31))
        make_sale(10, entry_date=date(2025, 2, 1))

        entries = journal_service.get_journal_entries(
            date_from=date(2025, 1, 1), date_to=date(2025, 1, 31)
        )

        assert [e.id for e in entries] == [inside_end.id, inside_start.id]

    def test_february_period(self, journal_service, make_sale):
        """February 2025 runs from the 1st to the 28th inclusive."""
        make_sale(10, entry_date=date(2025, 1, 31))
        first = make_sale(10, entry_date=date(2025, 2, 1))
        last = make_sale(10, entry_date=date(2025, 2, 28))
        make_sale(10, entry_date=date(2025, 3, 1))

        entries = journal_service.get_journal_entries_by_period(2025, 2)

        assert {e.id for e in entries} == {first.id, last.id}

    def test_leap_year_february_includes_29th(self, journal_service, make_sale):
        leap_day = make_sale(10, entry_date=date(2024, 2, 29))
        make_sale(10, entry_date=date(2024, 3, 1))

        entries = journal_service.get_journal_entries_by_period(2024, 2)

        assert [e.id for e in entries] == [leap_day.id]

    def test_whole_year_period(self, journal_service, make_sale):
        jan = make_sale(10, entry_date=date(2025, 1, 1))
        dec = make_sale(10, entry_date=date(2025, 12, 31))
        make_sale(10, entry_date=date(2026, 1, 1))

        entries = journal_service.get_journal_entries_by_period(2025)

        assert [e.id for e in entries] == [dec.id, jan.id]

    def test_invalid_month(self, journal_service):
        with pytest.raises(ValidationError, match="Invalid month"):
            journal_service.get_journal_entries_by_period(2025, 13)
