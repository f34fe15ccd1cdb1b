"""Journal engine domain service.

Journal entries are written together with their lines inside one database
transaction. Amounts are Decimals, so the balance check is an exact
comparison: an entry whose debits and credits differ by any amount is
rejected and nothing is persisted.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from pharmaledger.database.base import Database
from pharmaledger.domain.entities import (
    AllocationTarget,
    JournalEntry,
    JournalLine,
    JournalStatus,
    NewJournalLine,
)
from pharmaledger.domain.errors import (
    ConflictError,
    DependencyError,
    ImmutableEntryError,
    NotFoundError,
    UnbalancedEntryError,
    ValidationError,
    account_inactive,
    account_not_found,
    journal_entry_not_found,
)
from pharmaledger.domain.money import money_sum, to_money
from pharmaledger.utils.date_parser import get_period_bounds

logger = logging.getLogger(__name__)

MIN_LINES = 2


def parse_status(value: JournalStatus | str) -> JournalStatus:
    """Coerce a string to a JournalStatus."""
    if isinstance(value, JournalStatus):
        return value
    try:
        return JournalStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown journal status '{value}'. Valid statuses: draft, posted")


def line_totals(lines: Sequence[JournalLine | NewJournalLine]) -> tuple[Decimal, Decimal]:
    """Return (total debits, total credits) for a set of lines."""
    return (
        money_sum(line.debit_amount for line in lines),
        money_sum(line.credit_amount for line in lines),
    )


class JournalService:
    """Service for creating, posting and querying journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    # Validation helpers
    def _normalize_line(
        self, line: NewJournalLine, index: int, allow_inactive: bool = False
    ) -> NewJournalLine:
        """Validate one line and return it with two-place amounts.

        A line must carry exactly one non-zero, non-negative amount and post
        to an existing account, which must be active unless allow_inactive.
        """
        debit = to_money(line.debit_amount, f"line {index} debit")
        credit = to_money(line.credit_amount, f"line {index} credit")

        if debit < 0 or credit < 0:
            raise ValidationError(f"Line {index}: amounts cannot be negative")
        if (debit == 0) == (credit == 0):
            raise ValidationError(
                f"Line {index}: exactly one of debit or credit must be non-zero"
            )

        account = self.db.get_account(line.account_id)
        if account is None:
            raise NotFoundError(account_not_found(line.account_id))
        if not account.is_active and not allow_inactive:
            raise ValidationError(account_inactive(line.account_id))

        return NewJournalLine(
            account_id=line.account_id,
            debit_amount=debit,
            credit_amount=credit,
            description=line.description,
        )

    def _validate_lines(
        self, lines: Sequence[NewJournalLine], allow_inactive: bool = False
    ) -> list[NewJournalLine]:
        if len(lines) < MIN_LINES:
            raise ValidationError(
                f"A journal entry needs at least {MIN_LINES} lines, got {len(lines)}"
            )
        normalized = [
            self._normalize_line(line, i, allow_inactive) for i, line in enumerate(lines, start=1)
        ]

        total_debit, total_credit = line_totals(normalized)
        if total_debit != total_credit:
            logger.warning(
                "Rejected unbalanced journal entry: debits %s, credits %s",
                total_debit,
                total_credit,
            )
            raise UnbalancedEntryError(total_debit, total_credit)
        return normalized

    def _insert_lines(self, journal_id: int, lines: Sequence[NewJournalLine]) -> None:
        for position, line in enumerate(lines, start=1):
            self.db.create_journal_line(
                journal_id=journal_id,
                account_id=line.account_id,
                debit_amount=line.debit_amount,
                credit_amount=line.credit_amount,
                position=position,
                description=line.description,
            )

    def _require_draft(self, journal_id: int, action: str) -> JournalEntry:
        entry = self.require_journal_entry(journal_id)
        if entry.is_posted:
            raise ImmutableEntryError(journal_id, action)
        return entry

    def next_entry_number(self, entry_date: date) -> str:
        """Next JE-YYYYMM-NNNN number for the month of entry_date."""
        prefix = f"JE-{entry_date.year}{entry_date.month:02d}-"
        last = self.db.get_last_entry_number(prefix)
        sequence = int(last[len(prefix):]) + 1 if last else 1
        return f"{prefix}{sequence:04d}"

    # Commands
    def create_journal_entry(
        self,
        entry_date: date,
        lines: Sequence[NewJournalLine],
        memo: Optional[str] = None,
        reference: Optional[str] = None,
        status: JournalStatus | str = JournalStatus.DRAFT,
        reversal_of_id: Optional[int] = None,
    ) -> JournalEntry:
        """Create a journal entry with its lines in one transaction.

        Args:
            entry_date: Accounting date of the entry
            lines: At least two lines; positions follow the input order
            memo: Optional memo
            reference: Optional external reference (invoice number etc.)
            status: draft (default) or posted

        Returns:
            The created JournalEntry

        Raises:
            ValidationError: If a line is malformed or fewer than two lines are given
            NotFoundError: If a line references a missing account
            UnbalancedEntryError: If total debits differ from total credits
        """
        return self._write_entry(
            entry_date,
            self._validate_lines(lines),
            memo,
            reference,
            parse_status(status),
            reversal_of_id,
        )

    def _write_entry(
        self,
        entry_date: date,
        normalized: Sequence[NewJournalLine],
        memo: Optional[str],
        reference: Optional[str],
        entry_status: JournalStatus,
        reversal_of_id: Optional[int],
    ) -> JournalEntry:
        with self.db.transaction():
            journal_id = self.db.create_journal_entry(
                entry_number=self.next_entry_number(entry_date),
                entry_date=entry_date,
                memo=memo,
                reference=reference,
                status=entry_status.value,
                reversal_of_id=reversal_of_id,
            )
            self._insert_lines(journal_id, normalized)

            # Re-check against what was actually written before commit
            if not self.validate_journal_entry_balance(journal_id):
                total_debit, total_credit = line_totals(self.db.get_journal_lines(journal_id))
                raise UnbalancedEntryError(total_debit, total_credit)

        entry = self.require_journal_entry(journal_id)
        logger.info(
            "Created journal entry %s (%s) with %d lines",
            entry.entry_number,
            entry.status.value,
            len(normalized),
        )
        return entry

    def create_journal_line(
        self, journal_id: int, line: NewJournalLine, position: Optional[int] = None
    ) -> JournalLine:
        """Append one line to a draft entry.

        The entry may be unbalanced until further lines are added; posting
        checks the balance again.

        Raises:
            NotFoundError: If the entry or account does not exist
            ImmutableEntryError: If the entry is posted
            ValidationError: If the line is malformed
        """
        self._require_draft(journal_id, "add a line to")
        normalized = self._normalize_line(line, 1)

        existing = self.db.get_journal_lines(journal_id)
        if position is None:
            position = max((existing_line.position for existing_line in existing), default=0) + 1
        elif any(existing_line.position == position for existing_line in existing):
            raise ConflictError(f"Journal entry {journal_id} already has a line at position {position}")

        line_id = self.db.create_journal_line(
            journal_id=journal_id,
            account_id=normalized.account_id,
            debit_amount=normalized.debit_amount,
            credit_amount=normalized.credit_amount,
            position=position,
            description=normalized.description,
        )
        return next(
            written for written in self.db.get_journal_lines(journal_id) if written.id == line_id
        )

    def update_journal_entry(
        self,
        journal_id: int,
        entry_date: Optional[date] = None,
        memo: Optional[str] = None,
        reference: Optional[str] = None,
        lines: Optional[Sequence[NewJournalLine]] = None,
    ) -> JournalEntry:
        """Edit a draft entry. Replacing lines re-runs the balance check atomically.

        Raises:
            NotFoundError: If the entry does not exist
            ImmutableEntryError: If the entry is posted
            UnbalancedEntryError: If replacement lines do not balance
        """
        self._require_draft(journal_id, "modify")
        normalized = self._validate_lines(lines) if lines is not None else None

        with self.db.transaction():
            self.db.update_journal_entry(
                journal_id, entry_date=entry_date, memo=memo, reference=reference
            )
            if normalized is not None:
                self.db.delete_journal_lines(journal_id)
                self._insert_lines(journal_id, normalized)

        return self.require_journal_entry(journal_id)

    def post_journal_entry(self, journal_id: int) -> JournalEntry:
        """Move a draft entry to posted.

        Raises:
            ImmutableEntryError: If the entry is already posted
            ValidationError: If the entry has fewer than two lines
            UnbalancedEntryError: If the entry does not balance
        """
        self._require_draft(journal_id, "post")
        lines = self.db.get_journal_lines(journal_id)
        if len(lines) < MIN_LINES:
            raise ValidationError(
                f"Journal entry {journal_id} needs at least {MIN_LINES} lines to be posted"
            )
        total_debit, total_credit = line_totals(lines)
        if total_debit != total_credit:
            logger.warning("Refused to post unbalanced journal entry %s", journal_id)
            raise UnbalancedEntryError(total_debit, total_credit)

        self.db.update_journal_entry(journal_id, status=JournalStatus.POSTED.value)
        entry = self.require_journal_entry(journal_id)
        logger.info("Posted journal entry %s", entry.entry_number)
        return entry

    def reverse_journal_entry(
        self,
        journal_id: int,
        entry_date: Optional[date] = None,
        memo: Optional[str] = None,
    ) -> JournalEntry:
        """Correct a posted entry by posting its mirror image.

        Args:
            journal_id: Posted entry to reverse
            entry_date: Date of the reversal (defaults to the original date)
            memo: Memo for the reversal (defaults to "Reversal of <number>")

        Raises:
            ValidationError: If the entry is still a draft
            ConflictError: If the entry was already reversed
        """
        original = self.require_journal_entry(journal_id)
        if not original.is_posted:
            raise ValidationError(
                f"Journal entry {journal_id} is a draft; edit or delete it instead of reversing"
            )
        existing = self.db.get_reversal_of(journal_id)
        if existing is not None:
            raise ConflictError(
                f"Journal entry {journal_id} was already reversed by {existing.entry_number}"
            )

        mirrored = [
            NewJournalLine(
                account_id=line.account_id,
                debit_amount=line.credit_amount,
                credit_amount=line.debit_amount,
                description=line.description,
            )
            for line in self.db.get_journal_lines(journal_id)
        ]
        # Accounts deactivated since posting still take the mirror lines
        reversal = self._write_entry(
            entry_date or original.date,
            self._validate_lines(mirrored, allow_inactive=True),
            memo or f"Reversal of {original.entry_number}",
            original.reference,
            JournalStatus.POSTED,
            journal_id,
        )
        logger.info("Reversed journal entry %s with %s", original.entry_number, reversal.entry_number)
        return reversal

    def delete_journal_entry(self, journal_id: int) -> None:
        """Delete a draft entry and its lines.

        Raises:
            ImmutableEntryError: If the entry is posted
            DependencyError: If a payment allocation points at the entry
        """
        self._require_draft(journal_id, "delete")
        allocations = self.db.count_allocations_to_target(
            AllocationTarget.JOURNAL_ENTRY.value, journal_id
        )
        if allocations:
            raise DependencyError(
                f"Cannot delete journal entry {journal_id}: {allocations} payment allocation(s) reference it"
            )
        self.db.delete_journal_entry(journal_id)
        logger.info("Deleted draft journal entry %s", journal_id)

    # Queries
    def get_journal_entry(self, journal_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        return self.db.get_journal_entry(journal_id)

    def require_journal_entry(self, journal_id: int) -> JournalEntry:
        """Get journal entry by ID or raise NotFoundError."""
        entry = self.db.get_journal_entry(journal_id)
        if entry is None:
            raise NotFoundError(journal_entry_not_found(journal_id))
        return entry

    def get_journal_lines(self, journal_id: int) -> list[JournalLine]:
        """Get the lines of an entry ordered by position ascending.

        Reports rely on this order: the first line is the primary posting.
        """
        return self.db.get_journal_lines(journal_id)

    def validate_journal_entry_balance(self, journal_id: int) -> bool:
        """Check that an entry's debits equal its credits exactly.

        An entry with no lines is balanced (0 == 0).
        """
        total_debit, total_credit = line_totals(self.db.get_journal_lines(journal_id))
        return total_debit == total_credit

    def get_journal_entries(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: JournalStatus | str | None = None,
    ) -> list[JournalEntry]:
        """List entries in an inclusive date window, newest first."""
        status_value = parse_status(status).value if status is not None else None
        return self.db.list_journal_entries(
            date_from=date_from, date_to=date_to, status=status_value
        )

    def get_journal_entries_by_period(
        self, year: int, month: Optional[int] = None
    ) -> list[JournalEntry]:
        """List entries for a calendar year, or one month of it."""
        try:
            start, end = get_period_bounds(year, month)
        except ValueError as e:
            raise ValidationError(str(e))
        return self.get_journal_entries(date_from=start, date_to=end)
