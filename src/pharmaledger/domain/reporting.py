"""Reporting aggregator domain service.

Read-only projections over posted journal lines: grouped totals, trial
balance, profit and loss, and balance sheet.
"""

from collections import defaultdict
from datetime import date
from typing import Callable, Hashable, Iterable, Optional, TypeVar

from pharmaledger.database.base import Database
from pharmaledger.domain.entities import (
    Account,
    AccountBalance,
    AccountType,
    BalanceSheet,
    GroupBy,
    JournalLine,
    LedgerPosting,
    LedgerSummary,
    LineTotals,
    ProfitAndLoss,
    TrialBalance,
    TrialBalanceRow,
)
from pharmaledger.domain.money import money_sum

K = TypeVar("K", bound=Hashable)

# Types whose natural balance is on the debit side
DEBIT_NORMAL = {AccountType.ASSET, AccountType.EXPENSE}


def aggregate_lines(
    lines: Iterable[JournalLine], key: Callable[[JournalLine], K]
) -> dict[K, LineTotals]:
    """Sum debits and credits of journal lines per group key."""
    totals: dict[K, LineTotals] = defaultdict(LineTotals)
    for line in lines:
        group = key(line)
        totals[group] = totals[group].add(line)
    return dict(totals)


def month_key(day: date) -> str:
    """Group key for a calendar month, e.g. "2025-02"."""
    return f"{day.year:04d}-{day.month:02d}"


def signed_balance(account: Account, totals: LineTotals):
    """Balance in the account's normal direction (debit for assets/expenses)."""
    if account.type in DEBIT_NORMAL:
        return totals.debit_total - totals.credit_total
    return totals.credit_total - totals.debit_total


class ReportingService:
    """Service for building ledger reports from posted entries."""

    def __init__(self, db: Database):
        """Initialize reporting service.

        Args:
            db: Database instance
        """
        self.db = db

    def _account_index(self) -> dict[int, Account]:
        return {acc.id: acc for acc in self.db.list_accounts(include_inactive=True)}

    def _totals_by_account(
        self, start_date: Optional[date], end_date: Optional[date]
    ) -> dict[int, LineTotals]:
        postings = self.db.list_postings(date_from=start_date, date_to=end_date)
        return aggregate_lines((p.line for p in postings), key=lambda line: line.account_id)

    def summarize(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        group_by: GroupBy = GroupBy.ACCOUNT,
    ) -> LedgerSummary:
        """Group posted journal lines by account, month, or both.

        Keys are account IDs, "YYYY-MM" strings, or (account ID, "YYYY-MM")
        tuples respectively.
        """
        postings = self.db.list_postings(date_from=start_date, date_to=end_date)
        dates = {p.line.id: p.entry_date for p in postings}
        lines = [p.line for p in postings]

        if group_by == GroupBy.ACCOUNT:
            groups = aggregate_lines(lines, key=lambda line: line.account_id)
        elif group_by == GroupBy.MONTH:
            groups = aggregate_lines(lines, key=lambda line: month_key(dates[line.id]))
        else:
            groups = aggregate_lines(
                lines, key=lambda line: (line.account_id, month_key(dates[line.id]))
            )

        return LedgerSummary(
            group_by=group_by, start_date=start_date, end_date=end_date, groups=groups
        )

    def trial_balance(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_type: Optional[AccountType] = None,
    ) -> TrialBalance:
        """Debit and credit totals per account.

        Lists every active account plus any deactivated account that has
        activity in the window, ordered by code.
        """
        totals = self._totals_by_account(start_date, end_date)
        rows = []
        for account in sorted(self._account_index().values(), key=lambda a: (a.code, a.id)):
            if account_type is not None and account.type != account_type:
                continue
            account_totals = totals.get(account.id)
            if account_totals is None and not account.is_active:
                continue
            account_totals = account_totals or LineTotals()
            rows.append(
                TrialBalanceRow(
                    account=account,
                    debit_total=account_totals.debit_total,
                    credit_total=account_totals.credit_total,
                )
            )

        return TrialBalance(
            start_date=start_date,
            end_date=end_date,
            rows=tuple(rows),
            total_debits=money_sum(r.debit_total for r in rows),
            total_credits=money_sum(r.credit_total for r in rows),
        )

    def _section(
        self, totals: dict[int, LineTotals], accounts: dict[int, Account], account_type: AccountType
    ) -> tuple[AccountBalance, ...]:
        section = [
            AccountBalance(account=accounts[account_id], amount=signed_balance(accounts[account_id], t))
            for account_id, t in totals.items()
            if account_id in accounts and accounts[account_id].type == account_type
        ]
        return tuple(sorted(section, key=lambda b: (b.account.code, b.account.id)))

    def profit_and_loss(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> ProfitAndLoss:
        """Revenue and expense balances for a window."""
        totals = self._totals_by_account(start_date, end_date)
        accounts = self._account_index()
        revenue = self._section(totals, accounts, AccountType.REVENUE)
        expenses = self._section(totals, accounts, AccountType.EXPENSE)
        return ProfitAndLoss(
            start_date=start_date,
            end_date=end_date,
            revenue=revenue,
            expenses=expenses,
            total_revenue=money_sum(b.amount for b in revenue),
            total_expenses=money_sum(b.amount for b in expenses),
        )

    def balance_sheet(self, as_of: Optional[date] = None) -> BalanceSheet:
        """Asset, liability and equity balances as of a date.

        Revenue minus expenses up to the date is reported as current
        earnings and included in total equity, so a ledger built from
        balanced entries always balances.
        """
        totals = self._totals_by_account(None, as_of)
        accounts = self._account_index()
        assets = self._section(totals, accounts, AccountType.ASSET)
        liabilities = self._section(totals, accounts, AccountType.LIABILITY)
        equity = self._section(totals, accounts, AccountType.EQUITY)

        earnings = money_sum(
            b.amount for b in self._section(totals, accounts, AccountType.REVENUE)
        ) - money_sum(b.amount for b in self._section(totals, accounts, AccountType.EXPENSE))

        return BalanceSheet(
            as_of=as_of,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            current_earnings=earnings,
            total_assets=money_sum(b.amount for b in assets),
            total_liabilities=money_sum(b.amount for b in liabilities),
            total_equity=money_sum(b.amount for b in equity) + earnings,
        )

    def postings_for_account(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LedgerPosting]:
        """Posted lines of one account in date order."""
        return [
            p
            for p in self.db.list_postings(date_from=start_date, date_to=end_date)
            if p.line.account_id == account_id
        ]
