"""Shared pytest fixtures for pharmaledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from pharmaledger.database.factories import create_sqlite_database
from pharmaledger.domain.account import AccountService
from pharmaledger.domain.entities import NewJournalLine
from pharmaledger.domain.journal import JournalService
from pharmaledger.domain.ledger import Ledger
from pharmaledger.domain.payment import PaymentService
from pharmaledger.domain.posting import PostingService
from pharmaledger.domain.reporting import ReportingService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db)


@pytest.fixture
def reporting_service(temp_db):
    """Create a ReportingService with a temporary database."""
    return ReportingService(temp_db)


@pytest.fixture
def posting_service(temp_db):
    """Create a PostingService with a temporary database."""
    return PostingService(temp_db)


@pytest.fixture
def ledger(temp_db):
    """Create a Ledger facade with a temporary database."""
    return Ledger(temp_db)


@pytest.fixture
def sample_accounts(account_service):
    """Create a cash and a sales account, keyed by code."""
    cash_id = account_service.create_account(code="1000", name="Cash", account_type="asset")
    sales_id = account_service.create_account(code="4000", name="Sales", account_type="revenue")
    return {
        "1000": account_service.get_account(cash_id),
        "4000": account_service.get_account(sales_id),
    }


@pytest.fixture
def standard_chart(account_service):
    """Create the standard chart of accounts used by automatic postings."""
    from pharmaledger.cli.commands.init_accounts import INITIAL_ACCOUNTS

    accounts = {}
    for code, name, account_type in INITIAL_ACCOUNTS:
        account_id = account_service.create_account(code=code, name=name, account_type=account_type)
        accounts[code] = account_service.get_account(account_id)
    return accounts


@pytest.fixture
def make_sale(journal_service, sample_accounts):
    """Return a helper that records a cash sale of the given amount."""

    def _make_sale(amount, entry_date=date(2025, 1, 1), status="posted", memo=None):
        amount = Decimal(str(amount))
        return journal_service.create_journal_entry(
            entry_date=entry_date,
            lines=[
                NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=amount),
                NewJournalLine(account_id=sample_accounts["4000"].id, credit_amount=amount),
            ],
            memo=memo,
            status=status,
        )

    return _make_sale


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
