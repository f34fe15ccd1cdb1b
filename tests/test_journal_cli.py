"""Tests for journal commands."""

from datetime import date

from pharmaledger.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "journal", *args])


def test_journal_create_balanced(cli_runner, temp_db, sample_accounts):
    result = _invoke(
        cli_runner,
        temp_db,
        "create",
        "--date",
        "2025-01-01",
        "--memo",
        "Cash sale",
        "--line",
        "1000:500:0",
        "--line",
        "4000:0:500",
    )

    assert result.exit_code == 0
    assert "Created journal entry JE-202501-0001" in result.output
    assert "draft" in result.output


def test_journal_create_unbalanced(cli_runner, temp_db, sample_accounts):
    result = _invoke(
        cli_runner,
        temp_db,
        "create",
        "--date",
        "2025-01-01",
        "--line",
        "1000:500:0",
        "--line",
        "4000:0:499.99",
    )

    assert result.exit_code == 1
    assert "unbalanced" in result.output

    listing = _invoke(cli_runner, temp_db, "list")
    assert "No journal entries found" in listing.output


def test_journal_create_and_post(cli_runner, temp_db, sample_accounts):
    result = _invoke(
        cli_runner,
        temp_db,
        "create",
        "--date",
        "2025-01-01",
        "--line",
        "1000:250:",
        "--line",
        "4000::250",
        "--post",
    )

    assert result.exit_code == 0
    assert "posted" in result.output


def test_journal_create_bad_line(cli_runner, temp_db, sample_accounts):
    result = _invoke(cli_runner, temp_db, "create", "--date", "2025-01-01", "--line", "1000-500")

    assert result.exit_code == 1
    assert "Expected ACCOUNT:DEBIT:CREDIT" in result.output


def test_journal_create_unknown_account(cli_runner, temp_db, sample_accounts):
    result = _invoke(
        cli_runner,
        temp_db,
        "create",
        "--date",
        "2025-01-01",
        "--line",
        "9999:5:0",
        "--line",
        "4000:0:5",
    )

    assert result.exit_code == 1
    assert "not found" in result.output


def test_journal_list_by_period(cli_runner, temp_db, make_sale):
    make_sale(10, entry_date=date(2024, 2, 29), memo="Leap day")
    make_sale(10, entry_date=date(2024, 3, 1), memo="March")

    result = _invoke(cli_runner, temp_db, "list", "--year", "2024", "--month", "2")

    assert result.exit_code == 0
    assert "Leap day" in result.output
    assert "March" not in result.output


def test_journal_list_month_requires_year(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "list", "--month", "2")

    assert result.exit_code == 1
    assert "--month requires --year" in result.output


def test_journal_list_by_status(cli_runner, temp_db, make_sale):
    make_sale(10, status="draft", memo="Pending")
    make_sale(10, memo="Final")

    result = _invoke(cli_runner, temp_db, "list", "--status", "posted")

    assert "Final" in result.output
    assert "Pending" not in result.output


def test_journal_show(cli_runner, temp_db, make_sale):
    entry = make_sale(1234.5, memo="Big sale")

    result = _invoke(cli_runner, temp_db, "show", str(entry.id))

    assert result.exit_code == 0
    assert entry.entry_number in result.output
    assert "1,234.50" in result.output
    assert "1000 Cash" in result.output


def test_journal_post_and_reverse(cli_runner, temp_db, make_sale):
    entry = make_sale(100, status="draft")

    posted = _invoke(cli_runner, temp_db, "post", str(entry.id))
    assert posted.exit_code == 0
    assert f"Posted journal entry {entry.entry_number}" in posted.output

    again = _invoke(cli_runner, temp_db, "post", str(entry.id))
    assert again.exit_code == 1
    assert "it is posted" in again.output

    reversed_ = _invoke(cli_runner, temp_db, "reverse", str(entry.id), "--date", "2025-01-31")
    assert reversed_.exit_code == 0
    assert "JE-202501-0002" in reversed_.output


def test_journal_delete(cli_runner, temp_db, make_sale):
    draft = make_sale(100, status="draft")
    posted = make_sale(100)

    assert _invoke(cli_runner, temp_db, "delete", str(draft.id)).exit_code == 0

    result = _invoke(cli_runner, temp_db, "delete", str(posted.id))
    assert result.exit_code == 1
    assert "Cannot delete" in result.output


def test_journal_check(cli_runner, temp_db, make_sale, journal_service, sample_accounts):
    from decimal import Decimal
    from pharmaledger.domain.entities import NewJournalLine

    entry = make_sale(100, status="draft")
    assert _invoke(cli_runner, temp_db, "check", str(entry.id)).exit_code == 0

    journal_service.create_journal_line(
        entry.id, NewJournalLine(account_id=sample_accounts["1000"].id, debit_amount=Decimal("1"))
    )
    result = _invoke(cli_runner, temp_db, "check", str(entry.id))

    assert result.exit_code == 1
    assert "NOT balanced" in result.output


def test_journal_show_missing(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "show", "42")

    assert result.exit_code == 1
    assert "Journal entry 42 not found" in result.output


def test_journal_create_inactive_account(cli_runner, temp_db, account_service, sample_accounts):
    account_service.deactivate_account(sample_accounts["4000"].id)

    result = _invoke(
        cli_runner, temp_db, "create", "--date", "2025-01-01", "--line", "1000:5:0", "--line", "4000:0:5"
    )

    assert result.exit_code == 1
    assert "4000 'Sales' is inactive" in result.output
