"""Journal entry commands."""

import click
from pharmaledger.cli.account_resolution import resolve_account_or_exit
from pharmaledger.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from pharmaledger.cli.error_handling import handle_domain_error
from pharmaledger.domain.account import AccountService
from pharmaledger.domain.entities import JournalStatus, NewJournalLine
from pharmaledger.domain.errors import DomainError, StorageError
from pharmaledger.domain.journal import JournalService
from pharmaledger.utils.amount_parser import parse_amount
from pharmaledger.utils.date_parser import parse_date


def _parse_line(ctx, account_service: AccountService, raw: str) -> NewJournalLine:
    """Parse ACCOUNT:DEBIT:CREDIT into a NewJournalLine."""
    parts = raw.rsplit(":", 2)
    if len(parts) != 3:
        click.echo(f"Error: Invalid line '{raw}'. Expected ACCOUNT:DEBIT:CREDIT", err=True)
        ctx.exit(1)

    account, debit, credit = parts
    account_id = resolve_account_or_exit(ctx, account_service, account, for_posting=True)
    try:
        return NewJournalLine(
            account_id=account_id,
            debit_amount=parse_amount(debit or "0"),
            credit_amount=parse_amount(credit or "0"),
        )
    except ValueError as e:
        click.echo(f"Error: Invalid amount in line '{raw}': {e}", err=True)
        ctx.exit(1)


def _echo_entry(service: JournalService, account_service: AccountService, entry) -> None:
    click.echo(f"Entry:     {entry.entry_number} (ID: {entry.id})")
    click.echo(f"Date:      {entry.date}")
    click.echo(f"Status:    {entry.status.value}")
    if entry.reference:
        click.echo(f"Reference: {entry.reference}")
    if entry.memo:
        click.echo(f"Memo:      {entry.memo}")
    if entry.reversal_of_id is not None:
        click.echo(f"Reverses:  entry {entry.reversal_of_id}")

    lines = service.get_journal_lines(entry.id)
    click.echo("-" * 70)
    click.echo(f"{'#':>3} {'Account':30s} {'Debit':>15s} {'Credit':>15s}")
    for line in lines:
        account = account_service.get_account(line.account_id)
        label = f"{account.code} {account.name}" if account else str(line.account_id)
        debit = f"{line.debit_amount:,.2f}" if line.debit_amount else ""
        credit = f"{line.credit_amount:,.2f}" if line.credit_amount else ""
        click.echo(f"{line.position:3d} {label[:30]:30s} {debit:>15s} {credit:>15s}")
    click.echo("-" * 70)
    total_debit = sum(line.debit_amount for line in lines)
    total_credit = sum(line.credit_amount for line in lines)
    click.echo(f"{'':3s} {'Total':30s} {total_debit:>15,.2f} {total_credit:>15,.2f}")


@click.group()
def journal_group():
    """Record and manage journal entries."""
    pass


@journal_group.command("create")
@click.option("--date", "entry_date", required=True, help="Entry date (YYYY-MM-DD or 'today')")
@click.option("--memo", help="Entry memo")
@click.option("--reference", help="External reference (invoice number etc.)")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="Line as ACCOUNT:DEBIT:CREDIT, e.g. 1100:500:0 (repeat for each line)",
)
@click.option("--post", is_flag=True, help="Post the entry immediately")
@click.pass_context
def create_entry(
    ctx,
    entry_date: str,
    memo: str | None,
    reference: str | None,
    lines: tuple[str, ...],
    post: bool,
):
    """Create a balanced journal entry.

    Examples:
        pharmaledger journal create --date 2025-01-15 --line 1100:500:0 --line 4100:0:500
        pharmaledger journal create --date today --memo "Rent" --line 6100:1200: --line 1100::1200 --post
    """
    db = ctx.obj["db"]
    service = JournalService(db)
    account_service = AccountService(db)

    try:
        parsed_date = parse_date(entry_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    new_lines = [_parse_line(ctx, account_service, raw) for raw in lines]

    try:
        entry = service.create_journal_entry(
            entry_date=parsed_date,
            lines=new_lines,
            memo=memo,
            reference=reference,
            status=JournalStatus.POSTED if post else JournalStatus.DRAFT,
        )
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created journal entry {entry.entry_number} (ID: {entry.id}, {entry.status.value})")


@journal_group.command("list")
@period_options
@click.option(
    "--status",
    type=click.Choice([s.value for s in JournalStatus], case_sensitive=False),
    help="Only list entries with this status",
)
@click.option("--year", type=int, help="Calendar year")
@click.option("--month", type=int, help="Month of --year (1-12)")
@click.pass_context
def list_entries(ctx, start_date, end_date, status, year, month, **period_kwargs):
    """List journal entries, newest first."""
    service = JournalService(ctx.obj["db"])
    period_flags = pop_period_flags(period_kwargs)

    try:
        if year is not None:
            entries = service.get_journal_entries_by_period(year, month)
            if status is not None:
                entries = [e for e in entries if e.status.value == status.lower()]
        elif month is not None:
            click.echo("Error: --month requires --year", err=True)
            ctx.exit(1)
            return
        else:
            start, end = resolve_cli_date_range(
                ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
            )
            entries = service.get_journal_entries(date_from=start, date_to=end, status=status)
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return

    if not entries:
        click.echo("No journal entries found.")
        return

    click.echo(f"{'ID':>5} {'Number':16s} {'Date':10s} {'Status':8s} Memo")
    click.echo("-" * 70)
    for entry in entries:
        click.echo(
            f"{entry.id:5d} {entry.entry_number:16s} {entry.date.isoformat():10s} "
            f"{entry.status.value:8s} {entry.memo or ''}"
        )


@journal_group.command("show")
@click.argument("journal_id", type=int)
@click.pass_context
def show_entry(ctx, journal_id: int):
    """Show a journal entry with its lines."""
    db = ctx.obj["db"]
    service = JournalService(db)
    try:
        entry = service.require_journal_entry(journal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _echo_entry(service, AccountService(db), entry)


@journal_group.command("post")
@click.argument("journal_id", type=int)
@click.pass_context
def post_entry(ctx, journal_id: int):
    """Post a draft journal entry. Posted entries cannot be changed."""
    service = JournalService(ctx.obj["db"])
    try:
        entry = service.post_journal_entry(journal_id)
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Posted journal entry {entry.entry_number}")


@journal_group.command("reverse")
@click.argument("journal_id", type=int)
@click.option("--date", "entry_date", help="Reversal date (defaults to the original date)")
@click.option("--memo", help="Reversal memo")
@click.pass_context
def reverse_entry(ctx, journal_id: int, entry_date: str | None, memo: str | None):
    """Reverse a posted journal entry with a mirror entry."""
    service = JournalService(ctx.obj["db"])

    parsed_date = None
    if entry_date:
        try:
            parsed_date = parse_date(entry_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        reversal = service.reverse_journal_entry(journal_id, entry_date=parsed_date, memo=memo)
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Reversed journal entry {journal_id} with {reversal.entry_number}")


@journal_group.command("delete")
@click.argument("journal_id", type=int)
@click.pass_context
def delete_entry(ctx, journal_id: int):
    """Delete a draft journal entry and its lines."""
    service = JournalService(ctx.obj["db"])
    try:
        service.delete_journal_entry(journal_id)
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted journal entry {journal_id}")


@journal_group.command("check")
@click.argument("journal_id", type=int)
@click.pass_context
def check_entry(ctx, journal_id: int):
    """Check whether a journal entry balances. Exits 1 when it does not."""
    service = JournalService(ctx.obj["db"])
    try:
        service.require_journal_entry(journal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if service.validate_journal_entry_balance(journal_id):
        click.echo(f"Journal entry {journal_id} is balanced")
    else:
        click.echo(f"Journal entry {journal_id} is NOT balanced", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
